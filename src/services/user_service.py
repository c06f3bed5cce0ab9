"""User directory: accounts, profiles and favorite sets."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.exceptions import ConflictError, NotFoundError
from src.models.enums import UserRole
from src.models.favorite import QuestionFavorite
from src.models.question import Question
from src.models.user import User
from src.services.question_service import QuestionService
from src.services.security import get_password_hash

logger = logging.getLogger(__name__)


class UserService:
    """Service for user-related operations.

    Like the other stores, methods flush but leave committing to the caller.
    """

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        email: str,
        password: str,
        name: str | None = None,
        role: UserRole | None = None,
    ) -> User:
        """Create a user, storing only a hash of the password."""
        email = email.lower()
        if self.get_by_email(email):
            raise ConflictError("User with this email already exists")

        user = User(
            email=email,
            password_hash=get_password_hash(password),
            name=name,
            role=(role or UserRole.CLIENT).value,
        )
        self.db.add(user)
        try:
            self.db.flush()
        except IntegrityError as e:
            # Lost a race with a concurrent registration
            self.db.rollback()
            raise ConflictError("User with this email already exists") from e
        return user

    def get_by_email(self, email: str) -> User | None:
        """Get a user by email."""
        return self.db.query(User).filter(User.email == email.lower()).first()

    def get_by_id(self, user_id: int) -> User | None:
        """Get a user by ID."""
        return self.db.query(User).filter(User.id == user_id).first()

    def _require(self, user_id: int) -> User:
        user = self.get_by_id(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    def list_users(self, page: int = 1, limit: int = 10) -> tuple[list[User], int]:
        """Page through users, oldest first. Returns (users, total)."""
        query = self.db.query(User)
        total = query.count()
        users = query.order_by(User.id).offset((page - 1) * limit).limit(limit).all()
        return users, total

    def update_profile(
        self, user_id: int, name: str | None = None, email: str | None = None
    ) -> User:
        """Update name and/or email."""
        user = self._require(user_id)
        if email is not None and email.lower() != user.email:
            if self.get_by_email(email):
                raise ConflictError("User with this email already exists")
            user.email = email.lower()
        if name is not None:
            user.name = name
        self.db.flush()
        return user

    def update_role(self, user_id: int, role: UserRole) -> User:
        """Change a user's role."""
        user = self._require(user_id)
        user.role = role.value
        self.db.flush()
        logger.info(f"User {user_id} role set to {role.value}")
        return user

    def add_favorite_question(self, user_id: int, question_id: int) -> User:
        """Add a question to the user's favorite set.

        Raises ConflictError if it is already there.
        """
        user = self._require(user_id)
        if question_id in user.favorite_question_ids:
            raise ConflictError("Question already in favorites")

        favorite = QuestionFavorite(user_id=user_id, question_id=question_id)
        self.db.add(favorite)
        try:
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            # Foreign key violation rather than a duplicate
            if not self.db.get(Question, question_id):
                raise NotFoundError("Question", question_id) from e
            raise ConflictError("Question already in favorites") from e
        self.db.refresh(user, ["favorites"])
        return user

    def remove_favorite_question(self, user_id: int, question_id: int) -> bool:
        """Remove a question from the user's favorite set.

        Returns True if it was removed, False if it was not a member.
        """
        self._require(user_id)
        removed = (
            self.db.query(QuestionFavorite)
            .filter(
                QuestionFavorite.user_id == user_id,
                QuestionFavorite.question_id == question_id,
            )
            .delete(synchronize_session=False)
        )
        self.db.flush()
        return removed > 0

    def get_favorite_questions(self, user_id: int) -> list[Question]:
        """The user's favorite questions, expanded, newest first."""
        user = self._require(user_id)
        self.db.refresh(user, ["favorites"])
        return QuestionService(self.db).get_by_ids(user.favorite_question_ids)
