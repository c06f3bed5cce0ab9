"""User model."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.enums import UserRole
from src.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User model for authentication, ownership and favorites."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.CLIENT.value)

    # Relationships
    questions = relationship("Question", back_populates="author")
    answers = relationship("Answer", back_populates="author")
    favorites = relationship(
        "QuestionFavorite",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="QuestionFavorite.created_at",
    )

    @property
    def favorite_question_ids(self) -> list[int]:
        """IDs of favorited questions, oldest favorite first."""
        return [fav.question_id for fav in self.favorites]

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value
