"""FastAPI dependencies for authentication, database and services."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.database import get_db
from src.exceptions import ForbiddenError, UnauthorizedError
from src.models.user import User
from src.services.answer_service import AnswerService
from src.services.auth import resolve_user
from src.services.question_service import QuestionService
from src.services.user_service import UserService

# auto_error=False so a missing header is reported as 401, not 403
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    if credentials is None:
        raise UnauthorizedError("Not authenticated")
    return resolve_user(db, credentials.credentials)


def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Only let admins through."""
    if not current_user.is_admin:
        raise ForbiddenError("Admin access required")
    return current_user


def get_question_service(
    db: Annotated[Session, Depends(get_db)],
) -> QuestionService:
    """Get question service."""
    return QuestionService(db)


def get_answer_service(
    db: Annotated[Session, Depends(get_db)],
) -> AnswerService:
    """Get answer service."""
    return AnswerService(db)


def get_user_service(
    db: Annotated[Session, Depends(get_db)],
) -> UserService:
    """Get user service."""
    return UserService(db)
