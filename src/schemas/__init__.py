"""Pydantic schemas for API requests and responses."""

from src.schemas.answer import AnswerCreate, AnswerResponse
from src.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse
from src.schemas.question import NearbyQuestionResponse, QuestionCreate, QuestionResponse
from src.schemas.user import AuthorSummary, FavoriteResponse, UserRoleUpdate, UserUpdate

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    "AuthorSummary",
    "UserUpdate",
    "UserRoleUpdate",
    "FavoriteResponse",
    "QuestionCreate",
    "QuestionResponse",
    "NearbyQuestionResponse",
    "AnswerCreate",
    "AnswerResponse",
]
