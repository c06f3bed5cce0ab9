"""SQLAlchemy models."""

from src.models.answer import Answer
from src.models.favorite import QuestionFavorite
from src.models.question import Question
from src.models.user import User

__all__ = [
    "User",
    "Question",
    "Answer",
    "QuestionFavorite",
]
