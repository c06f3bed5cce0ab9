"""Question favorite model."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, func
from sqlalchemy.orm import relationship

from src.database import Base


class QuestionFavorite(Base):
    """A question in a user's favorite set.

    The composite primary key makes each (user, question) pair unique.
    """

    __tablename__ = "question_favorites"

    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    question_id = Column(
        Integer, ForeignKey("questions.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    user = relationship("User", back_populates="favorites")
    question = relationship("Question")
