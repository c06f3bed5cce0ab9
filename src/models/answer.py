"""Answer model."""

from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship, validates

from src.database import Base
from src.models.mixins import TimestampMixin


class Answer(Base, TimestampMixin):
    """An answer to a question."""

    __tablename__ = "answers"

    id = Column(Integer, primary_key=True, index=True)
    content = Column(Text, nullable=False)
    question_id = Column(
        Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # Index in the parent's answer list; NULL until attached
    position = Column(Integer, nullable=True)

    # Relationships
    question = relationship("Question")
    author = relationship("User", back_populates="answers")

    @validates("question_id")
    def validate_question_id(self, key, value):
        """Reject re-parenting an answer once it has a question."""
        if self.question_id is not None and value != self.question_id:
            raise ValueError("An answer's question cannot be changed")
        return value
