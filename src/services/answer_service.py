"""Answer store."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from src.exceptions import NotFoundError
from src.models.answer import Answer

logger = logging.getLogger(__name__)


class AnswerService:
    """Service for answer-related operations."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, content: str, question_id: int, author_id: int) -> Answer:
        """Create an answer.

        The parent question is not looked up here; attaching the answer to
        its question is the caller's job.
        """
        answer = Answer(content=content, question_id=question_id, author_id=author_id)
        self.db.add(answer)
        try:
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            raise NotFoundError("Question", question_id) from e
        logger.info(f"Created answer {answer.id} for question {question_id}")
        return answer

    def find_by_question(self, question_id: int) -> list[Answer]:
        """Answers to a question, newest first."""
        return (
            self.db.query(Answer)
            .options(selectinload(Answer.author))
            .filter(Answer.question_id == question_id)
            .order_by(Answer.created_at.desc(), Answer.id.desc())
            .all()
        )

    def get_by_id(self, answer_id: int) -> Answer:
        """Get an answer with its author expanded."""
        answer = (
            self.db.query(Answer)
            .options(selectinload(Answer.author))
            .filter(Answer.id == answer_id)
            .first()
        )
        if not answer:
            raise NotFoundError("Answer", answer_id)
        return answer
