"""Celery tasks for keeping denormalized question counters honest."""

import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.celery_app import app as celery_app
from src.database import SessionLocal
from src.models.answer import Answer
from src.models.favorite import QuestionFavorite
from src.models.question import Question

logger = logging.getLogger(__name__)


def reconcile_counters(db: Session) -> dict:
    """Recompute like_count and answer_count from the rows they summarize.

    Answers that were never attached to their question's answer list are
    appended to it, oldest first. Does not commit.
    """
    stats = {
        "questions_checked": 0,
        "like_counts_fixed": 0,
        "answers_attached": 0,
        "answer_counts_fixed": 0,
    }

    favorite_counts = dict(
        db.query(QuestionFavorite.question_id, func.count())
        .group_by(QuestionFavorite.question_id)
        .all()
    )

    # Attach orphaned answers after the existing ones
    orphans = (
        db.query(Answer)
        .filter(Answer.position.is_(None))
        .order_by(Answer.question_id, Answer.created_at, Answer.id)
        .all()
    )
    next_position: dict[int, int] = {}
    for answer in orphans:
        if answer.question_id not in next_position:
            max_position = (
                db.query(func.max(Answer.position))
                .filter(Answer.question_id == answer.question_id)
                .scalar()
            )
            next_position[answer.question_id] = -1 if max_position is None else max_position
        next_position[answer.question_id] += 1
        answer.position = next_position[answer.question_id]
        stats["answers_attached"] += 1
    db.flush()

    answer_counts = dict(
        db.query(Answer.question_id, func.count(Answer.id))
        .filter(Answer.position.isnot(None))
        .group_by(Answer.question_id)
        .all()
    )

    for question in db.query(Question).all():
        stats["questions_checked"] += 1

        likes = favorite_counts.get(question.id, 0)
        if question.like_count != likes:
            logger.info(
                f"Question {question.id}: like_count {question.like_count} -> {likes}"
            )
            question.like_count = likes
            stats["like_counts_fixed"] += 1

        answered = answer_counts.get(question.id, 0)
        if question.answer_count != answered:
            logger.info(
                f"Question {question.id}: answer_count {question.answer_count} -> {answered}"
            )
            question.answer_count = answered
            stats["answer_counts_fixed"] += 1

    db.flush()
    return stats


@celery_app.task
def reconcile_question_counters() -> dict:
    """Repair question counters that drifted from favorites and answers.

    This task runs hourly via celery-beat.

    Returns:
        dict with reconciliation statistics
    """
    db: Session = SessionLocal()
    try:
        stats = reconcile_counters(db)
        db.commit()
        logger.info(f"Counter reconciliation complete: {stats}")
        return {"success": True, **stats}
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Counter reconciliation failed: {e}")
        raise
    finally:
        db.close()
