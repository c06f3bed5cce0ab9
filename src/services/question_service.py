"""Question store: creation, radius search and counters."""

import logging

from sqlalchemy import and_, or_, update
from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.orm import Session, selectinload

from src.config import get_settings
from src.exceptions import (
    ConflictError,
    NotFoundError,
    ServiceUnavailableError,
    ValidationError,
)
from src.models.answer import Answer
from src.models.question import Question
from src.services.geo import (
    bounding_box,
    haversine_distance,
    is_valid_latitude,
    is_valid_longitude,
)

logger = logging.getLogger(__name__)
settings = get_settings()


def _with_relations(query):
    """Eager-load author and answers (with their authors)."""
    return query.options(
        selectinload(Question.author),
        selectinload(Question.answers).selectinload(Answer.author),
    )


class QuestionService:
    """Service for question-related operations.

    Methods flush but never commit, so callers can group several writes
    into one transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        title: str,
        content: str,
        longitude: float,
        latitude: float,
        author_id: int,
    ) -> Question:
        """Create a question with no answers and a zero like count."""
        if not is_valid_longitude(longitude):
            raise ValidationError("Longitude must be between -180 and 180", field="longitude")
        if not is_valid_latitude(latitude):
            raise ValidationError("Latitude must be between -90 and 90", field="latitude")

        question = Question(
            title=title,
            content=content,
            longitude=longitude,
            latitude=latitude,
            author_id=author_id,
            like_count=0,
            answer_count=0,
        )
        self.db.add(question)
        self.db.flush()
        logger.info(f"Created question {question.id} at ({longitude}, {latitude})")
        return question

    def find_nearby(
        self,
        longitude: float,
        latitude: float,
        radius_meters: float | None = None,
        limit: int | None = None,
    ) -> list[Question]:
        """Questions within radius_meters of the center, nearest first.

        Ties on distance are broken newest first. Each returned question
        carries a transient ``distance_meters`` attribute. Returns an empty
        list while the spatial index is unavailable.

        Raises ValidationError for a radius or limit outside the configured
        bounds.
        """
        if not is_valid_longitude(longitude):
            raise ValidationError("Longitude must be between -180 and 180", field="longitude")
        if not is_valid_latitude(latitude):
            raise ValidationError("Latitude must be between -90 and 90", field="latitude")

        if radius_meters is None:
            radius = settings.default_search_radius_meters
        elif not 0 < radius_meters <= settings.max_search_radius_meters:
            raise ValidationError(
                f"Radius must be between 0 and {settings.max_search_radius_meters} meters",
                field="radius",
                context={"radius_meters": radius_meters},
            )
        else:
            radius = radius_meters

        if limit is None:
            limit = settings.default_search_limit
        elif not 1 <= limit <= settings.max_search_limit:
            raise ValidationError(
                f"Limit must be between 1 and {settings.max_search_limit}",
                field="limit",
                context={"limit": limit},
            )

        try:
            candidates = self._candidates_in_box(longitude, latitude, radius)
        except ServiceUnavailableError as e:
            logger.warning(f"Nearby search unavailable, returning no results: {e.context}")
            return []

        in_range = []
        for question in candidates:
            distance = haversine_distance(longitude, latitude, question.longitude, question.latitude)
            if distance <= radius:
                question.distance_meters = distance
                in_range.append(question)

        # Newest first, then a stable sort by distance keeps that as the tie-break
        in_range.sort(key=lambda q: (q.created_at, q.id), reverse=True)
        in_range.sort(key=lambda q: q.distance_meters)
        return in_range[:limit]

    def _candidates_in_box(
        self, longitude: float, latitude: float, radius: float
    ) -> list[Question]:
        box = bounding_box(longitude, latitude, radius)
        longitude_filter = or_(
            *(
                and_(Question.longitude >= low, Question.longitude <= high)
                for low, high in box.longitude_ranges
            )
        )
        query = _with_relations(self.db.query(Question)).filter(
            Question.latitude >= box.min_latitude,
            Question.latitude <= box.max_latitude,
            longitude_filter,
        )
        try:
            return query.all()
        except (OperationalError, ProgrammingError) as e:
            self.db.rollback()
            raise ServiceUnavailableError(
                "Spatial index unavailable", context={"error": str(e.orig)}
            ) from e

    def get_by_id(self, question_id: int) -> Question:
        """Get a question with author and answers expanded."""
        question = (
            _with_relations(self.db.query(Question))
            .filter(Question.id == question_id)
            .populate_existing()
            .first()
        )
        if not question:
            raise NotFoundError("Question", question_id)
        return question

    def get_by_ids(self, question_ids: list[int]) -> list[Question]:
        """Get questions by id, newest first. Unknown ids are skipped."""
        if not question_ids:
            return []
        return (
            _with_relations(self.db.query(Question))
            .filter(Question.id.in_(question_ids))
            .order_by(Question.created_at.desc(), Question.id.desc())
            .all()
        )

    def add_answer(self, question_id: int, answer_id: int) -> Question:
        """Append an answer to the question's answer list."""
        answer = self.db.query(Answer).filter(Answer.id == answer_id).first()
        if not answer:
            raise NotFoundError("Answer", answer_id)
        if answer.question_id != question_id:
            raise ValidationError(
                "Answer belongs to a different question",
                field="answer_id",
                context={"question_id": question_id, "answer_question_id": answer.question_id},
            )
        if answer.position is not None:
            raise ConflictError("Answer already attached to the question")

        self._bump(question_id, Question.answer_count, 1)
        question = self.db.get(Question, question_id)
        self.db.refresh(question, ["answer_count"])
        answer.position = question.answer_count - 1
        self.db.flush()
        return self.get_by_id(question_id)

    def increment_like_count(self, question_id: int) -> Question:
        """Atomically add one to the like count."""
        self._bump(question_id, Question.like_count, 1)
        return self._refreshed(question_id)

    def decrement_like_count(self, question_id: int) -> Question:
        """Atomically subtract one from the like count, never below zero."""
        result = self.db.execute(
            update(Question)
            .where(Question.id == question_id, Question.like_count > 0)
            .values(like_count=Question.like_count - 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0 and not self.db.get(Question, question_id):
            raise NotFoundError("Question", question_id)
        return self._refreshed(question_id)

    def _bump(self, question_id: int, column, delta: int) -> None:
        """Issue a single UPDATE ... SET column = column + delta."""
        result = self.db.execute(
            update(Question)
            .where(Question.id == question_id)
            .values({column: column + delta})
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError("Question", question_id)

    def _refreshed(self, question_id: int) -> Question:
        question = self.db.get(Question, question_id)
        if not question:
            raise NotFoundError("Question", question_id)
        self.db.refresh(question)
        return question
