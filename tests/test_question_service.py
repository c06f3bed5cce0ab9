"""Tests for the question and answer stores."""

from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from src.exceptions import ConflictError, NotFoundError, ValidationError
from src.services.answer_service import AnswerService
from src.services.question_service import QuestionService


class TestCreate:
    """Tests for QuestionService.create."""

    def test_starts_empty(self, db, question):
        assert question.like_count == 0
        assert question.answer_count == 0
        assert question.answer_ids == []

    @pytest.mark.parametrize(
        "longitude,latitude,field",
        [(180.1, 0.0, "longitude"), (-200.0, 0.0, "longitude"), (0.0, 91.0, "latitude")],
    )
    def test_rejects_out_of_range(self, db, author, longitude, latitude, field):
        with pytest.raises(ValidationError) as exc_info:
            QuestionService(db).create("T", "B", longitude, latitude, author.id)
        assert exc_info.value.field == field


class TestFindNearby:
    """Tests for QuestionService.find_nearby."""

    def test_returns_empty_when_index_unavailable(self, db, question):
        """A storage error during the radius query degrades to no results."""
        broken_query = MagicMock()
        broken_query.filter.return_value.all.side_effect = OperationalError(
            "SELECT ...", {}, Exception("no such index")
        )
        with patch(
            "src.services.question_service._with_relations", return_value=broken_query
        ):
            assert QuestionService(db).find_nearby(10.0, 20.0, 1000) == []

    @pytest.mark.parametrize("radius", [0, -5, 50_001, 500_000])
    def test_rejects_radius_out_of_bounds(self, db, question, radius):
        """Radii outside (0, max] are rejected rather than adjusted."""
        with pytest.raises(ValidationError) as exc_info:
            QuestionService(db).find_nearby(10.0, 20.0, radius_meters=radius)
        assert exc_info.value.field == "radius"

    def test_accepts_max_radius(self, db, author):
        service = QuestionService(db)
        far = service.create("far", "B", 10.0, 20.4, author.id)  # ~44.5 km away
        db.commit()
        found = service.find_nearby(10.0, 20.0, radius_meters=50_000)
        assert [q.id for q in found] == [far.id]

    @pytest.mark.parametrize("limit", [0, -1, 201])
    def test_rejects_limit_out_of_bounds(self, db, question, limit):
        with pytest.raises(ValidationError) as exc_info:
            QuestionService(db).find_nearby(10.0, 20.0, 5000, limit=limit)
        assert exc_info.value.field == "limit"

    def test_negative_limit_does_not_drop_results(self, db, author):
        """Every match is either returned or the call fails."""
        service = QuestionService(db)
        for offset in (0.001, 0.002, 0.003):
            service.create("near", "B", 0.0, offset, author.id)
        db.commit()
        assert len(service.find_nearby(0.0, 0.0, 5000)) == 3
        with pytest.raises(ValidationError):
            service.find_nearby(0.0, 0.0, 5000, limit=-1)

    def test_sets_distance(self, db, question):
        (found,) = QuestionService(db).find_nearby(10.0, 20.001, 1000)
        assert found.id == question.id
        assert found.distance_meters == pytest.approx(111.2, rel=1e-2)


class TestCounters:
    """Tests for the like counter."""

    def test_increment_and_decrement(self, db, question):
        service = QuestionService(db)
        assert service.increment_like_count(question.id).like_count == 1
        assert service.increment_like_count(question.id).like_count == 2
        assert service.decrement_like_count(question.id).like_count == 1

    def test_decrement_never_goes_negative(self, db, question):
        assert QuestionService(db).decrement_like_count(question.id).like_count == 0

    def test_missing_question(self, db):
        service = QuestionService(db)
        with pytest.raises(NotFoundError):
            service.increment_like_count(12345)
        with pytest.raises(NotFoundError):
            service.decrement_like_count(12345)


class TestAddAnswer:
    """Tests for QuestionService.add_answer."""

    def test_appends(self, db, author, question):
        answer = AnswerService(db).create("Answer", question.id, author.id)
        updated = QuestionService(db).add_answer(question.id, answer.id)
        assert updated.answer_ids == [answer.id]
        assert updated.answer_count == 1

    def test_rejects_answer_from_other_question(self, db, author, question):
        other = QuestionService(db).create("Other", "B", 0.0, 0.0, author.id)
        answer = AnswerService(db).create("Answer", other.id, author.id)
        with pytest.raises(ValidationError):
            QuestionService(db).add_answer(question.id, answer.id)

    def test_rejects_double_attach(self, db, author, question):
        answer = AnswerService(db).create("Answer", question.id, author.id)
        service = QuestionService(db)
        service.add_answer(question.id, answer.id)
        with pytest.raises(ConflictError):
            service.add_answer(question.id, answer.id)

    def test_missing_answer(self, db, question):
        with pytest.raises(NotFoundError):
            QuestionService(db).add_answer(question.id, 12345)

    def test_answer_question_is_immutable(self, db, author, question):
        answer = AnswerService(db).create("Answer", question.id, author.id)
        with pytest.raises(ValueError):
            answer.question_id = question.id + 1
