"""Question API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user, get_question_service
from src.config import get_settings
from src.database import get_db
from src.models.user import User
from src.schemas.question import NearbyQuestionResponse, QuestionCreate, QuestionResponse
from src.services.question_service import QuestionService

router = APIRouter(prefix="/api/v1/questions", tags=["questions"])
settings = get_settings()


@router.post("", response_model=QuestionResponse, status_code=status.HTTP_201_CREATED)
def create_question(
    question_data: QuestionCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    questions: Annotated[QuestionService, Depends(get_question_service)],
    db: Annotated[Session, Depends(get_db)],
):
    """Post a question at a location."""
    question = questions.create(
        title=question_data.title,
        content=question_data.content,
        longitude=question_data.longitude,
        latitude=question_data.latitude,
        author_id=current_user.id,
    )
    db.commit()
    return questions.get_by_id(question.id)


@router.get("", response_model=list[NearbyQuestionResponse])
def find_nearby_questions(
    questions: Annotated[QuestionService, Depends(get_question_service)],
    latitude: Annotated[float, Query(ge=-90, le=90)],
    longitude: Annotated[float, Query(ge=-180, le=180)],
    radius: Annotated[
        float | None,
        Query(gt=0, le=settings.max_search_radius_meters, description="Search radius in meters"),
    ] = None,
    max_distance: Annotated[
        float | None,
        Query(
            gt=0,
            le=settings.max_search_radius_meters,
            alias="maxDistance",
            description="Alias for radius",
        ),
    ] = None,
    limit: Annotated[int | None, Query(ge=1, le=settings.max_search_limit)] = None,
):
    """List questions near a point, nearest first."""
    return questions.find_nearby(
        longitude=longitude,
        latitude=latitude,
        radius_meters=radius if radius is not None else max_distance,
        limit=limit,
    )


@router.get("/{question_id}", response_model=QuestionResponse)
def get_question(
    question_id: int,
    questions: Annotated[QuestionService, Depends(get_question_service)],
):
    """Get a question with its answers."""
    return questions.get_by_id(question_id)
