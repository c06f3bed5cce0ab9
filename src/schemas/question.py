"""Question schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.schemas.answer import AnswerResponse
from src.schemas.user import AuthorSummary


class QuestionCreate(BaseModel):
    """Create a new question at a location."""

    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1, max_length=5000)
    longitude: float = Field(..., ge=-180, le=180)
    latitude: float = Field(..., ge=-90, le=90)


class GeoPoint(BaseModel):
    """GeoJSON point."""

    type: str = "Point"
    coordinates: tuple[float, float]  # (longitude, latitude)


class QuestionResponse(BaseModel):
    """Question with author and answers expanded."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    longitude: float
    latitude: float
    location: GeoPoint
    author: AuthorSummary
    answers: list[AnswerResponse] = []
    answer_ids: list[int] = []
    like_count: int
    answer_count: int
    created_at: datetime
    updated_at: datetime


class NearbyQuestionResponse(QuestionResponse):
    """Question returned by a radius search."""

    distance_meters: float
