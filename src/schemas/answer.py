"""Answer schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.schemas.user import AuthorSummary


class AnswerCreate(BaseModel):
    """Answer a question."""

    question_id: int
    content: str = Field(..., min_length=1, max_length=5000)


class AnswerResponse(BaseModel):
    """Answer with its author expanded."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    content: str
    question_id: int
    author: AuthorSummary
    created_at: datetime
