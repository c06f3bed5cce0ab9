"""Answer API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_answer_service, get_current_user, get_question_service
from src.database import atomic, get_db
from src.models.user import User
from src.schemas.answer import AnswerCreate, AnswerResponse
from src.services.answer_service import AnswerService
from src.services.question_service import QuestionService

router = APIRouter(prefix="/api/v1/answers", tags=["answers"])


@router.post("", response_model=AnswerResponse, status_code=status.HTTP_201_CREATED)
def create_answer(
    answer_data: AnswerCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    answers: Annotated[AnswerService, Depends(get_answer_service)],
    questions: Annotated[QuestionService, Depends(get_question_service)],
    db: Annotated[Session, Depends(get_db)],
):
    """Answer a question.

    The answer is created and appended to its question in one transaction.
    """
    with atomic(db, f"answer for question {answer_data.question_id}"):
        answer = answers.create(
            content=answer_data.content,
            question_id=answer_data.question_id,
            author_id=current_user.id,
        )
        questions.add_answer(answer_data.question_id, answer.id)

    return answers.get_by_id(answer.id)


@router.get("/question/{question_id}", response_model=list[AnswerResponse])
def get_answers_for_question(
    question_id: int,
    answers: Annotated[AnswerService, Depends(get_answer_service)],
):
    """List answers to a question, newest first."""
    return answers.find_by_question(question_id)


@router.get("/{answer_id}", response_model=AnswerResponse)
def get_answer(
    answer_id: int,
    answers: Annotated[AnswerService, Depends(get_answer_service)],
):
    """Get a single answer."""
    return answers.get_by_id(answer_id)
