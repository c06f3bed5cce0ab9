"""User profile and favorites API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from src.api.dependencies import (
    get_current_user,
    get_question_service,
    get_user_service,
    require_admin,
)
from src.database import atomic, get_db
from src.exceptions import ForbiddenError, NotFoundError
from src.models.question import Question
from src.models.user import User
from src.schemas.auth import UserResponse
from src.schemas.question import QuestionResponse
from src.schemas.user import FavoriteResponse, UserRoleUpdate, UserUpdate
from src.services.question_service import QuestionService
from src.services.user_service import UserService

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("/favorites")
def get_favorites(
    current_user: Annotated[User, Depends(get_current_user)],
    users: Annotated[UserService, Depends(get_user_service)],
):
    """Get the current user's favorite questions."""
    questions = users.get_favorite_questions(current_user.id)
    return {"favorites": [QuestionResponse.model_validate(q) for q in questions]}


@router.post("/favorites/{question_id}", response_model=FavoriteResponse)
def add_favorite(
    question_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    users: Annotated[UserService, Depends(get_user_service)],
    questions: Annotated[QuestionService, Depends(get_question_service)],
    db: Annotated[Session, Depends(get_db)],
):
    """Favorite a question and bump its like count."""
    with atomic(db, f"favorite of question {question_id} by user {current_user.id}"):
        user = users.add_favorite_question(current_user.id, question_id)
        question = questions.increment_like_count(question_id)

    return FavoriteResponse(
        question_id=question_id,
        like_count=question.like_count,
        favorite_question_ids=user.favorite_question_ids,
    )


@router.delete("/favorites/{question_id}", response_model=FavoriteResponse)
def remove_favorite(
    question_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    users: Annotated[UserService, Depends(get_user_service)],
    questions: Annotated[QuestionService, Depends(get_question_service)],
    db: Annotated[Session, Depends(get_db)],
):
    """Unfavorite a question and drop its like count.

    Unfavoriting a question that is not in the set changes nothing.
    """
    with atomic(db, f"unfavorite of question {question_id} by user {current_user.id}"):
        removed = users.remove_favorite_question(current_user.id, question_id)
        if removed:
            question = questions.decrement_like_count(question_id)
        else:
            question = db.get(Question, question_id)

    db.refresh(current_user, ["favorites"])
    return FavoriteResponse(
        question_id=question_id,
        like_count=question.like_count if question else 0,
        favorite_question_ids=current_user.favorite_question_ids,
    )


@router.get("/me", response_model=UserResponse)
def get_profile(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get the current user's profile."""
    return current_user


@router.patch("/me", response_model=UserResponse)
def update_profile(
    user_data: UserUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    users: Annotated[UserService, Depends(get_user_service)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update the current user's name or email."""
    with atomic(db, f"profile update for user {current_user.id}"):
        user = users.update_profile(current_user.id, name=user_data.name, email=user_data.email)
    return user


@router.get("", response_model=list[UserResponse])
def list_users(
    admin: Annotated[User, Depends(require_admin)],
    users: Annotated[UserService, Depends(get_user_service)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
):
    """List users (admin only)."""
    result, _total = users.list_users(page, limit)
    return result


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    users: Annotated[UserService, Depends(get_user_service)],
):
    """Get a user (self or admin only)."""
    if user_id != current_user.id and not current_user.is_admin:
        raise ForbiddenError("You can only view your own profile")
    user = users.get_by_id(user_id)
    if not user:
        raise NotFoundError("User", user_id)
    return user


@router.patch("/{user_id}/role", response_model=UserResponse)
def update_user_role(
    user_id: int,
    role_data: UserRoleUpdate,
    admin: Annotated[User, Depends(require_admin)],
    users: Annotated[UserService, Depends(get_user_service)],
    db: Annotated[Session, Depends(get_db)],
):
    """Change a user's role (admin only)."""
    with atomic(db, f"role update for user {user_id}"):
        user = users.update_role(user_id, role_data.role)
    return user
