"""User profile and favorites schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from src.models.enums import UserRole


class AuthorSummary(BaseModel):
    """Display-safe projection of a user."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str | None
    email: str


class UserUpdate(BaseModel):
    """Update the current user's profile."""

    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = Field(None, max_length=255)


class UserRoleUpdate(BaseModel):
    """Change a user's role (admin only)."""

    role: UserRole


class FavoriteResponse(BaseModel):
    """Favorite set after a favorite/unfavorite, with the question's counter."""

    question_id: int
    like_count: int
    favorite_question_ids: list[int]
