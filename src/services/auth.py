"""Authentication service: registration, login and token resolution."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.exceptions import ConflictError, UnauthorizedError
from src.models.enums import UserRole
from src.models.user import User
from src.services.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from src.services.user_service import UserService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"

# Compared against when the email is unknown, so both failure paths cost one bcrypt check
_dummy_hash: str | None = None


def _get_dummy_hash() -> str:
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = get_password_hash("askaround-dummy-password")
    return _dummy_hash


def issue_token(user: User) -> str:
    """Create an access token bound to the user's id, email and role."""
    return create_access_token(user.id, user.email, user.role)


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Authenticate a user by email and password."""
    user = UserService(db).get_by_email(email)
    if not user:
        verify_password(password, _get_dummy_hash())
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def register(
    db: Session,
    email: str,
    password: str,
    name: str | None = None,
    role: UserRole | None = None,
) -> tuple[User, str]:
    """Register a new user and issue a token."""
    logger.info(f"Registering new user: {email}")
    try:
        user = UserService(db).create(email, password, name, role)
        db.commit()
    except ConflictError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Registration failed for {email}: {e}")
        raise UnauthorizedError("Registration failed") from e

    db.refresh(user)
    logger.info(f"User registered successfully: {user.email}")
    return user, issue_token(user)


def login(db: Session, email: str, password: str) -> tuple[User, str]:
    """Log in with email and password.

    Unknown email and wrong password fail with the same error.
    """
    user = authenticate_user(db, email, password)
    if not user:
        logger.info(f"Failed login attempt for: {email}")
        raise UnauthorizedError(INVALID_CREDENTIALS)

    logger.info(f"User logged in successfully: {user.email}")
    return user, issue_token(user)


def resolve_user(db: Session, token_or_id: str | int) -> User:
    """Resolve a bearer token, or a raw user id, to the live user record."""
    if isinstance(token_or_id, int):
        user_id = token_or_id
    else:
        payload = decode_access_token(token_or_id)
        if payload is None or payload.get("sub") is None:
            raise UnauthorizedError("Invalid authentication credentials")
        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise UnauthorizedError("Invalid authentication credentials") from e

    user = UserService(db).get_by_id(user_id)
    if user is None:
        raise UnauthorizedError("User not found")
    return user
