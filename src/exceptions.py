"""Application exception hierarchy.

Services raise these instead of ``HTTPException`` so that storage and
business errors are translated in one place. ``register_exception_handlers``
in ``src.main`` maps each class to its ``status_code``.

    AskAroundError (500)
    ├── ValidationError          400
    ├── UnauthorizedError        401
    │   └── ForbiddenError       403
    ├── NotFoundError            404
    ├── ConflictError            409
    └── ServiceUnavailableError  503
"""

from typing import Any


class AskAroundError(Exception):
    """Base exception for all application errors."""

    status_code = 500
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, context: dict[str, Any] | None = None):
        self.message = message or self.default_message
        # Logged server-side only, never returned to the client
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(AskAroundError):
    """Input is malformed or out of range."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(
        self,
        message: str | None = None,
        field: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message, ctx)
        self.field = field


class UnauthorizedError(AskAroundError):
    """Bad credentials, or a missing, invalid or expired token."""

    status_code = 401
    default_message = "Invalid authentication credentials"


class ForbiddenError(UnauthorizedError):
    """Authenticated, but not allowed to touch this resource."""

    status_code = 403
    default_message = "You don't have permission to access this resource"


class NotFoundError(AskAroundError):
    """A referenced entity does not exist."""

    status_code = 404

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Any = None,
        context: dict[str, Any] | None = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(f"{resource} not found", ctx)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(AskAroundError):
    """The write would violate a uniqueness rule."""

    status_code = 409
    default_message = "Resource already exists"


class ServiceUnavailableError(AskAroundError):
    """A backing resource is temporarily unavailable."""

    status_code = 503
    default_message = "Service temporarily unavailable"
