"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from src.api import answers, auth, questions, users
from src.config import get_settings
from src.database import engine
from src.exceptions import AskAroundError, UnauthorizedError
from src.models.question import SPATIAL_INDEX_NAME, Question

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def ensure_spatial_index() -> bool:
    """Create the (latitude, longitude) index if it is missing.

    Returns False if the index could not be created; nearby searches then
    return no results until it exists.
    """
    index = next(i for i in Question.__table__.indexes if i.name == SPATIAL_INDEX_NAME)
    try:
        index.create(bind=engine, checkfirst=True)
    except SQLAlchemyError as e:
        logger.warning(f"Spatial index already exists or creation failed: {e}")
        return False
    logger.info("Spatial index ready")
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    ensure_spatial_index()
    yield
    engine.dispose()


app = FastAPI(
    title="AskAround API",
    description="Location-based questions and answers",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Map application and storage errors to ``{"detail": ...}`` responses."""

    @app.exception_handler(AskAroundError)
    async def handle_app_error(request: Request, exc: AskAroundError):
        """Translate application errors into JSON responses."""
        if exc.status_code >= 500:
            logger.error(
                f"{request.method} {request.url.path} failed: {exc.message} {exc.context}"
            )
        headers = None
        if isinstance(exc, UnauthorizedError) and exc.status_code == 401:
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message},
            headers=headers,
        )

    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(request: Request, exc: SQLAlchemyError):
        """Never leak raw storage errors to clients."""
        logger.error(f"{request.method} {request.url.path} database error: {exc}")
        return JSONResponse(
            status_code=500,
            content={"detail": "A database error occurred. Please try again later."},
        )


register_exception_handlers(app)


# Register routers
app.include_router(auth.router)
app.include_router(questions.router)
app.include_router(answers.router)
app.include_router(users.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
