"""Pytest configuration and fixtures."""

import os
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from src.database import Base, get_db
from src.main import app
from src.models.enums import UserRole
from src.models.user import User
from src.services.question_service import QuestionService


class AuthHeaders(dict):
    """Dict subclass that also stores user_id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/askaround", "/askaround_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        # For PostgreSQL, create the test database
        from sqlalchemy_utils import create_database, database_exists

        # Create test database if it doesn't exist
        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield
    # Don't drop database - just leave it for next run (each test cleans up after itself)


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    # Startup index creation runs against the test database
    with patch("src.main.engine", engine):
        with TestClient(app) as test_client:
            yield test_client
    app.dependency_overrides.clear()


def register_user(client, email: str, password: str = "testpass123", name: str = "Test User"):
    """Register a user and return auth headers carrying the user's id and email."""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": password, "name": name},
    )
    assert response.status_code == 201
    data = response.json()
    token = data["access_token"]
    return AuthHeaders(
        {"Authorization": f"Bearer {token}"},
        user_id=data["user"]["id"],
        email=data["user"]["email"],
    )


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    return register_user(client, "test@example.com")


@pytest.fixture
def other_auth_headers(client):
    """A second, unrelated user."""
    return register_user(client, "other@example.com", name="Other User")


@pytest.fixture
def admin_headers(client, db):
    """A user promoted to admin."""
    headers = register_user(client, "admin@example.com", name="Admin User")
    user = db.get(User, headers.user_id)
    user.role = UserRole.ADMIN.value
    db.commit()
    return headers


@pytest.fixture
def make_question(client, auth_headers):
    """Factory that posts a question and returns its JSON."""

    def _make(longitude: float, latitude: float, title: str = "Where is it?", headers=None):
        response = client.post(
            "/api/v1/questions",
            headers=headers or auth_headers,
            json={
                "title": title,
                "content": "Anyone know?",
                "longitude": longitude,
                "latitude": latitude,
            },
        )
        assert response.status_code == 201
        return response.json()

    return _make


@pytest.fixture
def author(db):
    """A user to own questions in service-level tests."""
    user = User(email="author@example.com", name="Author", password_hash="fake")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def question(db, author):
    """A committed question at (10, 20)."""
    question = QuestionService(db).create("Title", "Body", 10.0, 20.0, author.id)
    db.commit()
    return question
