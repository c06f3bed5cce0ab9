"""API endpoint tests for health and authentication."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.exceptions import ConflictError, ForbiddenError, UnauthorizedError
from src.main import register_exception_handlers
from src.services.security import decode_access_token


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_register_user(client):
    """Test user registration."""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "newuser@example.com", "password": "password123", "name": "New User"},
    )
    assert response.status_code == 201
    assert "access_token" in response.json()


def test_auth_response_includes_user(client):
    """Test that auth responses include user info without the password."""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "usertest@example.com", "password": "password123", "name": "User Test"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == "usertest@example.com"
    assert data["user"]["name"] == "User Test"
    assert data["user"]["role"] == "CLIENT"
    assert "password" not in data["user"]
    assert "password_hash" not in data["user"]


def test_register_duplicate_email(client, auth_headers):
    """Test registration with duplicate email conflicts."""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": auth_headers.email, "password": "password123", "name": "Duplicate"},
    )
    assert response.status_code == 409
    assert "already exists" in response.json()["detail"]


def test_register_rejects_short_password(client):
    """Test password length validation."""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "short@example.com", "password": "abc", "name": "Short"},
    )
    assert response.status_code == 422


def test_login(client, auth_headers):
    """Test user login."""
    response = client.post(
        "/api/v1/auth/login", json={"email": auth_headers.email, "password": "testpass123"}
    )
    assert response.status_code == 200
    assert "access_token" in response.json()


def test_login_token_identifies_registered_user(client, auth_headers):
    """Test register then login yields a token for the same user."""
    response = client.post(
        "/api/v1/auth/login", json={"email": auth_headers.email, "password": "testpass123"}
    )
    payload = decode_access_token(response.json()["access_token"])
    assert payload["sub"] == str(auth_headers.user_id)
    assert payload["email"] == auth_headers.email
    assert payload["role"] == "CLIENT"


def test_login_wrong_password(client, auth_headers):
    """Test login with wrong password."""
    response = client.post(
        "/api/v1/auth/login", json={"email": auth_headers.email, "password": "wrongpass"}
    )
    assert response.status_code == 401


def test_login_failures_are_indistinguishable(client, auth_headers):
    """Wrong password and unknown email fail the same way."""
    wrong_password = client.post(
        "/api/v1/auth/login", json={"email": auth_headers.email, "password": "wrongpass"}
    )
    unknown_email = client.post(
        "/api/v1/auth/login", json={"email": "nobody@example.com", "password": "testpass123"}
    )
    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()


def test_get_current_user(client, auth_headers):
    """Test getting current user info."""
    response = client.get("/api/v1/auth/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["email"] == auth_headers.email


def test_logout(client, auth_headers):
    """Test logout acknowledges."""
    response = client.post("/api/v1/auth/logout", headers=auth_headers)
    assert response.status_code == 200


def test_unauthorized_access(client):
    """Test that protected endpoints require authentication."""
    response = client.get("/api/v1/users/favorites")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_invalid_token(client):
    """Test that a garbage token is rejected."""
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_token_for_deleted_user(client, auth_headers, db):
    """Test that a token outliving its user is rejected."""
    from src.models.user import User

    db.delete(db.get(User, auth_headers.user_id))
    db.commit()

    response = client.get("/api/v1/auth/me", headers=auth_headers)
    assert response.status_code == 401
    assert response.json()["detail"] == "User not found"


def test_exception_handlers_map_application_errors():
    """Application errors become {"detail": ...} bodies with their status code."""
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/conflict")
    def conflict():
        raise ConflictError("Already there")

    @app.get("/unauthorized")
    def unauthorized():
        raise UnauthorizedError("Nope")

    @app.get("/forbidden")
    def forbidden():
        raise ForbiddenError("Not yours")

    with TestClient(app) as test_client:
        response = test_client.get("/conflict")
        assert response.status_code == 409
        assert response.json() == {"detail": "Already there"}

        response = test_client.get("/unauthorized")
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

        response = test_client.get("/forbidden")
        assert response.status_code == 403
        assert "WWW-Authenticate" not in response.headers
