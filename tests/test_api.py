"""API endpoint tests: health, authentication and sessions."""

from src.config import get_settings

SESSION_COOKIE_NAME = get_settings().session_cookie_name


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "connected"
    assert "performance" in data["metrics"]
    assert "errors" in data["metrics"]


def test_health_check_reports_database_failure(client, db, monkeypatch):
    """Test that an unreachable database turns into 503."""

    def broken_execute(*args, **kwargs):
        raise RuntimeError("connection refused")

    monkeypatch.setattr(db, "execute", broken_execute)
    response = client.get("/health")
    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"


def test_register_user(client):
    """Test user registration sets an HTTP-only session cookie."""
    response = client.post(
        "/api/auth/register",
        json={"email": "newuser@example.com", "password": "password123"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["user"]["email"] == "newuser@example.com"
    assert data["user"]["isAdmin"] is False
    assert "passwordHash" not in data["user"]

    set_cookie = response.headers["set-cookie"]
    assert f"{SESSION_COOKIE_NAME}=" in set_cookie
    assert "HttpOnly" in set_cookie
    assert "samesite=lax" in set_cookie.lower()


def test_register_duplicate_email(client, auth_headers):
    """Test registration with duplicate email fails."""
    response = client.post(
        "/api/auth/register",
        json={"email": auth_headers.email, "password": "password123"},
    )
    assert response.status_code == 400
    assert "already exists" in response.json()["detail"]


def test_register_short_password(client):
    """Test registration rejects passwords under six characters."""
    response = client.post(
        "/api/auth/register", json={"email": "short@example.com", "password": "12345"}
    )
    assert response.status_code == 400
    errors = response.json()["errors"]
    assert errors[0]["field"] == "password"


def test_register_invalid_email(client):
    """Test registration rejects malformed email addresses."""
    response = client.post(
        "/api/auth/register", json={"email": "not-an-email", "password": "password123"}
    )
    assert response.status_code == 400


def test_login(client, auth_headers):
    """Test user login."""
    response = client.post(
        "/api/auth/login", json={"email": auth_headers.email, "password": "testpass123"}
    )
    assert response.status_code == 200
    assert response.json()["user"]["id"] == auth_headers.user_id
    assert SESSION_COOKIE_NAME in response.cookies


def test_login_wrong_password(client, auth_headers):
    """Test login with wrong password."""
    response = client.post(
        "/api/auth/login", json={"email": auth_headers.email, "password": "wrongpass"}
    )
    assert response.status_code == 401


def test_login_unknown_email(client):
    """Test login for an email nobody registered."""
    response = client.post(
        "/api/auth/login", json={"email": "ghost@example.com", "password": "whatever"}
    )
    assert response.status_code == 401


def test_get_current_user(client, auth_headers):
    """Test getting current user info."""
    response = client.get("/api/auth/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["user"]["email"] == auth_headers.email


def test_get_current_user_with_cookie(client):
    """Test that the session cookie alone authenticates."""
    client.post("/api/auth/register", json={"email": "cookie@example.com", "password": "secret1"})

    response = client.get("/api/auth/me")
    assert response.status_code == 200
    assert response.json()["user"]["email"] == "cookie@example.com"


def test_get_current_user_invalid_token(client):
    """Test that a forged token is rejected."""
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_deleted_user_loses_session(client, db, auth_headers):
    """Test that a token stops working once its user is gone."""
    from src.models.user import User

    db.query(User).filter(User.id == auth_headers.user_id).delete()
    db.commit()

    response = client.get("/api/auth/me", headers=auth_headers)
    assert response.status_code == 401


def test_logout_clears_cookie(client):
    """Test logout clears the session cookie."""
    client.post("/api/auth/register", json={"email": "bye@example.com", "password": "secret1"})
    assert client.get("/api/auth/me").status_code == 200

    response = client.post("/api/auth/logout")
    assert response.status_code == 200
    assert client.get("/api/auth/me").status_code == 401


def test_unauthorized_access(client):
    """Test that endpoints require authentication."""
    assert client.get("/api/tasks").status_code == 401
    assert client.post("/api/tasks", json={"title": "x"}).status_code == 401
    assert client.get("/api/users").status_code == 401
    assert client.post("/api/ai/assign-user", json={"description": "x"}).status_code == 401


def test_end_to_end_task_flow(client):
    """Register, log in, create a task, mark it done and read it back."""
    register = client.post(
        "/api/auth/register", json={"email": "a@x.com", "password": "secret1"}
    )
    assert register.status_code == 200
    client.cookies.clear()

    login = client.post("/api/auth/login", json={"email": "a@x.com", "password": "secret1"})
    assert login.status_code == 200

    created = client.post("/api/tasks", json={"title": "Test"})
    assert created.status_code == 201
    task = created.json()["task"]
    assert task["status"] == "TODO"
    assert task["totalMinutes"] == 0
    assert task["user"]["email"] == "a@x.com"

    patched = client.patch(f"/api/tasks/status/{task['id']}", json={"status": "DONE"})
    assert patched.status_code == 200

    fetched = client.get(f"/api/tasks/{task['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["task"]["status"] == "DONE"
    assert fetched.json()["task"]["updatedAt"] != task["updatedAt"]


def test_unexpected_error_returns_generic_500(client, auth_headers):
    """Test that internal failures are hidden behind a generic message."""
    from src.api.dependencies import get_task_service
    from src.main import app
    from src.services.metrics import error_tracker

    class ExplodingService:
        def list_tasks(self, *args, **kwargs):
            raise RuntimeError("database on fire")

    app.dependency_overrides[get_task_service] = lambda: ExplodingService()

    response = client.get("/api/tasks", headers=auth_headers)
    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}
    assert "RuntimeError:database on fire" in error_tracker.summary()
