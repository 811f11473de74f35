"""Tests for authentication and account endpoints."""
import pytest
from app.dependencies import get_session_store
from app.exceptions import AuthenticationError
from app.main import app
from app.services.auth import AuthService


def test_register(client):
    """Registration returns a usable token."""
    response = client.post(
        "/api/auth/register",
        json={"username": "newuser", "email": "new@example.com", "password": "longenough"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["user"]["username"] == "newuser"

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
    assert me.status_code == 200


def test_register_duplicate(client, test_user):
    response = client.post(
        "/api/auth/register",
        json={"username": "testuser", "email": "other@example.com", "password": "longenough"},
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "Username or email already registered"


@pytest.mark.parametrize("payload", [
    {"username": "ab", "email": "a@example.com", "password": "longenough"},
    {"username": "newuser", "email": "not-an-email", "password": "longenough"},
    {"username": "newuser", "email": "a@example.com", "password": "short"},
])
def test_register_invalid(client, payload):
    response = client.post("/api/auth/register", json=payload)

    assert response.status_code == 422


def test_login_success(client, db):
    """Test successful login."""
    AuthService(db).create_user("testuser", "testpass123", "test@example.com")

    response = client.post(
        "/api/auth/login",
        json={"username": "testuser", "password": "testpass123"},
    )

    assert response.status_code == 200
    data = response.json()
    assert "token" in data
    assert data["user"]["username"] == "testuser"


def test_login_invalid_password(client, db):
    """Test login with wrong password."""
    AuthService(db).create_user("testuser", "testpass123", "test@example.com")

    response = client.post(
        "/api/auth/login",
        json={"username": "testuser", "password": "wrongpass"},
    )

    assert response.status_code == 401


def test_login_invalid_user(client, db):
    """Test login with non-existent user."""
    response = client.post(
        "/api/auth/login",
        json={"username": "nouser", "password": "testpass"},
    )

    assert response.status_code == 401


def test_get_me(client, db, test_user, auth_headers):
    """Test getting current user info."""
    response = client.get("/api/auth/me", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["username"] == "testuser"


def test_get_me_unauthorized(client):
    """Test getting current user without auth."""
    response = client.get("/api/auth/me")

    assert response.status_code == 401


def test_get_me_garbage_token(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


def test_refresh_token(client, test_user, auth_headers):
    """A valid token can be exchanged for a new one."""
    response = client.post("/api/auth/refresh", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["user"]["username"] == "testuser"
    assert data["token"] != auth_headers["Authorization"].split(" ")[1]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
    assert me.status_code == 200


def test_refresh_rejects_garbage_token(client):
    response = client.post("/api/auth/refresh", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


def test_refresh_requires_token(client):
    response = client.post("/api/auth/refresh")

    assert response.status_code == 401


def test_refresh_token_for_deleted_user(db, test_user):
    auth = AuthService(db)
    token = auth.create_token(test_user.id)
    db.delete(test_user)
    db.commit()

    with pytest.raises(AuthenticationError, match="User not found"):
        auth.refresh_token(token)


def test_logout(client, auth_headers):
    """Test logout endpoint."""
    response = client.post("/api/auth/logout", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Logged out successfully"


class TestTrackedSessions:
    """With session tracking on, logout and account deletion revoke tokens."""

    @pytest.fixture
    def tracked_client(self, client, session_store):
        app.dependency_overrides[get_session_store] = lambda: session_store
        return client

    def _login(self, client):
        response = client.post(
            "/api/auth/login",
            json={"username": "testuser", "password": "password123"},
        )
        return {"Authorization": f"Bearer {response.json()['token']}"}

    def test_logout_revokes_token(self, tracked_client, test_user):
        headers = self._login(tracked_client)
        assert tracked_client.get("/api/auth/me", headers=headers).status_code == 200

        tracked_client.post("/api/auth/logout", headers=headers)

        response = tracked_client.get("/api/auth/me", headers=headers)
        assert response.status_code == 401
        assert response.json()["detail"] == "Session has been revoked"

    def test_logout_keeps_other_sessions(self, tracked_client, test_user):
        phone = self._login(tracked_client)
        laptop = self._login(tracked_client)

        tracked_client.post("/api/auth/logout", headers=phone)

        assert tracked_client.get("/api/auth/me", headers=laptop).status_code == 200

    def test_refresh_registers_new_session(self, tracked_client, test_user):
        headers = self._login(tracked_client)

        response = tracked_client.post("/api/auth/refresh", headers=headers)

        assert response.status_code == 200
        fresh = {"Authorization": f"Bearer {response.json()['token']}"}
        assert tracked_client.get("/api/auth/me", headers=fresh).status_code == 200

    def test_refresh_after_logout_rejected(self, tracked_client, test_user):
        headers = self._login(tracked_client)
        tracked_client.post("/api/auth/logout", headers=headers)

        response = tracked_client.post("/api/auth/refresh", headers=headers)

        assert response.status_code == 401
        assert response.json()["detail"] == "Session has been revoked"

    def test_untracked_token_rejected(self, tracked_client, auth_headers):
        """Tokens the store never saw are not accepted."""
        response = tracked_client.get("/api/auth/me", headers=auth_headers)

        assert response.status_code == 401

    def test_account_deletion_revokes_sessions(self, tracked_client, test_user, session_store):
        headers = self._login(tracked_client)

        response = tracked_client.delete("/api/auth/account", headers=headers)

        assert response.status_code == 200
        assert tracked_client.get("/api/auth/me", headers=headers).status_code == 401


def test_delete_account(client, db, test_user, auth_headers, test_album):
    """Deleting an account keeps its ratings, anonymized."""
    client.post("/api/ratings", json={"albumId": test_album.id, "rating": 4}, headers=auth_headers)

    response = client.delete("/api/auth/account", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["ratings_kept"] == 1
    assert client.get("/api/auth/me", headers=auth_headers).status_code == 401

    ratings = client.get(f"/api/albums/{test_album.catalog_id}/ratings")
    assert ratings.status_code == 200
    assert ratings.json()[0]["user_id"] is None
