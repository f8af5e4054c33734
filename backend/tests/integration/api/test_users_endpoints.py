"""
Integration tests for user endpoints.

Tests anonymous sign-up and profile updates.
"""

from fastapi.testclient import TestClient
from trinity.main import app
from trinity.db.database import get_db
from trinity.models.user import User
from trinity.utils.jwt import create_access_token, decode_access_token


def get_auth_headers(user_id):
    """Helper to create auth headers."""
    token = create_access_token(user_id)
    return {"Authorization": f"Bearer {token}"}


class TestAnonymousUser:
    """Tests for POST /api/v1/users/anonymous endpoint."""

    def test_create_anonymous_user(self, test_db, override_get_db):
        app.dependency_overrides[get_db] = override_get_db
        try:
            client = TestClient(app)
            response = client.post("/api/v1/users/anonymous")

            assert response.status_code == 201
            data = response.json()
            assert data["is_anonymous"] is True
            assert str(decode_access_token(data["token"])) == data["user_id"]
            assert test_db.query(User).count() == 1
        finally:
            app.dependency_overrides.clear()


class TestProfile:
    """Tests for /api/v1/users/me endpoints."""

    def test_get_me(self, test_db, override_get_db, sample_user_id):
        app.dependency_overrides[get_db] = override_get_db
        try:
            test_db.add(User(user_id=sample_user_id, email="a@example.com"))
            test_db.commit()

            client = TestClient(app)
            response = client.get(
                "/api/v1/users/me", headers=get_auth_headers(sample_user_id)
            )

            assert response.status_code == 200
            data = response.json()
            assert data["email"] == "a@example.com"
            assert data["gender"] is None
            assert data["age"] is None
        finally:
            app.dependency_overrides.clear()

    def test_get_me_unknown_user(self, test_db, override_get_db, sample_user_id):
        app.dependency_overrides[get_db] = override_get_db
        try:
            client = TestClient(app)
            response = client.get(
                "/api/v1/users/me", headers=get_auth_headers(sample_user_id)
            )

            assert response.status_code == 404
        finally:
            app.dependency_overrides.clear()

    def test_update_profile(self, test_db, override_get_db, sample_user_id):
        app.dependency_overrides[get_db] = override_get_db
        try:
            test_db.add(User(user_id=sample_user_id, is_anonymous=True))
            test_db.commit()

            client = TestClient(app)
            response = client.put(
                "/api/v1/users/me/profile",
                headers=get_auth_headers(sample_user_id),
                json={"gender": "female", "age": 34},
            )

            assert response.status_code == 200
            data = response.json()
            assert data["gender"] == "female"
            assert data["age"] == 34
        finally:
            app.dependency_overrides.clear()

    def test_update_profile_invalid_gender(
        self, test_db, override_get_db, sample_user_id
    ):
        app.dependency_overrides[get_db] = override_get_db
        try:
            test_db.add(User(user_id=sample_user_id, is_anonymous=True))
            test_db.commit()

            client = TestClient(app)
            response = client.put(
                "/api/v1/users/me/profile",
                headers=get_auth_headers(sample_user_id),
                json={"gender": "unknown"},
            )

            assert response.status_code == 422
        finally:
            app.dependency_overrides.clear()
