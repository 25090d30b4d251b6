"""Tests for access tokens, Google token verification and the bearer dependency."""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import jwt
from fastapi.testclient import TestClient

from voicetasks.auth import jwt as auth_jwt
from voicetasks.auth.google_oauth import verify_google_token


class TestAccessTokens:
    """Test create_access_token() / decode_access_token()."""

    def test_round_trip(self):
        token = auth_jwt.create_access_token("user-1", "ada@example.com")

        claims = auth_jwt.decode_access_token(token)
        assert claims["sub"] == "user-1"
        assert claims["email"] == "ada@example.com"
        assert auth_jwt.get_user_id_from_token(token) == "user-1"

    def test_email_is_optional(self):
        claims = auth_jwt.decode_access_token(auth_jwt.create_access_token("user-1"))
        assert "email" not in claims

    def test_tampered_token(self):
        token = auth_jwt.create_access_token("user-1")
        assert auth_jwt.decode_access_token(token + "x") is None
        assert auth_jwt.get_user_id_from_token("not-a-token") is None

    def test_wrong_secret(self):
        token = jwt.encode({"sub": "user-1"}, "other-secret", algorithm="HS256")
        assert auth_jwt.decode_access_token(token) is None

    def test_expired_token(self):
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jwt.encode(
            {"sub": "user-1", "iat": past, "exp": past + timedelta(hours=1)},
            auth_jwt.JWT_SECRET_KEY,
            algorithm=auth_jwt.JWT_ALGORITHM,
        )
        assert auth_jwt.decode_access_token(token) is None


class TestVerifyGoogleToken:
    """Test verify_google_token() with Google's verifier mocked."""

    @patch("voicetasks.auth.google_oauth.id_token.verify_oauth2_token")
    def test_valid_token(self, mock_verify):
        mock_verify.return_value = {
            "iss": "https://accounts.google.com",
            "sub": "google-42",
            "email": "ada@example.com",
            "name": "Ada",
            "picture": "https://example.com/ada.png",
        }

        assert verify_google_token("token") == {
            "id": "google-42",
            "email": "ada@example.com",
            "name": "Ada",
            "picture": "https://example.com/ada.png",
        }

    @patch("voicetasks.auth.google_oauth.id_token.verify_oauth2_token")
    def test_invalid_token(self, mock_verify):
        mock_verify.side_effect = ValueError("Token expired")
        assert verify_google_token("token") is None

    @patch("voicetasks.auth.google_oauth.id_token.verify_oauth2_token")
    def test_wrong_issuer(self, mock_verify):
        mock_verify.return_value = {"iss": "evil.example.com", "sub": "x", "email": "x@example.com"}
        assert verify_google_token("token") is None

    @patch("voicetasks.auth.google_oauth.id_token.verify_oauth2_token")
    def test_missing_email(self, mock_verify):
        mock_verify.return_value = {"iss": "accounts.google.com", "sub": "x"}
        assert verify_google_token("token") is None


class TestBearerDependency:
    """Requests without the test auth override."""

    @pytest.fixture
    def client(self, db_session):
        from voicetasks.api.app import app
        from voicetasks.database.database import get_db

        def override_get_db():
            yield db_session

        app.dependency_overrides[get_db] = override_get_db
        with TestClient(app) as client:
            yield client
        app.dependency_overrides.clear()

    def test_missing_token(self, client):
        assert client.get("/api/tasks").status_code == 401

    def test_invalid_token(self, client):
        response = client.get("/api/tasks", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401

    def test_unknown_user(self, client):
        token = auth_jwt.create_access_token("nobody")
        response = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_valid_token(self, client, test_user_id):
        token = auth_jwt.create_access_token(test_user_id)
        response = client.get("/api/auth/user", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["id"] == test_user_id
