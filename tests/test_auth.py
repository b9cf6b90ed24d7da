"""
Todo API - Authentication Tests

Tests for register, login, and bearer token checks on protected routes.
"""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from pymongo.errors import PyMongoError

from todo_api.auth.models import User
from todo_api.auth.tokens import TokenService


class TestRegister:
    """Tests for POST /auth/register."""

    def test_register_success(self, client):
        """Successful registration should return 201."""
        response = client.post(
            "/auth/register",
            json={"username": "newuser", "password": "securepassword123"},
        )
        assert response.status_code == 201
        assert response.json() == {"message": "User registered successfully"}

    def test_register_duplicate_username(self, client, registered_user):
        """Registering an existing username should return 400."""
        response = client.post("/auth/register", json=registered_user)
        assert response.status_code == 400
        assert response.json() == {"error": "Username already taken"}

    @pytest.mark.parametrize(
        "body",
        [
            {"username": "carol"},
            {"password": "secret"},
            {"username": "", "password": "secret"},
            {"username": "carol", "password": ""},
            {},
        ],
    )
    def test_register_missing_fields(self, client, body):
        response = client.post("/auth/register", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "Missing username or password"}

    def test_register_wrong_types(self, client):
        response = client.post("/auth/register", json={"username": ["x"], "password": 5})
        assert response.status_code == 400
        assert "error" in response.json()

    def test_register_malformed_json(self, client):
        response = client.post(
            "/auth/register",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400

    def test_register_response_never_leaks_hash(self, client):
        response = client.post("/auth/register", json={"username": "dave", "password": "pw"})
        assert "password" not in response.text
        assert "$2" not in response.text

    def test_register_database_failure(self, client, user_repository, monkeypatch):
        monkeypatch.setattr(
            user_repository, "create", AsyncMock(side_effect=PyMongoError("connection reset"))
        )

        response = client.post("/auth/register", json={"username": "erin", "password": "pw"})
        assert response.status_code == 400
        assert response.json() == {"error": "Failed to register user"}

    def test_password_not_stored_plaintext(self, client, user_repository):
        """Verify password is hashed, not stored as plaintext."""
        client.post("/auth/register", json={"username": "hashuser", "password": "plaintext"})

        users = list(user_repository._users.values())
        assert len(users) == 1
        assert users[0].password_hash != "plaintext"
        # bcrypt hashes start with $2a$ or $2b$
        assert users[0].password_hash.startswith("$2")


class TestLogin:
    """Tests for POST /auth/login."""

    def test_login_success(self, client, registered_user):
        response = client.post("/auth/login", json=registered_user)
        assert response.status_code == 200
        data = response.json()
        assert data["username"] == registered_user["username"]
        assert data["token"]

    def test_wrong_password_and_unknown_user_are_indistinguishable(self, client, registered_user):
        wrong_password = client.post(
            "/auth/login",
            json={"username": registered_user["username"], "password": "wrong"},
        )
        unknown_user = client.post(
            "/auth/login",
            json={"username": "nobody", "password": "wrong"},
        )
        assert wrong_password.status_code == unknown_user.status_code == 401
        assert wrong_password.json() == unknown_user.json() == {"error": "Invalid credentials"}

    def test_login_missing_fields(self, client):
        response = client.post("/auth/login", json={"username": "alice"})
        assert response.status_code == 400
        assert response.json() == {"error": "Missing username or password"}

    def test_login_token_is_accepted(self, client, registered_user, token_service):
        token = client.post("/auth/login", json=registered_user).json()["token"]
        identity = token_service.verify(token)
        assert identity.username == registered_user["username"]

        response = client.get("/todos", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200


class TestBearerToken:
    """Token checks on protected routes."""

    def test_missing_token(self, client):
        response = client.get("/todos")
        assert response.status_code == 401
        assert response.json() == {"error": "Missing token"}

    @pytest.mark.parametrize("header", ["Bearer", "token-without-scheme"])
    def test_header_without_token_counts_as_missing(self, client, header):
        response = client.get("/todos", headers={"Authorization": header})
        assert response.status_code == 401
        assert response.json() == {"error": "Missing token"}

    def test_second_word_is_verified_whatever_the_scheme(self, client, auth_token):
        response = client.get("/todos", headers={"Authorization": "Basic abc"})
        assert response.status_code == 403

        response = client.get("/todos", headers={"Authorization": f"Token {auth_token}"})
        assert response.status_code == 200

    def test_garbage_token(self, client):
        response = client.get("/todos", headers={"Authorization": "Bearer invalid_token_here"})
        assert response.status_code == 403
        assert response.json() == {"error": "Invalid token"}

    def test_expired_token(self, client, token_service):
        user = User.create(username="alice", password_hash="x")
        expired = token_service.create_access_token(user, expires_delta=timedelta(seconds=-1))

        response = client.get("/todos", headers={"Authorization": f"Bearer {expired}"})
        assert response.status_code == 403

    def test_token_signed_with_other_secret(self, client):
        user = User.create(username="alice", password_hash="x")
        forged = TokenService(secret_key="some-other-secret").create_access_token(user)

        response = client.get("/todos", headers={"Authorization": f"Bearer {forged}"})
        assert response.status_code == 403

    def test_token_for_unknown_user_is_trusted(self, client, token_service):
        """Verification is stateless; a well-signed token needs no user record."""
        user = User.create(username="ghost", password_hash="x")
        token = token_service.create_access_token(user)

        response = client.get("/todos", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json() == []
