"""
Todo API - Test Configuration

Shared fixtures for CI-safe testing without MongoDB.
"""

import pytest
from fastapi.testclient import TestClient

from todo_api.main import app
from todo_api.auth.dependencies import get_auth_service
from todo_api.auth.repository import InMemoryUserRepository
from todo_api.auth.service import AuthService
from todo_api.auth.tokens import TokenService
from todo_api.todos.repository import InMemoryTodoRepository
from todo_api.todos.router import get_todo_repository
from todo_api.todos.service import TodoService

# Lowest cost bcrypt accepts; keeps the suite fast
TEST_BCRYPT_ROUNDS = 4


@pytest.fixture
def user_repository():
    """Provide a fresh in-memory user repository for each test."""
    return InMemoryUserRepository()


@pytest.fixture
def todo_repository():
    """Provide a fresh in-memory todo repository for each test."""
    return InMemoryTodoRepository()


@pytest.fixture
def token_service():
    return TokenService()


@pytest.fixture
def auth_service(user_repository, token_service):
    return AuthService(user_repository, token_service, bcrypt_rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture
def todo_service(todo_repository):
    return TodoService(todo_repository)


@pytest.fixture
def client(auth_service, todo_repository):
    """Create test client with in-memory repositories."""
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    app.dependency_overrides[get_todo_repository] = lambda: todo_repository

    yield TestClient(app)
    app.dependency_overrides.clear()


def _register_and_login(client, credentials) -> str:
    client.post("/auth/register", json=credentials)
    response = client.post("/auth/login", json=credentials)
    return response.json()["token"]


@pytest.fixture
def registered_user(client):
    """Register a test user and return credentials."""
    credentials = {"username": "alice", "password": "pw1"}
    client.post("/auth/register", json=credentials)
    return credentials


@pytest.fixture
def auth_token(client, registered_user):
    """Get an auth token for the registered user."""
    response = client.post("/auth/login", json=registered_user)
    return response.json()["token"]


@pytest.fixture
def auth_headers(auth_token):
    """Create Authorization headers for authenticated requests."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def second_auth_headers(client):
    """Authorization headers for a second, unrelated user."""
    token = _register_and_login(client, {"username": "bob", "password": "pw2"})
    return {"Authorization": f"Bearer {token}"}
