"""Shared pytest fixtures.

The API runs against an in-memory ``mongomock`` client, so no MongoDB
server is required. bcrypt runs with the minimum cost to keep tests fast.
"""
from datetime import timedelta

import mongomock
import pytest
from fastapi.testclient import TestClient

from users_service.core.app_factory import create_application
from users_service.core.config import Settings
from users_service.domain.models import UserRole
from users_service.infrastructure.persistence.mongo import MongoUserRepository
from users_service.services.credentials import PasswordHasher
from users_service.services.tokens import TokenService

TEST_DATABASE = "users-service-test"
TEST_SECRET = "test-jwt-secret-key"


@pytest.fixture
def settings():
    return Settings(
        jwt_secret=TEST_SECRET,
        jwt_expires_in=timedelta(hours=1),
        bcrypt_rounds=4,
        environment="test",
    )


@pytest.fixture
def mongo_client():
    return mongomock.MongoClient()


@pytest.fixture
def users_collection(mongo_client):
    return mongo_client[TEST_DATABASE]["users"]


@pytest.fixture
def repository(mongo_client):
    return MongoUserRepository(mongo_client, TEST_DATABASE)


@pytest.fixture
def hasher(settings):
    return PasswordHasher(rounds=settings.bcrypt_rounds)


@pytest.fixture
def tokens(settings):
    return TokenService(settings.jwt_secret, expires_in=settings.jwt_expires_in)


@pytest.fixture
def client(settings, repository):
    app = create_application(settings=settings, repository=repository)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(repository, hasher):
    """Factory inserting an account directly through the repository."""

    def _make_user(
        email="test@example.com",
        password="password123",
        first_name="Test",
        last_name="User",
        role=UserRole.USER,
        **extra,
    ):
        return repository.create_user(
            email=email,
            first_name=first_name,
            last_name=last_name,
            password_hash=hasher.hash(password) if password else None,
            role=role,
            **extra,
        )

    return _make_user


@pytest.fixture
def auth_headers(tokens):
    def _auth_headers(user):
        return {"Authorization": f"Bearer {tokens.issue(user.id)}"}

    return _auth_headers


@pytest.fixture
def admin(make_user):
    return make_user(email="admin@example.com", first_name="Ada", last_name="Admin", role=UserRole.ADMIN)
