"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient

from src.config import Settings
from src.database import Base, Database, get_db
from src.main import create_app
from src.models.category import Category
from src.services.auth import PasswordHasher, TokenService


class AuthHeaders(dict):
    """Dict subclass that also stores user_id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace(
        "/task_tracker", "/task_tracker_test"
    )
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

TEST_PASSWORD = "testpass123"  # noqa: S105

test_settings = Settings(
    database_url=SQLALCHEMY_DATABASE_URL,
    jwt_secret="test-secret",  # noqa: S106
    bcrypt_rounds=4,
    environment="test",
    log_level="WARNING",
)
test_database = Database(test_settings)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        # For PostgreSQL, create the test database
        from sqlalchemy_utils import create_database, database_exists

        # Create test database if it doesn't exist
        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    test_database.create_all()
    yield
    # Don't drop database - just leave it for next run (each test cleans up after itself)


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = test_database.session_factory()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def settings():
    return test_settings


@pytest.fixture
def token_service():
    return TokenService(test_settings)


@pytest.fixture
def password_hasher():
    return PasswordHasher(test_settings.bcrypt_rounds)


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""
    app = create_app(test_settings)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def category(db):
    """Insert a category for tasks to reference."""
    category = Category(name="Work")
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def register_and_login(client, email: str, password: str = TEST_PASSWORD) -> AuthHeaders:
    response = client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "first_name": "Test", "last_name": "User"},
    )
    assert response.status_code == 201
    user_id = response.json()["id"]

    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    token = response.json()["access_token"]

    return AuthHeaders({"Authorization": f"Bearer {token}"}, user_id=user_id, email=email)


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    return register_and_login(client, "test@example.com")


@pytest.fixture
def other_auth_headers(client):
    """A second user, for ownership checks."""
    return register_and_login(client, "other@example.com")
