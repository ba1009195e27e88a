"""Pytest fixtures and configuration for eventboard tests."""

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from eventboard.api.app import create_app
from eventboard.config import Settings
from eventboard.database.event_repository import EventRepository
from eventboard.database.user_repository import UserRepository


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

TEST_PASSWORD = "password123"


class TickingClock:
    """Deterministic clock that advances one second per call."""

    def __init__(self, start: datetime = datetime(2030, 1, 1, 12, 0, 0)):
        self.current = start

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def settings():
    """Settings for an isolated in-memory database and fast bcrypt."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        jwt_secret_key="test-secret-key",
        jwt_expiration_days=7,
        bcrypt_rounds=4,
    )


@pytest.fixture
def app(settings):
    """Application wired to a fresh in-memory database."""
    application = create_app(settings)
    try:
        yield application
    finally:
        application.state.engine.dispose()


@pytest.fixture
def db_session(app):
    """A database session bound to the app's engine."""
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user_repository(db_session: Session, settings):
    """Create a UserRepository instance for testing."""
    return UserRepository(db_session, bcrypt_rounds=settings.bcrypt_rounds)


@pytest.fixture
def event_repository(db_session: Session):
    """Create an EventRepository instance with a ticking clock."""
    return EventRepository(db_session, clock=TickingClock())


@pytest.fixture
def alice(user_repository):
    """Registered user Alice."""
    return user_repository.register("Alice", "Martin", "alice@x.com", TEST_PASSWORD)


@pytest.fixture
def bob(user_repository):
    """Registered user Bob."""
    return user_repository.register("Bob", "Durand", "bob@x.com", TEST_PASSWORD)


@pytest.fixture
def test_client(app):
    """FastAPI test client."""
    with TestClient(app) as client:
        yield client


def register_and_login(client: TestClient, firstname: str, lastname: str, email: str, password: str = TEST_PASSWORD) -> dict:
    """Register a user through the API and return bearer headers."""
    response = client.post(
        "/api/register",
        json={"firstname": firstname, "lastname": lastname, "email": email, "password": password},
    )
    assert response.status_code == 200
    response = client.post("/api/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def alice_headers(test_client):
    return register_and_login(test_client, "Alice", "Martin", "alice@x.com")


@pytest.fixture
def bob_headers(test_client):
    return register_and_login(test_client, "Bob", "Durand", "bob@x.com")
