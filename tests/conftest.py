"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from bienes_raices import models  # noqa: F401
from bienes_raices.api.dependencies import get_notification_dispatcher
from bienes_raices.database import Base, get_db
from bienes_raices.main import app
from bienes_raices.models.account import Account
from bienes_raices.repositories.accounts import AccountRepository
from bienes_raices.services.auth import hash_password

# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace(
        "/bienes_raices", "/bienes_raices_test"
    )
else:
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ACCOUNT_PASSWORD = "secret1"


class RecordingDispatcher:
    """Notification dispatcher that keeps what it was asked to send."""

    def __init__(self):
        self.sent: list[dict] = []

    def send_confirmation(self, to: str, name: str, token: str) -> None:
        self.sent.append({"kind": "confirmation", "to": to, "name": name, "token": token})

    def send_reset(self, to: str, name: str, token: str) -> None:
        self.sent.append({"kind": "reset", "to": to, "name": name, "token": token})

    def last(self, kind: str) -> dict:
        return [message for message in self.sent if message["kind"] == kind][-1]


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def repository(db):
    return AccountRepository(db)


@pytest.fixture(scope="function")
def client(db, dispatcher):
    """Create a test client with database and mail overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_dispatcher] = lambda: dispatcher
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def csrf_token(client):
    """Load a form so the client holds an anti-forgery cookie, and return its value."""
    response = client.get("/login")
    assert response.status_code == 200
    return client.cookies["_csrf"]


def _add_account(db, name: str, email: str, confirmed: bool, pending_token: str | None = None):
    account = Account(
        name=name,
        email=email,
        password_hash=hash_password(ACCOUNT_PASSWORD),
        confirmed=confirmed,
        pending_token=pending_token,
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


@pytest.fixture
def confirmed_account(db):
    """A confirmed account whose password is ACCOUNT_PASSWORD."""
    return _add_account(db, "Abdiel", "abdiel@gmail.com", confirmed=True)


@pytest.fixture
def unconfirmed_account(db):
    """An account still waiting on its confirmation link."""
    return _add_account(
        db, "Marta", "marta@example.com", confirmed=False, pending_token="pending-confirmation"
    )
