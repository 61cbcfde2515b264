"""Pytest configuration and fixtures."""

import os
import threading

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from pushhub.api.dependencies import get_push_client
from pushhub.database import Base, build_engine, get_db
from pushhub.main import app
from pushhub.models import Client, Notification
from pushhub.models.enums import UserRole
from pushhub.services.auth import create_user
from pushhub.services.notification_records import NotificationRecordStore
from pushhub.services.push_delivery import (
    DeliveryOutcome,
    DeliveryResult,
    PushDeliveryClient,
    VapidConfig,
    classify_status,
)
from pushhub.services.subscription_store import SubscriptionStore

MASTER_EMAIL = "master@example.com"
MASTER_PASSWORD = "MasterPass123"
CLIENT_EMAIL = "owner@acme.example.com"
CLIENT_PASSWORD = "ClientPass123"


class AuthHeaders(dict):
    """Dict subclass that also stores the user's email and ids."""

    def __init__(
        self,
        *args,
        email: str = "",
        user_id: int | None = None,
        client_id: int | None = None,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self.email = email
        self.user_id = user_id
        self.client_id = client_id


class FakeDeliveryClient(PushDeliveryClient):
    """Delivery client answering with canned push service status codes.

    ``responses`` maps an endpoint to an HTTP status code or an exception to
    raise; unknown endpoints succeed with 201.
    """

    def __init__(self, responses: dict | None = None):
        super().__init__(VapidConfig("test-public-key", "test-private-key", "admin@example.com"))
        self.responses = responses or {}
        self.calls: list[tuple] = []
        self._lock = threading.Lock()

    def send(self, target, payload):
        with self._lock:
            self.calls.append((target, payload))
        response = self.responses.get(target.endpoint, 201)
        if isinstance(response, Exception):
            raise response
        outcome = classify_status(response)
        error = None if outcome == DeliveryOutcome.SUCCESS else f"status {response}"
        return DeliveryResult(target.subscription_id, outcome, response, error)

    @property
    def endpoints_called(self) -> list[str]:
        return sorted(target.endpoint for target, _ in self.calls)


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/pushhub", "/pushhub_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = build_engine(SQLALCHEMY_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


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

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

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
def push_enabled(client):
    """Enable push endpoints with a fake delivery client."""
    fake = FakeDeliveryClient()
    app.dependency_overrides[get_push_client] = lambda: fake
    return fake


@pytest.fixture
def master_headers(client, db):
    """Create the master user and return its auth headers."""
    user = create_user(db, MASTER_EMAIL, MASTER_PASSWORD, role=UserRole.MASTER)

    response = client.post(
        "/api/v1/auth/login", json={"email": MASTER_EMAIL, "password": MASTER_PASSWORD}
    )
    assert response.status_code == 200
    token = response.json()["access_token"]
    return AuthHeaders({"Authorization": f"Bearer {token}"}, email=MASTER_EMAIL, user_id=user.id)


@pytest.fixture
def client_headers(client, master_headers):
    """Create a tenant through the master API and return its user's auth headers."""
    response = client.post(
        "/api/v1/clients",
        headers=master_headers,
        json={
            "name": "Acme Corp",
            "email": CLIENT_EMAIL,
            "password": CLIENT_PASSWORD,
            "brand_logo_url": "https://cdn.acme.com/logo.png",
        },
    )
    assert response.status_code == 201
    data = response.json()

    login = client.post(
        "/api/v1/auth/login", json={"email": CLIENT_EMAIL, "password": CLIENT_PASSWORD}
    )
    assert login.status_code == 200
    token = login.json()["access_token"]
    return AuthHeaders(
        {"Authorization": f"Bearer {token}"},
        email=CLIENT_EMAIL,
        user_id=data["user"]["id"],
        client_id=data["client"]["id"],
    )


@pytest.fixture
def make_delivery_client():
    """Factory for fake delivery clients with canned responses per endpoint."""
    return FakeDeliveryClient


@pytest.fixture
def tenant(db):
    """An active client created directly in the database."""
    tenant = Client(name="Tenant T", brand_logo_url="https://cdn.tenant.com/logo.png")
    db.add(tenant)
    db.commit()
    db.refresh(tenant)
    return tenant


@pytest.fixture
def subscribe_endpoints(db):
    """Factory registering push endpoints for a client."""

    def _subscribe(client_id: int, *endpoints: str) -> list:
        store = SubscriptionStore(db)
        return [
            store.upsert(client_id, endpoint, f"p256dh-{i}", f"auth-{i}")[0]
            for i, endpoint in enumerate(endpoints)
        ]

    return _subscribe


@pytest.fixture
def pending_notification(db):
    """Factory creating a pending notification record."""

    def _create(client_id: int, recipient_count: int, title: str = "Sale") -> Notification:
        return NotificationRecordStore(db).create_pending(
            client_id=client_id,
            title=title,
            content="Everything is 20% off today",
            recipient_count=recipient_count,
            target_url="/sale",
        )

    return _create
