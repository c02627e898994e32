"""Shared test fixtures."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
from datetime import datetime, timedelta
from jose import jwt

from app.config import settings
from app.database import Base
from app.dependencies import get_db
from app.main import app
from app.models.category import Category
from app.schemas.todo import TodoCreate
from app.services import todo_service
from app.services.notifier import ChangeNotifier

OWNER = "owner-1"
OTHER_OWNER = "owner-2"


class RecordingPublisher:
    """Publisher double that keeps every event it is given."""

    def __init__(self):
        self.events = []

    def publish(self, owner_id, event):
        self.events.append((owner_id, event))

    def actions(self):
        return [event["action"] for _, event in self.events]


def make_token(owner_id, expires_in=timedelta(hours=1)):
    claims = {"sub": owner_id, "exp": datetime.utcnow() + expires_in}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def bearer(owner_id):
    return {"Authorization": f"Bearer {make_token(owner_id)}"}


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test using in-memory SQLite."""
    # Use StaticPool to ensure all connections use the same in-memory database
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    Base.metadata.create_all(bind=engine)

    # Create session
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def notifier(publisher):
    return ChangeNotifier(publisher)


def _override_db(db_session):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="function")
def client(db_session, publisher):
    """Test client with database override and a recording publisher."""
    _override_db(db_session)
    live_publisher = app.state.publisher
    app.state.publisher = publisher
    with TestClient(app) as test_client:
        yield test_client
    app.state.publisher = live_publisher
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def live_client(db_session):
    """Test client keeping the real WebSocket connection manager."""
    _override_db(db_session)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return bearer(OWNER)


@pytest.fixture
def other_headers():
    return bearer(OTHER_OWNER)


@pytest.fixture
def sample_category(db_session):
    """A non-default category for OWNER."""
    category = Category(
        owner_id=OWNER,
        name="Work",
        color="#FF9800",
        icon="work",
    )
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def make_todo(db_session):
    """Factory creating todos through the service."""
    def _make(owner_id=OWNER, **fields):
        fields.setdefault("title", "Todo")
        return todo_service.create_todo(db_session, owner_id, TodoCreate(**fields))
    return _make


@pytest.fixture
def sample_todo(make_todo, sample_category):
    return make_todo(
        title="Write report",
        description="Quarterly numbers",
        category_id=sample_category.id,
        tags=["work", "urgent"],
    )
