import os

# Point settings at SQLite before any larder module builds the engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from larder.main import app
from larder.database import Base, get_db
from larder.models import Household, User
from larder.services import households as household_service
from larder.services.kitchen_ai import KitchenAI, get_kitchen_ai
from larder.utils.auth import create_identity_token

# --- Test Database Setup ---

from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.compiler import compiles


@compiles(JSONB, 'sqlite')
def compile_jsonb(element, compiler, **kw):
    return "JSON"


SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Direct database session for setup and service-level tests."""
    session = TestingSessionLocal()
    yield session
    session.close()


# --- Fake Claude client ---

class FakeMessages:
    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return FakeResponse(reply)


class FakeBlock:
    def __init__(self, text):
        self.type = "text"
        self.text = text


class FakeResponse:
    def __init__(self, text):
        self.content = [FakeBlock(text)]


class FakeAnthropic:
    def __init__(self, *replies):
        self.messages = FakeMessages(replies)


@pytest.fixture
def fake_ai():
    """A KitchenAI whose Claude client returns queued replies.

    Queue with ``fake_ai._client.messages.replies.append(text_or_exception)``.
    """
    ai = KitchenAI()
    ai.api_key = "test-key"
    ai._client = FakeAnthropic()
    return ai


# --- Identity ---

def make_user(db, external_id="user-1", email="alice@example.com", name="Alice") -> User:
    user = User(external_id=external_id, email=email, name=name, preferences={})
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {create_identity_token(user.external_id)}"}


@pytest.fixture
def user(db_session):
    return make_user(db_session)


@pytest.fixture
def household(db_session, user) -> Household:
    created = household_service.create_household(db_session, user.id, "Smiths")
    return db_session.get(Household, created["household_id"])


@pytest.fixture
def auth_headers(user):
    return auth_headers_for(user)


@pytest.fixture
def make_member(db_session):
    """Factory for extra users, e.g. a second household member."""
    def _make(external_id: str, email: str, name: str | None = None) -> User:
        return make_user(db_session, external_id=external_id, email=email, name=name)
    return _make


@pytest.fixture
def client(fake_ai):
    """Test client with DB and AI overrides."""
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_kitchen_ai] = lambda: fake_ai
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def headers_for():
    return auth_headers_for
