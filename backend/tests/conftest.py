"""Pytest fixtures for Needledrop tests."""
import os

# Settings are read once at import time
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SESSION_TRACKING"] = "false"
os.environ["LOG_PATH"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from app.main import app
from app.database import Base, get_db, configure_sqlite
from app.dependencies import get_session_store
from app.models.album import Album
from app.services.auth import AuthService
from app.services.sessions import SessionStore

# In-memory SQLite for tests
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = configure_sqlite(
    create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class InMemoryRedis:
    """The handful of redis commands SessionStore uses, kept in dicts."""

    def __init__(self):
        self.values = {}
        self.sets = {}
        self.ttls = {}

    def pipeline(self):
        return self

    def execute(self):
        return []

    def set(self, key, value, ex=None):
        self.values[key] = str(value)
        if ex is not None:
            self.ttls[key] = ex
        return True

    def sadd(self, key, *members):
        self.sets.setdefault(key, set()).update(members)
        return len(members)

    def smembers(self, key):
        return set(self.sets.get(key, set()))

    def expire(self, key, seconds):
        self.ttls[key] = seconds
        return True

    def exists(self, *keys):
        return sum(1 for k in keys if k in self.values or k in self.sets)

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.values.pop(key, None) is not None or self.sets.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with the test database and no session tracking."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_store] = lambda: None
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def session_store():
    """Session store backed by an in-memory redis stand-in."""
    return SessionStore(InMemoryRedis())


@pytest.fixture
def make_user(db):
    """Factory: create a user by username."""
    def _make(username: str, password: str = "password123"):
        return AuthService(db).create_user(username, password, f"{username}@example.com")
    return _make


@pytest.fixture
def test_user(make_user):
    """Create a test user."""
    return make_user("testuser")


@pytest.fixture
def alice(make_user):
    return make_user("alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob")


@pytest.fixture
def carol(make_user):
    return make_user("carol")


@pytest.fixture
def make_album(db):
    """Factory: create a stored catalog album."""
    def _make(catalog_id: str, name: str = "Test Album", artist: str = "Test Artist"):
        album = Album(catalog_id=catalog_id, name=name, artist=artist)
        db.add(album)
        db.commit()
        db.refresh(album)
        return album
    return _make


@pytest.fixture
def test_album(make_album):
    """Create a test album."""
    return make_album("4LH4d3cOWNNsVw41Gqt2kv", "The Dark Side of the Moon", "Pink Floyd")


@pytest.fixture
def other_album(make_album):
    return make_album("2ix8vWvvSp2Yo7rKMiWpkg", "Kid A", "Radiohead")


@pytest.fixture
def headers_for(db):
    """Factory: authorization headers for a user."""
    def _headers(user):
        token = AuthService(db).create_token(user.id)
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def auth_headers(headers_for, test_user):
    """Get authorization headers for test user."""
    return headers_for(test_user)
