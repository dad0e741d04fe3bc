"""Shared test fixtures for the ContextForge test suite.

Tests run against a throwaway SQLite file (or ``TEST_DATABASE_URL`` when
set). Tables are created by importing the app and emptied before each
test, so every test starts from a clean database.
"""

import os
import tempfile
import uuid

# Force auth off and use the test database before any app imports.
_TEST_DB_DIR = tempfile.mkdtemp(prefix="contextforge-tests-")
os.environ["DATABASE_URL"] = os.environ.get(
    "TEST_DATABASE_URL",
    f"sqlite:///{os.path.join(_TEST_DB_DIR, 'test.db')}",
)
os.environ["AUTH_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "development"
os.environ["LOG_FORMAT"] = "text"

import pytest
from fastapi.testclient import TestClient

from contextforge.core.auth import ANONYMOUS_USER_ID
from contextforge.database import Base, SessionLocal, get_db
from contextforge.main import app
from contextforge.models import Item
from contextforge.schemas.folder import FolderCreate
from contextforge.services.folder_events import FolderEventBus
from contextforge.services.folder_service import FolderService


@pytest.fixture(autouse=True)
def _clean_tables():
    """Empty every table before each test, children before parents.

    Runs before the test (not after) so test failures leave data
    available for debugging.
    """
    db = SessionLocal()
    try:
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()
    finally:
        db.close()
    yield


@pytest.fixture()
def db():
    """Per-test database session."""
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def client(db):
    """FastAPI TestClient with the DB dependency overridden to use the test session."""

    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def owner() -> str:
    """Owner id every request acts as while auth is disabled."""
    return ANONYMOUS_USER_ID


@pytest.fixture()
def other_owner() -> str:
    return "someone-else"


@pytest.fixture()
def events() -> FolderEventBus:
    """A private event bus so tests never see each other's listeners."""
    return FolderEventBus()


@pytest.fixture()
def service(db, events) -> FolderService:
    return FolderService(db, events=events)


@pytest.fixture()
def make_item(db, owner):
    """Factory inserting an item row and returning its id."""

    def _make(name: str = "Test Prompt", owner_id: str = None, **overrides) -> str:
        item = Item(
            id=overrides.pop("id", f"item-{uuid.uuid4().hex[:12]}"),
            owner_id=owner_id or owner,
            name=name,
            type=overrides.pop("type", "prompt"),
            content=overrides.pop("content", "Summarise the following text."),
            **overrides,
        )
        db.add(item)
        db.commit()
        return item.id

    return _make


@pytest.fixture()
def make_folder(service, owner):
    """Factory creating a folder through the service and returning its response."""

    def _make(name: str, parent_id: str = None, owner_id: str = None, **attrs):
        return service.create_folder(owner_id or owner, FolderCreate(name=name, parent_id=parent_id, **attrs))

    return _make
