"""
Shared fixtures: temporary JSON store, in-memory SQLite session,
a fixed clock and an authenticated API client.
"""
import os
import tempfile

os.environ.setdefault("GOALTRACKER_LOG_DIR", tempfile.gettempdir())
os.environ.setdefault("GOALTRACKER_STORAGE", "json")

import pytest
from datetime import datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from goaltracker import constants
from goaltracker.database import Base
from goaltracker import models  # Registers the documents table with Base
from goaltracker.repositories.document_store import JsonFileStore, SqlDocumentStore

TEST_API_KEY = "test-api-key"


@pytest.fixture
def json_store(tmp_path):
    return JsonFileStore(tmp_path / "data")


@pytest.fixture
def store(json_store):
    return json_store


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def sql_store(db_session):
    return SqlDocumentStore(db_session)


@pytest.fixture
def now():
    """Wednesday, 15 January 2025, 10:00"""
    return datetime(2025, 1, 15, 10, 0, 0)


@pytest.fixture
def client(json_store, monkeypatch):
    from fastapi.testclient import TestClient
    from goaltracker.dependencies import get_store
    from goaltracker.main import app

    monkeypatch.setattr(constants, "API_KEY", TEST_API_KEY)
    app.dependency_overrides[get_store] = lambda: json_store
    try:
        yield TestClient(app, headers={"X-API-Key": TEST_API_KEY})
    finally:
        app.dependency_overrides.clear()
