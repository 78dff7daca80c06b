"""
Tests for document store selection.
"""
from pathlib import Path
from unittest.mock import MagicMock

from goaltracker import dependencies
from goaltracker.dependencies import open_store, get_store
from goaltracker.repositories.document_store import JsonFileStore, SqlDocumentStore


class TestOpenStore:
    """Tests for open_store / get_store"""

    def test_json_backend_uses_data_directory(self, tmp_path, monkeypatch):
        monkeypatch.setattr(dependencies, "STORAGE_BACKEND", "json")
        monkeypatch.setattr(dependencies, "DATA_DIRECTORY", str(tmp_path))

        with open_store() as store:
            assert isinstance(store, JsonFileStore)
            assert store.data_dir == Path(tmp_path)

    def test_sql_backend_closes_session(self, monkeypatch):
        """The session is closed once the store is released"""
        session = MagicMock()
        monkeypatch.setattr(dependencies, "STORAGE_BACKEND", "sql")
        monkeypatch.setattr(dependencies, "SessionLocal", lambda: session)

        with open_store() as store:
            assert isinstance(store, SqlDocumentStore)
            assert store.db is session
            session.close.assert_not_called()

        session.close.assert_called_once()

    def test_request_dependency_closes_session(self, monkeypatch):
        session = MagicMock()
        monkeypatch.setattr(dependencies, "STORAGE_BACKEND", "sql")
        monkeypatch.setattr(dependencies, "SessionLocal", lambda: session)

        generator = get_store()
        assert isinstance(next(generator), SqlDocumentStore)
        generator.close()

        session.close.assert_called_once()
