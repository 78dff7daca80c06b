"""
Document storage - persistence layer for JSON documents.
Each document (personal goals, company goals, goal history, time entries)
is stored whole under a key. Two adapters: one JSON file per key, or one
row per key in a SQL table.
"""
import json
import logging
import os
from pathlib import Path
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from goaltracker.exceptions import StorageException
from goaltracker.models import Document

logger = logging.getLogger("goaltracker.storage")


class DocumentStore:
    """Key/value store for JSON documents"""

    def get(self, key: str, default: Any = None) -> Any:
        """Get a document, or default when it does not exist"""
        raise NotImplementedError

    def put(self, key: str, value: Any) -> None:
        """Create or replace a document"""
        raise NotImplementedError

    def delete(self, key: str) -> bool:
        """Delete a document. Returns False if it did not exist"""
        raise NotImplementedError


class JsonFileStore(DocumentStore):
    """Stores each document as <data_dir>/<key>.json"""

    def __init__(self, data_dir):
        self.data_dir = Path(data_dir)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get(self, key: str, default: Any = None) -> Any:
        path = self._path(key)
        if not path.exists():
            return default

        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageException("read", f"{path}: {e}")

    def put(self, key: str, value: Any) -> None:
        path = self._path(key)
        tmp_path = path.with_name(path.name + ".tmp")

        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(value, f, indent=2)
            # Readers never see a half-written file
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            raise StorageException("write", f"{path}: {e}")

        logger.debug(f"Saved document {key} to {path}")

    def delete(self, key: str) -> bool:
        path = self._path(key)
        if not path.exists():
            return False

        try:
            path.unlink()
        except OSError as e:
            raise StorageException("delete", f"{path}: {e}")
        return True


class SqlDocumentStore(DocumentStore):
    """Stores each document as a row of the documents table"""

    def __init__(self, db: Session):
        self.db = db

    def _get_row(self, key: str):
        return self.db.query(Document).filter(Document.key == key).first()

    def get(self, key: str, default: Any = None) -> Any:
        try:
            row = self._get_row(key)
        except SQLAlchemyError as e:
            raise StorageException("read", f"{key}: {e}")

        if not row:
            return default

        try:
            return json.loads(row.payload)
        except json.JSONDecodeError as e:
            raise StorageException("read", f"{key}: {e}")

    def put(self, key: str, value: Any) -> None:
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageException("write", f"{key}: {e}")

        try:
            row = self._get_row(key)
            if row:
                row.payload = payload
            else:
                self.db.add(Document(key=key, payload=payload))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageException("write", f"{key}: {e}")

    def delete(self, key: str) -> bool:
        try:
            row = self._get_row(key)
            if not row:
                return False
            self.db.delete(row)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageException("delete", f"{key}: {e}")
        return True
