"""
Request dependencies.
Selects the document store from GOALTRACKER_STORAGE.
"""
from contextlib import contextmanager

from goaltracker.constants import STORAGE_BACKEND, DATA_DIRECTORY
from goaltracker.database import SessionLocal
from goaltracker.repositories.document_store import JsonFileStore, SqlDocumentStore


@contextmanager
def open_store():
    """Open the configured document store, closing its session on exit"""
    if STORAGE_BACKEND != "sql":
        yield JsonFileStore(DATA_DIRECTORY)
        return

    db = SessionLocal()
    try:
        yield SqlDocumentStore(db)
    finally:
        db.close()


def get_store():
    """Yield the configured document store for the duration of a request"""
    with open_store() as store:
        yield store
