"""
Time entry repository - Data access layer for logged time.
"""
from typing import List, Optional

from goaltracker.constants import DOCUMENT_TIME_ENTRIES
from goaltracker.exceptions import StorageException
from goaltracker.repositories.document_store import DocumentStore
from goaltracker.repositories.goal_repository import dump_model
from goaltracker.schemas import TimeEntry


class TimeEntryRepository:
    """Repository for TimeEntry data access"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def _load(self) -> list:
        data = self.store.get(DOCUMENT_TIME_ENTRIES, [])
        if not isinstance(data, list):
            raise StorageException("read", "time entries document is not a list")
        return data

    def get_all(self) -> List[TimeEntry]:
        return [TimeEntry.model_validate(entry) for entry in self._load()]

    def get_for_user(self, user_id: str) -> List[TimeEntry]:
        return [entry for entry in self.get_all() if entry.user_id == user_id]

    def get_by_id(self, entry_id: str) -> Optional[TimeEntry]:
        for entry in self.get_all():
            if entry.id == entry_id:
                return entry
        return None

    def add(self, entry: TimeEntry) -> TimeEntry:
        data = self._load()
        data.append(dump_model(entry))
        self.store.put(DOCUMENT_TIME_ENTRIES, data)
        return entry

    def delete(self, entry_id: str) -> bool:
        data = self._load()
        remaining = [entry for entry in data if entry.get("id") != entry_id]
        if len(remaining) == len(data):
            return False
        self.store.put(DOCUMENT_TIME_ENTRIES, remaining)
        return True
