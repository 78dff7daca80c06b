"""
Daily snapshot repository - end-of-day billable hours per user.
Stored as {"dailySnapshots": [...]} with one snapshot per (date, user).
"""
from typing import List

from goaltracker.constants import DOCUMENT_DAILY_SNAPSHOTS
from goaltracker.exceptions import StorageException
from goaltracker.repositories.document_store import DocumentStore
from goaltracker.repositories.goal_repository import dump_model
from goaltracker.schemas import DailySnapshot


class DailySnapshotRepository:
    """Repository for daily billable-hour snapshots"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def _load(self) -> list:
        data = self.store.get(DOCUMENT_DAILY_SNAPSHOTS) or {"dailySnapshots": []}
        snapshots = data.get("dailySnapshots") if isinstance(data, dict) else None
        if not isinstance(snapshots, list):
            raise StorageException("read", "daily snapshots document is malformed")
        return snapshots

    def get_all(self) -> List[DailySnapshot]:
        return [DailySnapshot.model_validate(snapshot) for snapshot in self._load()]

    def upsert(self, snapshot: DailySnapshot) -> DailySnapshot:
        """Replace the snapshot with the same date and user, or append a new one"""
        snapshots = self._load()
        record = dump_model(snapshot)
        for index, existing in enumerate(snapshots):
            if existing.get("date") == record["date"] and existing.get("userId") == record["userId"]:
                snapshots[index] = record
                break
        else:
            snapshots.append(record)
        self.store.put(DOCUMENT_DAILY_SNAPSHOTS, {"dailySnapshots": snapshots})
        return snapshot
