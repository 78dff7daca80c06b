"""
Tests for document stores and repositories.

Tests cover:
1. JSON file and SQL adapters
2. Malformed documents
3. Goal history and daily snapshot document shapes
"""
import json
import pytest
from datetime import date, datetime

from goaltracker.exceptions import StorageException
from goaltracker.repositories.goal_repository import GoalHistoryRepository, CompanyGoalRepository
from goaltracker.repositories.snapshot_repository import DailySnapshotRepository
from goaltracker.repositories.time_entry_repository import TimeEntryRepository
from goaltracker.schemas import DailySnapshot


@pytest.fixture(params=["json", "sql"])
def any_store(request):
    """Both adapters must behave the same"""
    return request.getfixturevalue(f"{request.param}_store")


class TestDocumentStores:
    """Behaviour shared by both adapters"""

    def test_missing_document_returns_default(self, any_store):
        assert any_store.get("time-entries") is None
        assert any_store.get("time-entries", []) == []

    def test_put_replaces_document(self, any_store):
        any_store.put("company-goals", {"weeklyBillable": 30})
        any_store.put("company-goals", {"weeklyBillable": 35})

        assert any_store.get("company-goals") == {"weeklyBillable": 35}

    def test_delete(self, any_store):
        any_store.put("time-entries", [])

        assert any_store.delete("time-entries") is True
        assert any_store.delete("time-entries") is False
        assert any_store.get("time-entries") is None


class TestJsonFileStore:
    """JSON file adapter specifics"""

    def test_writes_pretty_json_without_leftovers(self, json_store):
        json_store.put("personal-goals", {"user-1": []})

        files = sorted(p.name for p in json_store.data_dir.iterdir())
        assert files == ["personal-goals.json"]
        assert json.loads((json_store.data_dir / "personal-goals.json").read_text()) == {"user-1": []}

    def test_malformed_file_raises(self, json_store):
        json_store.data_dir.mkdir(parents=True)
        (json_store.data_dir / "time-entries.json").write_text("[{")

        with pytest.raises(StorageException):
            json_store.get("time-entries")


class TestRepositoriesOnStores:
    """Repository document shapes"""

    def test_history_document_shape(self, any_store):
        assert GoalHistoryRepository(any_store).get_all() == []

        GoalHistoryRepository(any_store).append([])

        assert any_store.get("goal-history") == {"success": True, "data": {"goalHistory": []}}

    def test_malformed_history_raises(self, any_store):
        any_store.put("goal-history", {"data": {"goalHistory": "nope"}})

        with pytest.raises(StorageException):
            GoalHistoryRepository(any_store).get_all()

    def test_snapshot_upsert_is_keyed_on_date_and_user(self, any_store):
        repo = DailySnapshotRepository(any_store)
        stamp = datetime(2025, 1, 15, 23, 55)
        repo.upsert(DailySnapshot(date=date(2025, 1, 15), user_id="user-1", billable_hours=3, timestamp=stamp))
        repo.upsert(DailySnapshot(date=date(2025, 1, 15), user_id="user-2", billable_hours=4, timestamp=stamp))
        repo.upsert(DailySnapshot(date=date(2025, 1, 15), user_id="user-1", billable_hours=7, timestamp=stamp))

        stored = any_store.get("daily-snapshots")["dailySnapshots"]
        assert [(s["date"], s["userId"], s["billableHours"]) for s in stored] == [
            ("2025-01-15", "user-1", 7), ("2025-01-15", "user-2", 4)
        ]

    def test_malformed_snapshots_raise(self, any_store):
        any_store.put("daily-snapshots", {"dailySnapshots": {}})

        with pytest.raises(StorageException):
            DailySnapshotRepository(any_store).get_all()

    def test_time_entries_must_be_a_list(self, any_store):
        any_store.put("time-entries", {"entry-1": {}})

        with pytest.raises(StorageException):
            TimeEntryRepository(any_store).get_all()

    def test_company_goals_default_to_zero(self, any_store):
        goals = CompanyGoalRepository(any_store).get()

        assert (goals.weekly_billable, goals.monthly_billable, goals.annual_billable) == (0, 0, 0)

    def test_company_goals_stored_camel_case(self, any_store):
        repo = CompanyGoalRepository(any_store)
        goals = repo.get()
        goals.annual_billable = 1800
        repo.save(goals)

        stored = any_store.get("company-goals")
        assert stored["annualBillable"] == 1800
        assert "updatedAt" in stored
