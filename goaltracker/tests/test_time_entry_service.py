"""
Tests for TimeEntryService.

Tests cover:
1. Logging time and goal recomputation
2. Listing by timeframe or explicit range
3. Deletion and totals
"""
import pytest
from datetime import date

from goaltracker.exceptions import TimeEntryNotFoundException, ValidationException
from goaltracker.schemas import TimeEntryCreate, GoalCreate
from goaltracker.services.time_entry_service import TimeEntryService


def entry_data(entry_date, duration=3600, billable=True, points=None, user_id="user-1"):
    return TimeEntryCreate(
        user_id=user_id,
        date=entry_date,
        duration=duration,
        billable=billable,
        points=points,
        description="Research"
    )


@pytest.fixture
def service(store):
    return TimeEntryService(store)


class TestCreateEntry:
    """Tests for create_entry"""

    def test_entry_gets_id_and_status(self, service, now):
        entry = service.create_entry(entry_data(now.date()), now)

        assert entry.id.startswith("entry-")
        assert entry.status == "COMPLETED"
        assert entry.source == "manual-form"
        assert service.entry_repo.get_by_id(entry.id).duration == 3600

    def test_billable_goal_progress_follows_entries(self, service, now):
        goal = service.goal_service.create_goal(GoalCreate(
            user_id="user-1", name="Billable Hours", target=40,
            frequency="weekly", metric_key="billable_hours"
        ))

        service.create_entry(entry_data(now.date(), duration=9000), now)

        stored = service.goal_service.goal_repo.get_goal("user-1", goal.id)
        assert stored.current == 2.5

    def test_deleting_entry_recomputes_progress(self, service, now):
        goal = service.goal_service.create_goal(GoalCreate(
            user_id="user-1", name="Billable Hours", target=40, metric_key="billable_hours"
        ))
        first = service.create_entry(entry_data(now.date(), duration=3600), now)
        service.create_entry(entry_data(now.date(), duration=7200), now)

        service.delete_entry(first.id, now)

        assert service.goal_service.goal_repo.get_goal("user-1", goal.id).current == 2.0

    def test_delete_missing_entry_raises(self, service):
        with pytest.raises(TimeEntryNotFoundException):
            service.delete_entry("entry-missing")


class TestGetEntries:
    """Tests for get_entries"""

    def test_weekly_window_newest_first(self, service, now):
        service.create_entry(entry_data(date(2025, 1, 13)), now)
        service.create_entry(entry_data(date(2025, 1, 15)), now)
        service.create_entry(entry_data(date(2025, 1, 12)), now)
        service.create_entry(entry_data(date(2025, 1, 14), user_id="user-2"), now)

        entries = service.get_entries("user-1", "weekly", now=now)

        assert [e.date for e in entries] == [date(2025, 1, 15), date(2025, 1, 13)]

    def test_explicit_range(self, service, now):
        service.create_entry(entry_data(date(2025, 1, 2)), now)
        service.create_entry(entry_data(date(2025, 1, 13)), now)

        entries = service.get_entries(
            "user-1", "weekly", start_date=date(2025, 1, 1), end_date=date(2025, 1, 5), now=now
        )

        assert [e.date for e in entries] == [date(2025, 1, 2)]

    def test_inverted_range_raises(self, service, now):
        with pytest.raises(ValidationException):
            service.get_entries("user-1", start_date=date(2025, 1, 5), end_date=date(2025, 1, 1), now=now)


class TestSummarize:
    """Tests for summarize"""

    def test_totals(self, service, now):
        service.create_entry(entry_data(now.date(), duration=5400), now)
        service.create_entry(entry_data(now.date(), duration=1800, billable=False, points=2.5), now)

        summary = service.summarize(service.get_entries("user-1", "weekly", now=now))

        assert summary.total_entries == 2
        assert summary.total_hours == 2.0
        assert summary.billable_hours == 1.5
        assert summary.non_billable_points == 2.5

    def test_empty(self, service):
        summary = service.summarize([])

        assert summary.total_entries == 0
        assert summary.total_hours == 0
