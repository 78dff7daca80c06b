"""
Time entry service.
Handles logging time and keeping billable-hour goals in step with it.
"""
import logging
import time
import uuid
from datetime import date, datetime
from typing import List, Optional

from goaltracker.constants import (
    TIMEFRAME_MONTHLY, TIME_ENTRY_STATUS_COMPLETED, SECONDS_PER_HOUR
)
from goaltracker.exceptions import TimeEntryNotFoundException, ValidationException
from goaltracker.repositories.document_store import DocumentStore
from goaltracker.repositories.time_entry_repository import TimeEntryRepository
from goaltracker.schemas import TimeEntry, TimeEntryCreate, TimeEntrySummary
from goaltracker.services.date_service import DateService
from goaltracker.services.goal_service import GoalService

logger = logging.getLogger("goaltracker.time_entries")


class TimeEntryService:
    """Service for time entries"""

    def __init__(self, store: DocumentStore):
        self.entry_repo = TimeEntryRepository(store)
        self.goal_service = GoalService(store)

    def create_entry(self, entry_data: TimeEntryCreate, now: Optional[datetime] = None) -> TimeEntry:
        """
        Log a time entry and recompute the user's billable-hour goals.

        Args:
            entry_data: Entry to store
            now: Reference moment for goal periods (defaults to now)

        Returns:
            Stored entry
        """
        entry = TimeEntry(
            id=f"entry-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}",
            status=TIME_ENTRY_STATUS_COMPLETED,
            created_at=datetime.now(),
            **entry_data.model_dump()
        )
        self.entry_repo.add(entry)
        logger.info(
            f"Logged {entry.duration}s for {entry.user_id} on {entry.date} "
            f"(billable={entry.billable}, source={entry.source})"
        )

        self.goal_service.recompute_billable_goals(entry.user_id, now)
        return entry

    def get_entries(
        self,
        user_id: str,
        timeframe: str = TIMEFRAME_MONTHLY,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        now: Optional[datetime] = None
    ) -> List[TimeEntry]:
        """Get a user's entries inside the reporting window, newest first"""
        if start_date and end_date and start_date > end_date:
            raise ValidationException("startDate", "must not be after endDate")

        period = DateService.get_timeframe_range(timeframe, now, start_date, end_date)
        entries = [
            entry for entry in self.entry_repo.get_for_user(user_id)
            if DateService.is_within(entry.date, period)
        ]
        entries.sort(key=lambda entry: entry.date, reverse=True)
        return entries

    def delete_entry(self, entry_id: str, now: Optional[datetime] = None) -> None:
        entry = self.entry_repo.get_by_id(entry_id)
        if not entry:
            raise TimeEntryNotFoundException(entry_id)

        self.entry_repo.delete(entry_id)
        logger.info(f"Deleted time entry {entry_id} for {entry.user_id}")
        self.goal_service.recompute_billable_goals(entry.user_id, now)

    @staticmethod
    def summarize(entries: List[TimeEntry]) -> TimeEntrySummary:
        """Totals for a list of entries, rounded to two decimals"""
        total_hours = sum(entry.duration for entry in entries) / SECONDS_PER_HOUR
        billable_hours = sum(entry.duration for entry in entries if entry.billable) / SECONDS_PER_HOUR
        non_billable_points = sum(entry.points or 0 for entry in entries if not entry.billable)

        return TimeEntrySummary(
            total_entries=len(entries),
            total_hours=round(total_hours, 2),
            billable_hours=round(billable_hours, 2),
            non_billable_points=round(non_billable_points, 2)
        )
