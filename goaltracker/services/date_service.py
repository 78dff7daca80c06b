"""
Date calculation and manipulation service.
Handles day boundaries and the daily/weekly/monthly/quarterly/annual
tracking periods goals and time entries are measured against.
"""
import calendar
from datetime import datetime, timedelta, date
from typing import Optional, Union

from goaltracker.constants import (
    TIMEFRAME_DAILY, TIMEFRAME_WEEKLY, TIMEFRAME_MONTHLY,
    TIMEFRAME_QUARTERLY, TIMEFRAME_ANNUAL
)

DateLike = Union[date, datetime]


class DateService:
    """Service for date-related operations"""

    @staticmethod
    def _as_date(value: DateLike) -> date:
        return value.date() if isinstance(value, datetime) else value

    @staticmethod
    def start_of_day(value: DateLike) -> datetime:
        """Midnight at the start of the given day"""
        return datetime.combine(DateService._as_date(value), datetime.min.time())

    @staticmethod
    def end_of_day(value: DateLike) -> datetime:
        """Last millisecond of the given day (23:59:59.999)"""
        return DateService.start_of_day(value).replace(
            hour=23, minute=59, second=59, microsecond=999000
        )

    @staticmethod
    def to_naive_local(dt: datetime) -> datetime:
        """Convert an aware datetime to naive local time (naive values pass through)"""
        if dt.tzinfo is None:
            return dt
        return dt.astimezone().replace(tzinfo=None)

    @staticmethod
    def last_day_of_month(year: int, month: int) -> date:
        return date(year, month, calendar.monthrange(year, month)[1])

    @staticmethod
    def get_quarter(value: DateLike) -> int:
        """Zero-based quarter index (0..3)"""
        return (value.month - 1) // 3

    @staticmethod
    def get_week_range(now: DateLike) -> tuple[datetime, datetime]:
        """
        Get the Monday-to-Sunday week containing the given day.

        Returns:
            Tuple of (Monday 00:00:00, Sunday 23:59:59.999)
        """
        today = DateService._as_date(now)
        monday = today - timedelta(days=today.weekday())
        sunday = monday + timedelta(days=6)
        return DateService.start_of_day(monday), DateService.end_of_day(sunday)

    @staticmethod
    def get_month_range(now: DateLike) -> tuple[datetime, datetime]:
        first = date(now.year, now.month, 1)
        last = DateService.last_day_of_month(now.year, now.month)
        return DateService.start_of_day(first), DateService.end_of_day(last)

    @staticmethod
    def get_quarter_range(now: DateLike) -> tuple[datetime, datetime]:
        first_month = DateService.get_quarter(now) * 3 + 1
        first = date(now.year, first_month, 1)
        last = DateService.last_day_of_month(now.year, first_month + 2)
        return DateService.start_of_day(first), DateService.end_of_day(last)

    @staticmethod
    def get_year_range(now: DateLike) -> tuple[datetime, datetime]:
        return (
            DateService.start_of_day(date(now.year, 1, 1)),
            DateService.end_of_day(date(now.year, 12, 31))
        )

    @staticmethod
    def get_period_range(frequency: str, now: Optional[DateLike] = None) -> tuple[datetime, datetime]:
        """
        Get the current tracking period for a frequency.

        Args:
            frequency: "daily", "weekly", "monthly", "quarterly" or "annual"
            now: Reference moment (defaults to the current local time)

        Returns:
            Tuple of (period_start, period_end). An unrecognized frequency
            yields a zero-length period at today's midnight.
        """
        if now is None:
            now = datetime.now()

        if frequency == TIMEFRAME_DAILY:
            return DateService.start_of_day(now), DateService.end_of_day(now)
        if frequency == TIMEFRAME_WEEKLY:
            return DateService.get_week_range(now)
        if frequency == TIMEFRAME_MONTHLY:
            return DateService.get_month_range(now)
        if frequency == TIMEFRAME_QUARTERLY:
            return DateService.get_quarter_range(now)
        if frequency == TIMEFRAME_ANNUAL:
            return DateService.get_year_range(now)

        today = DateService.start_of_day(now)
        return today, today

    @staticmethod
    def get_timeframe_range(
        timeframe: str,
        now: Optional[DateLike] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> tuple[datetime, datetime]:
        """
        Resolve a reporting window.

        An explicit start_date/end_date pair wins (both days inclusive);
        otherwise the current period of the timeframe is used.
        """
        if start_date and end_date:
            return DateService.start_of_day(start_date), DateService.end_of_day(end_date)
        return DateService.get_period_range(timeframe, now)

    @staticmethod
    def is_within(value: DateLike, period: tuple[datetime, datetime]) -> bool:
        """Check whether a day or moment falls inside an inclusive period"""
        if not isinstance(value, datetime):
            value = DateService.start_of_day(value)
        period_start, period_end = period
        return period_start <= value <= period_end
