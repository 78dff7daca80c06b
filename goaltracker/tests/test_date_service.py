"""
Tests for DateService.

Tests cover:
1. Day boundaries
2. Week/month/quarter/year ranges
3. Frequency dispatch and explicit reporting windows
"""
import pytest
from datetime import date, datetime, timezone

from goaltracker.services.date_service import DateService


class TestDayBoundaries:
    """Tests for start_of_day / end_of_day"""

    def test_start_of_day_is_midnight(self):
        assert DateService.start_of_day(datetime(2025, 1, 15, 17, 30)) == datetime(2025, 1, 15)

    def test_end_of_day_is_last_millisecond(self):
        """End of day keeps millisecond precision"""
        assert DateService.end_of_day(date(2025, 1, 15)) == datetime(2025, 1, 15, 23, 59, 59, 999000)

    def test_last_day_of_month_handles_leap_year(self):
        assert DateService.last_day_of_month(2024, 2) == date(2024, 2, 29)
        assert DateService.last_day_of_month(2025, 2) == date(2025, 2, 28)


class TestWeekRange:
    """Tests for get_week_range"""

    def test_midweek_day(self, now):
        """Wednesday belongs to the Monday-Sunday week around it"""
        start, end = DateService.get_week_range(now)

        assert start == datetime(2025, 1, 13)
        assert end == datetime(2025, 1, 19, 23, 59, 59, 999000)

    def test_monday_starts_its_own_week(self):
        start, _ = DateService.get_week_range(datetime(2025, 1, 13, 0, 0))
        assert start == datetime(2025, 1, 13)

    def test_sunday_ends_its_week(self):
        start, end = DateService.get_week_range(datetime(2025, 1, 19, 23, 0))
        assert start == datetime(2025, 1, 13)
        assert end.date() == date(2025, 1, 19)


class TestPeriodRanges:
    """Tests for month/quarter/year ranges and get_period_range"""

    @pytest.mark.parametrize("day", [1, 15, 31])
    def test_monthly_period_independent_of_day(self, day):
        """Monthly period spans the whole month whatever the day"""
        start, end = DateService.get_period_range("monthly", datetime(2025, 1, day, 12, 0))

        assert start == datetime(2025, 1, 1)
        assert end == datetime(2025, 1, 31, 23, 59, 59, 999000)

    def test_quarter_index_is_zero_based(self):
        assert DateService.get_quarter(date(2025, 1, 1)) == 0
        assert DateService.get_quarter(date(2025, 5, 10)) == 1
        assert DateService.get_quarter(date(2025, 12, 31)) == 3

    def test_quarterly_period(self):
        start, end = DateService.get_period_range("quarterly", datetime(2025, 5, 10))

        assert start == datetime(2025, 4, 1)
        assert end == datetime(2025, 6, 30, 23, 59, 59, 999000)

    def test_annual_period(self, now):
        start, end = DateService.get_period_range("annual", now)

        assert start == datetime(2025, 1, 1)
        assert end == datetime(2025, 12, 31, 23, 59, 59, 999000)

    def test_daily_period(self, now):
        start, end = DateService.get_period_range("daily", now)

        assert start == datetime(2025, 1, 15)
        assert end == datetime(2025, 1, 15, 23, 59, 59, 999000)

    def test_unknown_frequency_is_zero_length(self, now):
        """Unrecognized frequencies collapse to today's midnight"""
        start, end = DateService.get_period_range("biweekly", now)

        assert start == end == datetime(2025, 1, 15)


class TestTimeframeRange:
    """Tests for get_timeframe_range and is_within"""

    def test_explicit_range_overrides_timeframe(self, now):
        start, end = DateService.get_timeframe_range(
            "monthly", now, date(2025, 1, 3), date(2025, 1, 5)
        )

        assert start == datetime(2025, 1, 3)
        assert end == datetime(2025, 1, 5, 23, 59, 59, 999000)

    def test_partial_range_falls_back_to_timeframe(self, now):
        start, _ = DateService.get_timeframe_range("weekly", now, start_date=date(2025, 1, 3))
        assert start == datetime(2025, 1, 13)

    def test_is_within_is_inclusive_for_dates(self, now):
        period = DateService.get_week_range(now)

        assert DateService.is_within(date(2025, 1, 13), period)
        assert DateService.is_within(date(2025, 1, 19), period)
        assert not DateService.is_within(date(2025, 1, 20), period)


class TestToNaiveLocal:
    """Tests for to_naive_local"""

    def test_naive_values_pass_through(self, now):
        assert DateService.to_naive_local(now) is now

    def test_aware_values_become_naive(self):
        aware = datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc)
        result = DateService.to_naive_local(aware)

        assert result.tzinfo is None
        assert result == aware.astimezone().replace(tzinfo=None)
