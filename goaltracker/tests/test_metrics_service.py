"""
Tests for MetricsService.

Tests cover:
1. CVS
2. Utilization
3. Realization rate
4. Goal performance tiers
"""
import pytest
from datetime import date

from goaltracker.schemas import TimeEntry, TimeEntryCreate, GoalPerformanceItem
from goaltracker.services.metrics_service import MetricsService


def make_entry(entry_date, duration, billable=True):
    return TimeEntry(
        id=f"entry-{entry_date}-{duration}",
        user_id="user-1",
        date=entry_date,
        duration=duration,
        billable=billable,
        description="Work"
    )


class TestCVS:
    """Tests for calculate_cvs / build_cvs_calculation"""

    def test_cvs_formula(self):
        assert MetricsService.calculate_cvs(35, 56, 35, 56) == 1.0
        assert MetricsService.calculate_cvs(20, 25, 30, 60) == 0.5

    def test_zero_expectation_gives_zero(self):
        assert MetricsService.calculate_cvs(10, 10, 0, 0) == 0.0

    def test_calculation_breakdown(self):
        result = MetricsService.build_cvs_calculation(28, 42)

        assert result.billable_hours.expected == 35
        assert result.billable_hours.percentage == 80.0
        assert result.non_billable_points.percentage == 75.0
        assert result.total_points == 70
        assert result.cvs_score == pytest.approx(0.769)

    def test_cvs_from_logged_time(self, store, now):
        service = MetricsService(store)
        service.time_entry_service.create_entry(TimeEntryCreate(
            user_id="user-1", date=now.date(), duration=36000, description="Trial prep"
        ), now)
        service.time_entry_service.create_entry(TimeEntryCreate(
            user_id="user-1", date=now.date(), duration=3600, billable=False,
            points=4, description="Mentoring"
        ), now)

        result = service.get_cvs("user-1", "monthly", now)

        assert result.user_id == "user-1"
        assert result.billable_hours.actual == 10
        assert result.non_billable_points.actual == 4


class TestUtilization:
    """Tests for calculate_utilization"""

    def test_overall_and_daily(self):
        report = MetricsService.calculate_utilization([
            make_entry(date(2025, 1, 13), 7200),
            make_entry(date(2025, 1, 13), 7200, billable=False),
            make_entry(date(2025, 1, 14), 3600),
        ])

        assert report.total_hours_worked == 5
        assert report.billable_hours == 3
        assert report.non_billable_hours == 2
        assert report.utilization_rate == 60.0
        assert [d.date for d in report.daily] == [date(2025, 1, 13), date(2025, 1, 14)]
        assert report.best_day.date == date(2025, 1, 14)
        assert report.worst_day.utilization == 50.0

    def test_no_entries(self):
        report = MetricsService.calculate_utilization([])

        assert report.utilization_rate == 0
        assert report.daily == []
        assert report.best_day is None


class TestRealizationRate:
    """Tests for calculate_realization_rate"""

    def test_rate_and_write_offs(self):
        result = MetricsService.calculate_realization_rate(34, 40)

        assert result.realization_rate == 85.0
        assert result.write_offs == 6

    def test_nothing_worked(self):
        assert MetricsService.calculate_realization_rate(0, 0).realization_rate == 0


class TestGoalPerformance:
    """Tests for classify_performance / summarize_goal_performance"""

    @pytest.mark.parametrize("actual,tier", [
        (101, "exceeded"),
        (100, "met"),
        (90, "partial"),
        (89.99, "missed"),
        (0, "missed"),
    ])
    def test_tiers(self, actual, tier):
        assert MetricsService.classify_performance(actual, 100) == tier

    def test_summary(self):
        report = MetricsService.summarize_goal_performance([
            GoalPerformanceItem(name="Billable", type="Billable", target=40, actual=44),
            GoalPerformanceItem(name="Realization", type="Billable", target=100, actual=92),
            GoalPerformanceItem(name="Mentoring", type="Culture", target=4, actual=1),
            GoalPerformanceItem(name="Pro bono", type="Culture", target=10, actual=10),
        ])

        assert report.total_goals == 4
        assert (report.exceeded, report.met, report.partial, report.missed) == (1, 1, 1, 1)
        assert report.success_rate == 75.0
        by_type = {t.type: t for t in report.by_type}
        assert by_type["Billable"].total == 2
        assert by_type["Culture"].missed == 1
        assert report.goals[0].percentage == 110.0

    def test_empty_summary(self):
        report = MetricsService.summarize_goal_performance([])

        assert report.total_goals == 0
        assert report.success_rate == 0
