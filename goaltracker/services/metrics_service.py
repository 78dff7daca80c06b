"""
Metrics calculation service.
Derived dashboard metrics: CVS, utilization, realization rate and
goal performance.

Goal performance uses its own four-tier scheme (exceeded/met/partial/missed)
and is separate from the binary Met/Missed goal evaluation.
"""
from collections import OrderedDict
from datetime import datetime
from typing import List, Optional

from goaltracker.constants import (
    TIMEFRAME_MONTHLY, SECONDS_PER_HOUR,
    DEFAULT_EXPECTED_BILLABLE_HOURS, DEFAULT_EXPECTED_NON_BILLABLE_POINTS,
    PERFORMANCE_EXCEEDED, PERFORMANCE_MET, PERFORMANCE_PARTIAL, PERFORMANCE_MISSED,
    PERFORMANCE_PARTIAL_THRESHOLD, PERFORMANCE_MET_THRESHOLD
)
from goaltracker.repositories.document_store import DocumentStore
from goaltracker.schemas import (
    TimeEntry, CVSComponent, CVSCalculation,
    UtilizationDay, UtilizationReport, RealizationRate,
    GoalPerformanceItem, GoalPerformanceResult, GoalPerformanceTypeCount, GoalPerformanceReport
)
from goaltracker.services.time_entry_service import TimeEntryService


def _percentage(actual: float, expected: float) -> float:
    return round(actual / expected * 100, 2) if expected > 0 else 0.0


class MetricsService:
    """Service for derived performance metrics"""

    def __init__(self, store: DocumentStore):
        self.time_entry_service = TimeEntryService(store)

    # === CVS ===

    @staticmethod
    def calculate_cvs(
        actual_billable_hours: float,
        actual_non_billable_points: float,
        expected_billable_hours: float,
        expected_non_billable_points: float
    ) -> float:
        """
        Contribution Value Score.

        CVS = (actual billable hours + actual non-billable points)
              / (expected billable hours + expected non-billable points)

        Returns 0 when nothing is expected.
        """
        expected_total = expected_billable_hours + expected_non_billable_points
        if expected_total == 0:
            return 0.0
        return (actual_billable_hours + actual_non_billable_points) / expected_total

    @staticmethod
    def build_cvs_calculation(
        actual_billable_hours: float,
        actual_non_billable_points: float,
        expected_billable_hours: float = DEFAULT_EXPECTED_BILLABLE_HOURS,
        expected_non_billable_points: float = DEFAULT_EXPECTED_NON_BILLABLE_POINTS,
        user_id: Optional[str] = None,
        time_frame: Optional[str] = None
    ) -> CVSCalculation:
        cvs_score = MetricsService.calculate_cvs(
            actual_billable_hours, actual_non_billable_points,
            expected_billable_hours, expected_non_billable_points
        )

        return CVSCalculation(
            user_id=user_id,
            time_frame=time_frame,
            billable_hours=CVSComponent(
                actual=round(actual_billable_hours, 2),
                expected=expected_billable_hours,
                percentage=_percentage(actual_billable_hours, expected_billable_hours)
            ),
            non_billable_points=CVSComponent(
                actual=round(actual_non_billable_points, 2),
                expected=expected_non_billable_points,
                percentage=_percentage(actual_non_billable_points, expected_non_billable_points)
            ),
            total_points=round(actual_billable_hours + actual_non_billable_points, 2),
            total_percentage=round(cvs_score * 100, 2),
            cvs_score=round(cvs_score, 3)
        )

    def get_cvs(
        self,
        user_id: str,
        time_frame: str = TIMEFRAME_MONTHLY,
        now: Optional[datetime] = None
    ) -> CVSCalculation:
        """CVS from a user's logged entries against the default expectations"""
        entries = self.time_entry_service.get_entries(user_id, time_frame, now=now)
        summary = self.time_entry_service.summarize(entries)
        return self.build_cvs_calculation(
            summary.billable_hours,
            summary.non_billable_points,
            user_id=user_id,
            time_frame=time_frame
        )

    # === Utilization ===

    @staticmethod
    def calculate_utilization(entries: List[TimeEntry]) -> UtilizationReport:
        """
        Utilization = billable hours / total hours worked * 100,
        overall and per day.
        """
        total_hours = sum(entry.duration for entry in entries) / SECONDS_PER_HOUR
        billable_hours = sum(entry.duration for entry in entries if entry.billable) / SECONDS_PER_HOUR

        by_date = OrderedDict()
        for entry in sorted(entries, key=lambda e: e.date):
            day = by_date.setdefault(entry.date, {"total": 0.0, "billable": 0.0})
            day["total"] += entry.duration / SECONDS_PER_HOUR
            if entry.billable:
                day["billable"] += entry.duration / SECONDS_PER_HOUR

        daily = [
            UtilizationDay(
                date=day_date,
                total=round(hours["total"], 2),
                billable=round(hours["billable"], 2),
                utilization=round(hours["billable"] / hours["total"] * 100, 1) if hours["total"] else 0.0
            )
            for day_date, hours in by_date.items()
        ]

        return UtilizationReport(
            total_hours_worked=round(total_hours, 2),
            billable_hours=round(billable_hours, 2),
            non_billable_hours=round(total_hours - billable_hours, 2),
            utilization_rate=_percentage(billable_hours, total_hours),
            daily=daily,
            best_day=max(daily, key=lambda d: d.utilization) if daily else None,
            worst_day=min(daily, key=lambda d: d.utilization) if daily else None
        )

    def get_utilization(
        self,
        user_id: str,
        time_frame: str = TIMEFRAME_MONTHLY,
        now: Optional[datetime] = None
    ) -> UtilizationReport:
        entries = self.time_entry_service.get_entries(user_id, time_frame, now=now)
        report = self.calculate_utilization(entries)
        report.user_id = user_id
        report.time_frame = time_frame
        return report

    # === Realization rate ===

    @staticmethod
    def calculate_realization_rate(billed_hours: float, worked_hours: float) -> RealizationRate:
        """Realization rate = billed / worked * 100 (0 when nothing was worked)"""
        return RealizationRate(
            billed_hours=billed_hours,
            worked_hours=worked_hours,
            write_offs=round(max(worked_hours - billed_hours, 0), 2),
            realization_rate=_percentage(billed_hours, worked_hours)
        )

    # === Goal performance ===

    @staticmethod
    def classify_performance(actual: float, target: float) -> str:
        """
        Four-tier dashboard classification.

        > 100% exceeded, exactly 100% met, >= 90% partial, otherwise missed.
        """
        percentage = actual / target * 100 if target else 0.0
        if percentage > PERFORMANCE_MET_THRESHOLD:
            return PERFORMANCE_EXCEEDED
        if percentage >= PERFORMANCE_MET_THRESHOLD:
            return PERFORMANCE_MET
        if percentage >= PERFORMANCE_PARTIAL_THRESHOLD:
            return PERFORMANCE_PARTIAL
        return PERFORMANCE_MISSED

    @staticmethod
    def summarize_goal_performance(
        goals: List[GoalPerformanceItem],
        user_id: Optional[str] = None,
        time_frame: Optional[str] = None
    ) -> GoalPerformanceReport:
        results = [
            GoalPerformanceResult(
                id=goal.id,
                name=goal.name,
                type=goal.type,
                target=goal.target,
                actual=goal.actual,
                percentage=_percentage(goal.actual, goal.target),
                status=MetricsService.classify_performance(goal.actual, goal.target),
                completed_at=goal.completed_at
            )
            for goal in goals
        ]

        report = GoalPerformanceReport(
            user_id=user_id,
            time_frame=time_frame,
            total_goals=len(results),
            goals=results
        )

        by_type = OrderedDict()
        for result in results:
            counts = by_type.setdefault(result.type, GoalPerformanceTypeCount(type=result.type))
            setattr(counts, result.status, getattr(counts, result.status) + 1)
            counts.total += 1
            setattr(report, result.status, getattr(report, result.status) + 1)

        report.by_type = list(by_type.values())
        succeeded = report.exceeded + report.met + report.partial
        report.success_rate = _percentage(succeeded, report.total_goals)
        return report
