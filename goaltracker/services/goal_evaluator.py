"""
Goal evaluation service.
Decides when a personal goal's tracking period has closed, computes the
period boundaries and classifies the outcome as Met or Missed.
"""
import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from pydantic import ValidationError

from goaltracker.constants import (
    TIMEFRAME_DAILY, TIMEFRAME_WEEKLY, TIMEFRAME_MONTHLY,
    TIMEFRAME_QUARTERLY, TIMEFRAME_ANNUAL,
    GOAL_STATUS_ACTIVE, GOAL_SCOPE_PERSONAL,
    EVALUATION_MET, EVALUATION_MISSED,
    GOAL_TYPE_BILLABLE_HOURS, GOAL_TYPE_CASE_BASED, GOAL_TYPE_TIME_MANAGEMENT,
    GOAL_TYPE_CULTURE, GOAL_TYPE_REVENUE, GOAL_TYPE_GENERAL
)
from goaltracker.exceptions import StorageException
from goaltracker.repositories.goal_repository import PersonalGoalRepository
from goaltracker.schemas import Goal, GoalEvaluation
from goaltracker.services.date_service import DateService

logger = logging.getLogger("goaltracker.evaluator")

# First matching bucket wins
GOAL_TYPE_BUCKETS = [
    (GOAL_TYPE_BILLABLE_HOURS, ("billable", "hours")),
    (GOAL_TYPE_CASE_BASED, ("case", "review")),
    (GOAL_TYPE_TIME_MANAGEMENT, ("time", "management")),
    (GOAL_TYPE_CULTURE, ("culture", "team")),
    (GOAL_TYPE_REVENUE, ("revenue",)),
]


class GoalEvaluator:
    """Evaluates expired personal goals into history records"""

    def __init__(self, goal_repo: PersonalGoalRepository):
        self.goal_repo = goal_repo

    @staticmethod
    def is_goal_expired(goal: Goal, now: Optional[datetime] = None) -> bool:
        """
        Check whether the goal's current period is due for evaluation.

        Daily goals are due on every pass. Longer periods become due from
        midnight of their final day: Sunday for weekly goals, the last day
        of the month or quarter, and December 31 for annual goals.
        Unrecognized frequencies are never due.
        """
        if now is None:
            now = datetime.now()
        today = now.date()

        if goal.frequency == TIMEFRAME_DAILY:
            return True

        if goal.frequency == TIMEFRAME_WEEKLY:
            sunday = today + timedelta(days=6 - today.weekday())
            return now >= DateService.start_of_day(sunday)

        if goal.frequency == TIMEFRAME_MONTHLY:
            last_day = DateService.last_day_of_month(now.year, now.month)
            return now >= DateService.start_of_day(last_day)

        if goal.frequency == TIMEFRAME_QUARTERLY:
            _, quarter_end = DateService.get_quarter_range(now)
            return now >= DateService.start_of_day(quarter_end)

        if goal.frequency == TIMEFRAME_ANNUAL:
            return now >= datetime(now.year, 12, 31)

        return False

    @staticmethod
    def get_goal_period(goal: Goal, now: Optional[datetime] = None) -> tuple[datetime, datetime]:
        """Get (period_start, period_end) of the goal's current period"""
        return DateService.get_period_range(goal.frequency, now)

    @staticmethod
    def calculate_goal_status(goal: Goal) -> str:
        """Met when current reaches the target (inclusive), otherwise Missed"""
        return EVALUATION_MET if goal.current >= goal.target else EVALUATION_MISSED

    @staticmethod
    def map_goal_type(goal_type: str) -> str:
        """Bucket a free-form goal type into the history taxonomy"""
        type_lower = (goal_type or "").lower()
        for bucket, keywords in GOAL_TYPE_BUCKETS:
            if any(keyword in type_lower for keyword in keywords):
                return bucket
        return GOAL_TYPE_GENERAL

    @staticmethod
    def convert_to_history_entry(
        goal: Goal,
        user_id: str,
        now: Optional[datetime] = None
    ) -> GoalEvaluation:
        """
        Convert a personal goal into its evaluation record.

        The completion date is the period end: the evaluation is recorded
        as happening at the moment the period closes.
        """
        period_start, period_end = GoalEvaluator.get_goal_period(goal, now)

        return GoalEvaluation(
            goal_id=goal.id,
            user_id=user_id,
            goal_name=goal.name,
            goal_type=GoalEvaluator.map_goal_type(goal.type),
            frequency=goal.frequency.upper(),
            target_value=goal.target,
            actual_value=goal.current,
            status=GoalEvaluator.calculate_goal_status(goal),
            period_start=period_start,
            period_end=period_end,
            completion_date=period_end,
            goal_scope=GOAL_SCOPE_PERSONAL
        )

    @staticmethod
    def evaluate_goals(
        goals: List[Goal],
        user_id: str,
        now: Optional[datetime] = None
    ) -> List[GoalEvaluation]:
        """Evaluate the active, expired goals from a list"""
        return [
            GoalEvaluator.convert_to_history_entry(goal, user_id, now)
            for goal in goals
            if goal.status == GOAL_STATUS_ACTIVE and GoalEvaluator.is_goal_expired(goal, now)
        ]

    def get_expired_goals(self, user_id: str, now: Optional[datetime] = None) -> List[GoalEvaluation]:
        """
        Get evaluations for one user's active, expired goals.

        Read-only. Unreadable goal data is logged and treated as no goals.
        """
        try:
            goals = self.goal_repo.get_for_user(user_id)
        except (StorageException, ValidationError) as e:
            logger.error(f"Error getting expired goals for {user_id}: {e}")
            return []

        return self.evaluate_goals(goals, user_id, now)

    def get_all_expired_goals(self, now: Optional[datetime] = None) -> Dict[str, List[GoalEvaluation]]:
        """
        Get evaluations for every user with at least one expired goal.

        Read-only. Each user is read on its own, so a user with unreadable
        goals is logged and skipped without affecting the others.
        """
        try:
            user_ids = self.goal_repo.get_user_ids()
        except StorageException as e:
            logger.error(f"Error getting all expired goals: {e}")
            return {}

        expired = {}
        for user_id in user_ids:
            evaluations = self.get_expired_goals(user_id, now)
            if evaluations:
                expired[user_id] = evaluations
        return expired
