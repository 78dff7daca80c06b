"""
Goal management service.
Handles personal goals, company goals, free-text goal intake,
recomputation of billable-hour progress and evaluation passes.
"""
import logging
from datetime import date, datetime
from typing import List, Optional

from pydantic import ValidationError

from goaltracker.constants import (
    METRIC_BILLABLE_HOURS, SCOPE_COMPANY, TIMEFRAME_DAILY,
    GOAL_STATUS_ACTIVE, EVALUATION_MET,
    GOAL_COUNTED_SOURCES, SECONDS_PER_HOUR, DEFAULT_HISTORY_LIMIT
)
from goaltracker.exceptions import GoalNotFoundException, StorageException, ValidationException
from goaltracker.repositories.document_store import DocumentStore
from goaltracker.repositories.goal_repository import (
    PersonalGoalRepository, CompanyGoalRepository, GoalHistoryRepository
)
from goaltracker.repositories.snapshot_repository import DailySnapshotRepository
from goaltracker.repositories.time_entry_repository import TimeEntryRepository
from goaltracker.schemas import (
    Goal, GoalCreate, GoalUpdate, GoalIntent,
    CompanyGoals, CompanyGoalsUpdate,
    GoalEvaluation, GoalHistoryEntry,
    EvaluationResult, BulkEvaluationResult,
    DailySnapshot, DailyRolloverResult
)
from goaltracker.services.date_service import DateService
from goaltracker.services.goal_evaluator import GoalEvaluator
from goaltracker.services.goal_intent_resolver import (
    resolve_goal_intent_from_text, map_canonical_to_personal_goal,
    apply_canonical_to_company_goals, generate_goal_id
)

logger = logging.getLogger("goaltracker.goals")


def history_entry_id(evaluation: GoalEvaluation) -> str:
    """One history id per goal and period"""
    return f"{evaluation.goal_id}-{evaluation.period_start.date().isoformat()}"


class GoalService:
    """Service for managing personal and company goals"""

    def __init__(self, store: DocumentStore):
        self.goal_repo = PersonalGoalRepository(store)
        self.company_repo = CompanyGoalRepository(store)
        self.history_repo = GoalHistoryRepository(store)
        self.entry_repo = TimeEntryRepository(store)
        self.snapshot_repo = DailySnapshotRepository(store)
        self.evaluator = GoalEvaluator(self.goal_repo)

    # === Personal goals ===

    def get_goals(self, user_id: str) -> List[Goal]:
        """Get all goals of a user"""
        return self.goal_repo.get_for_user(user_id)

    def create_goal(self, goal_data: GoalCreate) -> Goal:
        """Create a new personal goal"""
        goal = Goal(
            id=generate_goal_id(),
            current=0,
            status=GOAL_STATUS_ACTIVE,
            created_at=datetime.now(),
            **goal_data.model_dump(exclude={"user_id"})
        )
        self.goal_repo.add(goal_data.user_id, goal)
        logger.info(f"Created goal {goal.id} ({goal.name}) for {goal_data.user_id}")
        return goal

    def update_goal(self, user_id: str, goal_id: str, goal_update: GoalUpdate) -> Goal:
        """Update an existing personal goal"""
        goal = self.goal_repo.get_goal(user_id, goal_id)
        if not goal:
            raise GoalNotFoundException(goal_id, user_id)

        update_data = goal_update.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            setattr(goal, key, value)

        return self.goal_repo.update(user_id, goal)

    def delete_goal(self, user_id: str, goal_id: str) -> None:
        """Delete a personal goal"""
        if not self.goal_repo.delete(user_id, goal_id):
            raise GoalNotFoundException(goal_id, user_id)
        logger.info(f"Deleted goal {goal_id} for {user_id}")

    def delete_user_goals(self, user_id: str) -> int:
        """Delete every goal of a user"""
        removed = self.goal_repo.delete_for_user(user_id)
        logger.info(f"Deleted {removed} goals for {user_id}")
        return removed

    def create_goals_from_text(
        self,
        user_id: str,
        texts: List[str],
        defaults: Optional[dict] = None
    ) -> dict:
        """
        Create personal goals from free-text sentences.

        Sentences that cannot be resolved are skipped, not treated as errors.

        Returns:
            Dict with "created" goals and "skipped" sentences
        """
        created = []
        skipped = []

        for text in texts:
            intent = resolve_goal_intent_from_text(text, defaults)
            if intent is None:
                logger.info(f"Skipping unresolved goal text for {user_id}: {text!r}")
                skipped.append(text)
                continue
            created.append(map_canonical_to_personal_goal(intent))

        if created:
            goals = self.goal_repo.get_for_user(user_id)
            goals.extend(created)
            self.goal_repo.save_for_user(user_id, goals)
            logger.info(f"Created {len(created)} goals from free text for {user_id}")

        return {"created": created, "skipped": skipped}

    # === Company goals ===

    def get_company_goals(self) -> CompanyGoals:
        return self.company_repo.get()

    def update_company_goals(self, goals_update: CompanyGoalsUpdate) -> CompanyGoals:
        """Overwrite company targets with the given values"""
        goals = self.company_repo.get()
        for key, value in goals_update.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(goals, key, value)
        return self.company_repo.save(goals)

    def apply_company_free_text(self, texts: List[str]) -> dict:
        """
        Raise company billable targets from free-text sentences.

        Targets are merged with max(), so existing targets never go down.

        Returns:
            Dict with merged "company_goals", resolved "intents" and "skipped" sentences
        """
        intents: List[GoalIntent] = []
        skipped = []

        for text in texts:
            intent = resolve_goal_intent_from_text(text, {"scope": SCOPE_COMPANY})
            if intent is None:
                skipped.append(text)
            else:
                intents.append(intent)

        company_goals = apply_canonical_to_company_goals(intents, self.company_repo.get())
        self.company_repo.save(company_goals)
        logger.info(
            f"Applied {len(intents)} company goal intents "
            f"(weekly={company_goals.weekly_billable}, monthly={company_goals.monthly_billable}, "
            f"annual={company_goals.annual_billable})"
        )

        return {"company_goals": company_goals, "intents": intents, "skipped": skipped}

    # === Progress ===

    @staticmethod
    def is_billable_hours_goal(goal: Goal) -> bool:
        """Goals whose progress is the sum of logged billable hours"""
        if goal.metric_key:
            return goal.metric_key == METRIC_BILLABLE_HOURS
        return "billable hours" in goal.name.lower()

    def recompute_billable_goals(self, user_id: str, now: Optional[datetime] = None) -> List[Goal]:
        """
        Recompute current progress of a user's active billable-hour goals.

        current = hours of billable entries from counted sources
        (manual-form, timer) dated inside the goal's current period.

        Returns:
            Goals whose progress was recomputed
        """
        goals = self.goal_repo.get_for_user(user_id)
        entries = [
            entry for entry in self.entry_repo.get_for_user(user_id)
            if entry.billable and entry.source in GOAL_COUNTED_SOURCES
        ]

        updated = []
        for goal in goals:
            if goal.status != GOAL_STATUS_ACTIVE or not self.is_billable_hours_goal(goal):
                continue

            period = DateService.get_period_range(goal.frequency, now)
            seconds = sum(entry.duration for entry in entries if DateService.is_within(entry.date, period))

            goal.current = round(seconds / SECONDS_PER_HOUR, 2)
            goal.progress = round(goal.current / goal.target * 100, 2) if goal.target else None
            updated.append(goal)

        if updated:
            self.goal_repo.save_for_user(user_id, goals)

        return updated

    # === Evaluation ===

    def _record_evaluations(self, evaluations: List[GoalEvaluation]) -> List[GoalHistoryEntry]:
        created_at = datetime.now()
        entries = [
            GoalHistoryEntry(
                id=history_entry_id(evaluation),
                created_at=created_at,
                **evaluation.model_dump()
            )
            for evaluation in evaluations
        ]
        self.history_repo.append(entries)
        return entries

    def evaluate_user(self, user_id: str, now: Optional[datetime] = None) -> EvaluationResult:
        """
        Evaluate one user's expired goals.

        Appends a history entry per evaluated goal and marks those goals completed.
        """
        evaluations = self.evaluator.get_expired_goals(user_id, now)
        if not evaluations:
            logger.info(f"No expired goals found for user: {user_id}")
            return EvaluationResult()

        self._record_evaluations(evaluations)
        self.goal_repo.mark_completed(user_id, [e.goal_id for e in evaluations])

        met = sum(1 for e in evaluations if e.status == EVALUATION_MET)
        logger.info(f"Evaluated {len(evaluations)} goals for {user_id}: {met} met")

        return EvaluationResult(
            evaluated_goals=evaluations,
            total=len(evaluations),
            met=met,
            missed=len(evaluations) - met
        )

    def evaluate_all(self, now: Optional[datetime] = None) -> BulkEvaluationResult:
        """Evaluate expired goals of every user"""
        all_expired = self.evaluator.get_all_expired_goals(now)
        if not all_expired:
            logger.info("No expired goals found for any users")
            return BulkEvaluationResult()

        evaluations = [e for user_evaluations in all_expired.values() for e in user_evaluations]
        self._record_evaluations(evaluations)

        for user_id, user_evaluations in all_expired.items():
            self.goal_repo.mark_completed(user_id, [e.goal_id for e in user_evaluations])

        met = sum(1 for e in evaluations if e.status == EVALUATION_MET)
        logger.info(
            f"Evaluated {len(evaluations)} goals across {len(all_expired)} users: {met} met"
        )

        return BulkEvaluationResult(
            evaluated_goals=all_expired,
            total=len(evaluations),
            met=met,
            missed=len(evaluations) - met,
            users_processed=list(all_expired.keys())
        )

    # === Daily rollover ===

    def daily_rollover(self, now: Optional[datetime] = None) -> DailyRolloverResult:
        """
        Snapshot each user's daily billable-hours progress for today.

        Snapshots are keyed by (date, user), so running the rollover twice on
        the same day updates the existing snapshot. Users without a daily
        billable-hours goal, or whose goals cannot be read, are skipped.
        """
        today = (now or datetime.now()).date()
        user_ids = self.goal_repo.get_user_ids()

        snapshots = []
        for user_id in user_ids:
            try:
                daily_goal = next(
                    (goal for goal in self.goal_repo.get_for_user(user_id)
                     if goal.frequency == TIMEFRAME_DAILY and self.is_billable_hours_goal(goal)),
                    None
                )
                if daily_goal is None:
                    logger.info(f"No daily billable goal found for {user_id}")
                    continue

                snapshot = self.snapshot_repo.upsert(DailySnapshot(
                    date=today,
                    user_id=user_id,
                    billable_hours=daily_goal.current or 0,
                    timestamp=datetime.now()
                ))
                snapshots.append(snapshot)
                logger.info(f"Snapshot for {user_id} on {today}: {snapshot.billable_hours}h")
            except (StorageException, ValidationError) as e:
                logger.error(f"Error processing daily rollover for {user_id}: {e}")

        logger.info(f"Daily rollover completed for {today}: {len(snapshots)} snapshots")
        return DailyRolloverResult(
            message=f"Daily rollover completed for {today.isoformat()}",
            processed_users=len(user_ids),
            date=today,
            snapshots=snapshots
        )

    def get_daily_snapshots(self) -> List[DailySnapshot]:
        return self.snapshot_repo.get_all()

    # === History ===

    def get_history(
        self,
        user_id: Optional[str] = None,
        goal_type: Optional[str] = None,
        frequency: Optional[str] = None,
        status: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = DEFAULT_HISTORY_LIMIT
    ) -> List[GoalHistoryEntry]:
        """
        Get goal history, newest completion first.

        Args:
            user_id: Only this user's entries ("all" or None for everyone)
            goal_type: Taxonomy bucket, e.g. "BILLABLE_HOURS"
            frequency: Upper-cased frequency, e.g. "WEEKLY"
            status: "Met" or "Missed"
            start_date: Keep periods starting on or after this day
            end_date: Keep periods ending on or before this day
            limit: Maximum number of entries
        """
        history = self.history_repo.get_all()

        if user_id and user_id != "all":
            history = [e for e in history if e.user_id == user_id]
        if goal_type:
            history = [e for e in history if e.goal_type == goal_type]
        if frequency:
            history = [e for e in history if e.frequency == frequency]
        if status:
            history = [e for e in history if e.status == status]
        if start_date:
            period_floor = DateService.start_of_day(start_date)
            history = [e for e in history if e.period_start >= period_floor]
        if end_date:
            period_ceiling = DateService.end_of_day(end_date)
            history = [e for e in history if e.period_end <= period_ceiling]

        history.sort(key=lambda e: e.completion_date, reverse=True)
        return history[:limit]

    def record_history(self, evaluation: GoalEvaluation) -> GoalHistoryEntry:
        """Store an externally produced evaluation (aware datetimes become naive local time)"""
        evaluation = evaluation.model_copy(update={
            "period_start": DateService.to_naive_local(evaluation.period_start),
            "period_end": DateService.to_naive_local(evaluation.period_end),
            "completion_date": DateService.to_naive_local(evaluation.completion_date),
        })
        if evaluation.period_end < evaluation.period_start:
            raise ValidationException("periodEnd", "must not be before periodStart")

        return self._record_evaluations([evaluation])[0]

