"""
Goal repository - Data access layer for goal documents.
Handles personal goals (user id -> list of goals), the company goals
record and the append-only goal history.
"""
from datetime import datetime
from typing import List, Iterable, Optional

from goaltracker.constants import (
    DOCUMENT_PERSONAL_GOALS, DOCUMENT_COMPANY_GOALS, DOCUMENT_GOAL_HISTORY,
    GOAL_STATUS_COMPLETED
)
from goaltracker.exceptions import StorageException
from goaltracker.repositories.document_store import DocumentStore
from goaltracker.schemas import Goal, CompanyGoals, GoalHistoryEntry


def dump_model(model) -> dict:
    """Serialize a model the way it is stored (camelCase JSON)"""
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


class PersonalGoalRepository:
    """
    Repository for personal goals.

    Operations for one user only rewrite that user's list; other users'
    entries are carried over untouched.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    def _load(self) -> dict:
        data = self.store.get(DOCUMENT_PERSONAL_GOALS, {})
        if not isinstance(data, dict):
            raise StorageException("read", "personal goals document is not an object")
        return data

    def _save(self, data: dict) -> None:
        self.store.put(DOCUMENT_PERSONAL_GOALS, data)

    def get_user_ids(self) -> List[str]:
        """Ids of every user with a goal list"""
        return list(self._load().keys())

    def get_for_user(self, user_id: str) -> List[Goal]:
        """Get one user's goals (empty when the user has none)"""
        goals = self._load().get(user_id)
        if not isinstance(goals, list):
            return []
        return [Goal.model_validate(goal) for goal in goals]

    def get_goal(self, user_id: str, goal_id: str) -> Optional[Goal]:
        for goal in self.get_for_user(user_id):
            if goal.id == goal_id:
                return goal
        return None

    def save_for_user(self, user_id: str, goals: List[Goal]) -> None:
        """Replace one user's goal list"""
        data = self._load()
        data[user_id] = [dump_model(goal) for goal in goals]
        self._save(data)

    def add(self, user_id: str, goal: Goal) -> Goal:
        goals = self.get_for_user(user_id)
        goals.append(goal)
        self.save_for_user(user_id, goals)
        return goal

    def update(self, user_id: str, goal: Goal) -> Optional[Goal]:
        """Replace a stored goal with the same id. Returns None if absent"""
        goals = self.get_for_user(user_id)
        for index, existing in enumerate(goals):
            if existing.id == goal.id:
                goals[index] = goal
                self.save_for_user(user_id, goals)
                return goal
        return None

    def delete(self, user_id: str, goal_id: str) -> bool:
        goals = self.get_for_user(user_id)
        remaining = [goal for goal in goals if goal.id != goal_id]
        if len(remaining) == len(goals):
            return False
        self.save_for_user(user_id, remaining)
        return True

    def delete_for_user(self, user_id: str) -> int:
        """Delete all of a user's goals. Returns the number removed"""
        data = self._load()
        goals = data.pop(user_id, None)
        if goals is None:
            return 0
        self._save(data)
        return len(goals) if isinstance(goals, list) else 0

    def mark_completed(self, user_id: str, goal_ids: Iterable[str]) -> int:
        """Set status=completed on the given goals. Returns the number changed"""
        goal_ids = set(goal_ids)
        goals = self.get_for_user(user_id)
        changed = 0
        for goal in goals:
            if goal.id in goal_ids:
                goal.status = GOAL_STATUS_COMPLETED
                changed += 1
        if changed:
            self.save_for_user(user_id, goals)
        return changed


class CompanyGoalRepository:
    """Repository for the company goals singleton"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def get(self) -> CompanyGoals:
        """Get company goals (all targets 0 when never saved)"""
        data = self.store.get(DOCUMENT_COMPANY_GOALS) or {}
        return CompanyGoals.model_validate(data)

    def save(self, goals: CompanyGoals) -> CompanyGoals:
        goals.updated_at = datetime.now()
        self.store.put(DOCUMENT_COMPANY_GOALS, dump_model(goals))
        return goals


class GoalHistoryRepository:
    """Repository for the append-only goal history log"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def _load(self) -> dict:
        data = self.store.get(DOCUMENT_GOAL_HISTORY) or {"data": {"goalHistory": []}}
        inner = data.get("data") if isinstance(data, dict) else None
        history = inner.get("goalHistory", []) if isinstance(inner, dict) else None
        if not isinstance(history, list):
            raise StorageException("read", "goal history document is malformed")
        return {"success": True, "data": {"goalHistory": history}}

    def get_all(self) -> List[GoalHistoryEntry]:
        return [
            GoalHistoryEntry.model_validate(entry)
            for entry in self._load()["data"]["goalHistory"]
        ]

    def append(self, entries: Iterable[GoalHistoryEntry]) -> None:
        data = self._load()
        data["data"]["goalHistory"].extend(dump_model(entry) for entry in entries)
        self.store.put(DOCUMENT_GOAL_HISTORY, data)
