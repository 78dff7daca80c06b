"""
Goal history HTTP routes.
"""
from fastapi import APIRouter, Depends, Query, status
from datetime import date
from typing import Optional

from goaltracker.auth import verify_api_key
from goaltracker.constants import DEFAULT_HISTORY_LIMIT
from goaltracker.dependencies import get_store
from goaltracker.repositories.document_store import DocumentStore
from goaltracker.schemas import GoalEvaluation, GoalHistoryEntry
from goaltracker.services.goal_service import GoalService

router = APIRouter(prefix="/api/goal-history", tags=["goal-history"])


@router.get("")
def get_goal_history(
    user_id: Optional[str] = Query(None, alias="userId"),
    goal_type: Optional[str] = Query(None, alias="goalType"),
    frequency: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status", pattern="^(Met|Missed)$"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    limit: int = Query(DEFAULT_HISTORY_LIMIT, ge=1, le=1000),
    store: DocumentStore = Depends(get_store),
    _: str = Depends(verify_api_key)
):
    """Get evaluated goal periods, newest first."""
    history = GoalService(store).get_history(
        user_id=user_id,
        goal_type=goal_type,
        frequency=frequency.upper() if frequency else None,
        status=status_filter,
        start_date=start_date,
        end_date=end_date,
        limit=limit
    )
    return {
        "success": True,
        "data": {"goalHistory": history},
        "total": len(history)
    }


@router.post("", response_model=GoalHistoryEntry, status_code=status.HTTP_201_CREATED)
def create_goal_history_entry(
    evaluation: GoalEvaluation,
    store: DocumentStore = Depends(get_store),
    _: str = Depends(verify_api_key)
):
    """Record an evaluation produced elsewhere (status must be Met or Missed)."""
    return GoalService(store).record_history(evaluation)
