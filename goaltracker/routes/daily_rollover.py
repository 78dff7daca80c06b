"""
Daily rollover HTTP routes.
"""
from fastapi import APIRouter, Depends

from goaltracker.auth import verify_api_key
from goaltracker.dependencies import get_store
from goaltracker.repositories.document_store import DocumentStore
from goaltracker.schemas import DailyRolloverResult
from goaltracker.services.goal_service import GoalService

router = APIRouter(prefix="/api/daily-rollover", tags=["daily-rollover"])


@router.post("", response_model=DailyRolloverResult)
def run_daily_rollover(
    store: DocumentStore = Depends(get_store),
    _: str = Depends(verify_api_key)
):
    """Snapshot today's daily billable hours for every user."""
    return GoalService(store).daily_rollover()


@router.get("")
def get_daily_snapshots(
    store: DocumentStore = Depends(get_store),
    _: str = Depends(verify_api_key)
):
    snapshots = GoalService(store).get_daily_snapshots()
    return {"success": True, "data": {"dailySnapshots": snapshots}}
