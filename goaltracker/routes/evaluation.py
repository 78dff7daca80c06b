"""
Goal evaluation HTTP routes.
"""
from fastapi import APIRouter, Depends

from goaltracker.auth import verify_api_key
from goaltracker.dependencies import get_store
from goaltracker.repositories.document_store import DocumentStore
from goaltracker.schemas import EvaluateGoalsRequest, EvaluationResult, BulkEvaluationResult
from goaltracker.services.goal_service import GoalService

router = APIRouter(prefix="/api/evaluate-goals", tags=["evaluation"])


@router.post("", response_model=EvaluationResult)
def evaluate_user_goals(
    request: EvaluateGoalsRequest,
    store: DocumentStore = Depends(get_store),
    _: str = Depends(verify_api_key)
):
    """Evaluate one user's expired goals and record them in history."""
    return GoalService(store).evaluate_user(request.user_id)


@router.get("", response_model=BulkEvaluationResult)
def evaluate_all_goals(
    store: DocumentStore = Depends(get_store),
    _: str = Depends(verify_api_key)
):
    """Evaluate expired goals of every user."""
    return GoalService(store).evaluate_all()
