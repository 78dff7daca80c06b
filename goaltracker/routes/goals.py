"""
Personal goal HTTP routes.
"""
from fastapi import APIRouter, Depends, Query, HTTPException, status
from typing import List

from goaltracker.auth import verify_api_key
from goaltracker.dependencies import get_store
from goaltracker.exceptions import GoalNotFoundException
from goaltracker.repositories.document_store import DocumentStore
from goaltracker.schemas import Goal, GoalCreate, GoalUpdate, FreeTextGoalsRequest
from goaltracker.services.goal_service import GoalService

router = APIRouter(prefix="/api/personal-goals", tags=["personal-goals"])


@router.get("", response_model=List[Goal])
def get_personal_goals(
    user_id: str = Query(..., alias="userId", min_length=1),
    store: DocumentStore = Depends(get_store),
    _: str = Depends(verify_api_key)
):
    """Get all goals of a user."""
    return GoalService(store).get_goals(user_id)


@router.post("", response_model=Goal, status_code=status.HTTP_201_CREATED)
def create_personal_goal(
    goal: GoalCreate,
    store: DocumentStore = Depends(get_store),
    _: str = Depends(verify_api_key)
):
    return GoalService(store).create_goal(goal)


@router.post("/free-text")
def create_goals_from_text(
    request: FreeTextGoalsRequest,
    store: DocumentStore = Depends(get_store),
    _: str = Depends(verify_api_key)
):
    """Create goals from free-text sentences. Unresolved sentences are reported, not rejected."""
    defaults = request.defaults.model_dump(exclude_none=True) if request.defaults else None
    result = GoalService(store).create_goals_from_text(request.user_id, request.free_text_goals, defaults)
    return {
        "created": result["created"],
        "skipped": result["skipped"]
    }


@router.put("/{goal_id}", response_model=Goal)
def update_personal_goal(
    goal_id: str,
    goal_update: GoalUpdate,
    user_id: str = Query(..., alias="userId", min_length=1),
    store: DocumentStore = Depends(get_store),
    _: str = Depends(verify_api_key)
):
    try:
        return GoalService(store).update_goal(user_id, goal_id, goal_update)
    except GoalNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_personal_goal(
    goal_id: str,
    user_id: str = Query(..., alias="userId", min_length=1),
    store: DocumentStore = Depends(get_store),
    _: str = Depends(verify_api_key)
):
    try:
        GoalService(store).delete_goal(user_id, goal_id)
    except GoalNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("")
def delete_user_goals(
    user_id: str = Query(..., alias="userId", min_length=1),
    store: DocumentStore = Depends(get_store),
    _: str = Depends(verify_api_key)
):
    """Delete every goal of a user."""
    removed = GoalService(store).delete_user_goals(user_id)
    return {"message": "Goals deleted", "deleted": removed}
