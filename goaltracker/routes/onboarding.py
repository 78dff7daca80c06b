"""
Onboarding HTTP route.
Turns the goal sentences a new user typed in into personal goals
and company targets in one call.
"""
from fastapi import APIRouter, Depends

from goaltracker.auth import verify_api_key
from goaltracker.dependencies import get_store
from goaltracker.repositories.document_store import DocumentStore
from goaltracker.schemas import OnboardingRequest
from goaltracker.services.goal_service import GoalService

router = APIRouter(prefix="/api/onboarding", tags=["onboarding"])


@router.post("")
def complete_onboarding(
    request: OnboardingRequest,
    store: DocumentStore = Depends(get_store),
    _: str = Depends(verify_api_key)
):
    goal_service = GoalService(store)
    personal = goal_service.create_goals_from_text(request.user_id, request.free_text_goals)

    response = {
        "userId": request.user_id,
        "personalGoals": personal["created"],
        "skipped": personal["skipped"],
        "companyGoals": None
    }

    if request.free_text_company_goals:
        company = goal_service.apply_company_free_text(request.free_text_company_goals)
        response["companyGoals"] = company["company_goals"]
        response["skipped"] = personal["skipped"] + company["skipped"]

    return response
