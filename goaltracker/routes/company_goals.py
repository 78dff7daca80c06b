"""
Company goal HTTP routes.
"""
from fastapi import APIRouter, Depends

from goaltracker.auth import verify_api_key
from goaltracker.dependencies import get_store
from goaltracker.repositories.document_store import DocumentStore
from goaltracker.schemas import CompanyGoals, CompanyGoalsUpdate, CompanyFreeTextRequest
from goaltracker.services.goal_service import GoalService

router = APIRouter(prefix="/api/company-goals", tags=["company-goals"])


@router.get("", response_model=CompanyGoals)
def get_company_goals(
    store: DocumentStore = Depends(get_store),
    _: str = Depends(verify_api_key)
):
    return GoalService(store).get_company_goals()


@router.put("", response_model=CompanyGoals)
def update_company_goals(
    goals_update: CompanyGoalsUpdate,
    store: DocumentStore = Depends(get_store),
    _: str = Depends(verify_api_key)
):
    """Set company targets directly (values may go down)."""
    return GoalService(store).update_company_goals(goals_update)


@router.post("/free-text")
def apply_company_free_text(
    request: CompanyFreeTextRequest,
    store: DocumentStore = Depends(get_store),
    _: str = Depends(verify_api_key)
):
    """Raise company billable targets from free-text sentences."""
    result = GoalService(store).apply_company_free_text(request.free_text_company_goals)
    return {
        "companyGoals": result["company_goals"],
        "intents": result["intents"],
        "skipped": result["skipped"]
    }
