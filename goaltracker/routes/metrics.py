"""
Metrics HTTP routes.
"""
from fastapi import APIRouter, Depends, Query

from goaltracker.auth import verify_api_key
from goaltracker.constants import TIMEFRAME_MONTHLY
from goaltracker.dependencies import get_store
from goaltracker.repositories.document_store import DocumentStore
from goaltracker.schemas import (
    CVSRequest, CVSCalculation, UtilizationReport,
    RealizationRateRequest, RealizationRate,
    GoalPerformanceRequest, GoalPerformanceReport,
    TIMEFRAME_PATTERN
)
from goaltracker.services.metrics_service import MetricsService

router = APIRouter(prefix="/api/metrics", tags=["metrics"])


@router.get("/cvs", response_model=CVSCalculation)
def get_cvs(
    user_id: str = Query(..., alias="userId", min_length=1),
    time_frame: str = Query(TIMEFRAME_MONTHLY, alias="timeFrame", pattern=TIMEFRAME_PATTERN),
    store: DocumentStore = Depends(get_store),
    _: str = Depends(verify_api_key)
):
    """Contribution Value Score from logged time."""
    return MetricsService(store).get_cvs(user_id, time_frame)


@router.post("/cvs", response_model=CVSCalculation)
def calculate_cvs(
    request: CVSRequest,
    _: str = Depends(verify_api_key)
):
    """Contribution Value Score from supplied actuals and expectations."""
    return MetricsService.build_cvs_calculation(
        request.actual_billable_hours,
        request.actual_non_billable_points,
        request.expected_billable_hours,
        request.expected_non_billable_points,
        user_id=request.user_id,
        time_frame=request.time_frame
    )


@router.get("/utilization", response_model=UtilizationReport)
def get_utilization(
    user_id: str = Query(..., alias="userId", min_length=1),
    time_frame: str = Query(TIMEFRAME_MONTHLY, alias="timeFrame", pattern=TIMEFRAME_PATTERN),
    store: DocumentStore = Depends(get_store),
    _: str = Depends(verify_api_key)
):
    return MetricsService(store).get_utilization(user_id, time_frame)


@router.post("/realization-rate", response_model=RealizationRate)
def calculate_realization_rate(
    request: RealizationRateRequest,
    _: str = Depends(verify_api_key)
):
    return MetricsService.calculate_realization_rate(request.billed_hours, request.worked_hours)


@router.post("/goal-performance", response_model=GoalPerformanceReport)
def summarize_goal_performance(
    request: GoalPerformanceRequest,
    _: str = Depends(verify_api_key)
):
    """Classify goals as exceeded, met, partial or missed."""
    return MetricsService.summarize_goal_performance(
        request.goals,
        user_id=request.user_id,
        time_frame=request.time_frame
    )
