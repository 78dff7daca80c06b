from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from datetime import datetime, date
from typing import Optional, List, Dict, Literal

TIMEFRAME_PATTERN = "^(daily|weekly|monthly|quarterly|annual)$"


class CamelModel(BaseModel):
    """Base for models exchanged as camelCase JSON (requests, responses, stored documents)"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# Goal intent schemas
class GoalIntent(CamelModel):
    metric_key: str
    scope: str
    timeframe: str
    comparator: str
    target: float
    unit: Optional[str] = None  # hours, points, percent, dollars, count
    entity_name: Optional[str] = None
    original_text: Optional[str] = None


class IntentDefaults(CamelModel):
    scope: Optional[str] = Field(None, pattern="^(company|team|user)$")
    timeframe: Optional[str] = Field(None, pattern=TIMEFRAME_PATTERN)
    comparator: Optional[str] = Field(None, pattern="^(>=|<=|==)$")


# Personal goal schemas
class Goal(CamelModel):
    id: str
    name: str
    type: str = "Personal Goal"
    frequency: str  # daily, weekly, monthly, quarterly, annual
    target: float
    current: float = 0
    status: str = "active"  # active, completed, expired
    description: Optional[str] = None
    progress: Optional[float] = None
    metric_key: Optional[str] = None  # set when created from free text
    created_at: Optional[datetime] = None


class GoalCreate(CamelModel):
    user_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    type: str = Field(default="Personal Goal", max_length=200)
    frequency: str = Field(default="weekly", pattern=TIMEFRAME_PATTERN)
    target: float = Field(..., gt=0)
    description: Optional[str] = Field(None, max_length=500)
    metric_key: Optional[str] = None


class GoalUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    type: Optional[str] = Field(None, max_length=200)
    frequency: Optional[str] = Field(None, pattern=TIMEFRAME_PATTERN)
    target: Optional[float] = Field(None, gt=0)
    current: Optional[float] = Field(None, ge=0)
    status: Optional[str] = Field(None, pattern="^(active|completed|expired)$")
    description: Optional[str] = Field(None, max_length=500)
    progress: Optional[float] = None


class FreeTextGoalsRequest(CamelModel):
    user_id: str = Field(..., min_length=1)
    free_text_goals: List[str] = Field(default_factory=list)
    defaults: Optional[IntentDefaults] = None


# Company goal schemas
class CompanyGoals(CamelModel):
    weekly_billable: float = 0
    monthly_billable: float = 0
    annual_billable: float = 0
    updated_at: Optional[datetime] = None


class CompanyGoalsUpdate(CamelModel):
    weekly_billable: Optional[float] = Field(None, ge=0)
    monthly_billable: Optional[float] = Field(None, ge=0)
    annual_billable: Optional[float] = Field(None, ge=0)


class CompanyFreeTextRequest(CamelModel):
    free_text_company_goals: List[str] = Field(default_factory=list)


class OnboardingRequest(CamelModel):
    user_id: str = Field(..., min_length=1)
    free_text_goals: List[str] = Field(default_factory=list)
    free_text_company_goals: List[str] = Field(default_factory=list)


# Goal evaluation schemas
class GoalEvaluation(CamelModel):
    goal_id: str
    user_id: str
    goal_name: str
    goal_type: str
    frequency: str
    target_value: float
    actual_value: float
    status: Literal["Met", "Missed"]
    period_start: datetime
    period_end: datetime
    completion_date: datetime
    goal_scope: Literal["PERSONAL", "TEAM"] = "PERSONAL"


class GoalHistoryEntry(GoalEvaluation):
    id: str
    created_at: datetime


class EvaluateGoalsRequest(CamelModel):
    user_id: str = Field(..., min_length=1)


class EvaluationResult(CamelModel):
    evaluated_goals: List[GoalEvaluation] = Field(default_factory=list)
    total: int = 0
    met: int = 0
    missed: int = 0


class BulkEvaluationResult(CamelModel):
    evaluated_goals: Dict[str, List[GoalEvaluation]] = Field(default_factory=dict)
    total: int = 0
    met: int = 0
    missed: int = 0
    users_processed: List[str] = Field(default_factory=list)


# Daily rollover schemas
class DailySnapshot(CamelModel):
    date: date
    user_id: str
    billable_hours: float = 0
    timestamp: datetime


class DailyRolloverResult(CamelModel):
    success: bool = True
    message: str
    processed_users: int = 0
    date: date
    snapshots: List[DailySnapshot] = Field(default_factory=list)


# Time entry schemas
class TimeEntryBase(CamelModel):
    user_id: str = Field(..., min_length=1)
    case_id: Optional[str] = None
    date: date
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration: int = Field(..., ge=0)  # seconds
    billable: bool = True
    description: str = Field(..., min_length=1, max_length=500)
    non_billable_task_id: Optional[str] = None
    points: Optional[float] = Field(None, ge=0)  # non-billable points
    source: str = "manual-form"  # manual-form, timer, import, ...


class TimeEntryCreate(TimeEntryBase):
    pass


class TimeEntry(TimeEntryBase):
    id: str
    status: str = "COMPLETED"
    created_at: Optional[datetime] = None


# Metrics schemas
class CVSRequest(CamelModel):
    user_id: Optional[str] = None
    time_frame: Optional[str] = None
    actual_billable_hours: float = Field(default=0, ge=0)
    actual_non_billable_points: float = Field(default=0, ge=0)
    expected_billable_hours: float = Field(..., gt=0)
    expected_non_billable_points: float = Field(..., gt=0)


class RealizationRateRequest(CamelModel):
    billed_hours: float = Field(..., ge=0)
    worked_hours: float = Field(..., ge=0)


class GoalPerformanceItem(CamelModel):
    id: Optional[str] = None
    name: str
    type: str = "General"
    target: float = Field(default=1, gt=0)
    actual: float = Field(default=0, ge=0)
    completed_at: Optional[datetime] = None


class GoalPerformanceRequest(CamelModel):
    user_id: Optional[str] = None
    time_frame: Optional[str] = None
    goals: List[GoalPerformanceItem]


class TimeEntrySummary(CamelModel):
    total_entries: int = 0
    total_hours: float = 0
    billable_hours: float = 0
    non_billable_points: float = 0


class CVSComponent(CamelModel):
    actual: float
    expected: float
    percentage: float


class CVSCalculation(CamelModel):
    user_id: Optional[str] = None
    time_frame: Optional[str] = None
    billable_hours: CVSComponent
    non_billable_points: CVSComponent
    total_points: float
    total_percentage: float
    cvs_score: float


class UtilizationDay(CamelModel):
    date: date
    total: float
    billable: float
    utilization: float


class UtilizationReport(CamelModel):
    user_id: Optional[str] = None
    time_frame: Optional[str] = None
    total_hours_worked: float = 0
    billable_hours: float = 0
    non_billable_hours: float = 0
    utilization_rate: float = 0
    daily: List[UtilizationDay] = Field(default_factory=list)
    best_day: Optional[UtilizationDay] = None
    worst_day: Optional[UtilizationDay] = None


class RealizationRate(CamelModel):
    billed_hours: float
    worked_hours: float
    write_offs: float
    realization_rate: float


class GoalPerformanceResult(CamelModel):
    id: Optional[str] = None
    name: str
    type: str
    target: float
    actual: float
    percentage: float
    status: str  # exceeded, met, partial, missed
    completed_at: Optional[datetime] = None


class GoalPerformanceTypeCount(CamelModel):
    type: str
    exceeded: int = 0
    met: int = 0
    partial: int = 0
    missed: int = 0
    total: int = 0


class GoalPerformanceReport(CamelModel):
    user_id: Optional[str] = None
    time_frame: Optional[str] = None
    total_goals: int = 0
    exceeded: int = 0
    met: int = 0
    partial: int = 0
    missed: int = 0
    success_rate: float = 0
    goals: List[GoalPerformanceResult] = Field(default_factory=list)
    by_type: List[GoalPerformanceTypeCount] = Field(default_factory=list)
