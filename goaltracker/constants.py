"""
Application constants and environment-driven configuration.
"""
import os

# === Configuration ===

API_KEY = os.getenv("GOALTRACKER_API_KEY", "your-secret-key-change-me")

STORAGE_BACKEND = os.getenv("GOALTRACKER_STORAGE", "json")  # json or sql
DATA_DIRECTORY = os.getenv("GOALTRACKER_DATA_DIR", "./data")
DATABASE_URL = os.getenv("GOALTRACKER_DATABASE_URL", "sqlite:///./goaltracker.db")

DEFAULT_LOG_DIRECTORY_PROD = "/var/log/goaltracker"
DEFAULT_LOG_DIRECTORY_DEV = "./logs"

AUTO_EVALUATE_ENABLED = os.getenv("GOALTRACKER_AUTO_EVALUATE", "false").lower() in ("1", "true", "yes")
EVALUATION_TIME = os.getenv("GOALTRACKER_EVALUATION_TIME", "23:55")  # HH:MM

CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "GOALTRACKER_CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000"
    ).split(",")
    if origin.strip()
]

# === Document keys ===

DOCUMENT_PERSONAL_GOALS = "personal-goals"
DOCUMENT_COMPANY_GOALS = "company-goals"
DOCUMENT_GOAL_HISTORY = "goal-history"
DOCUMENT_TIME_ENTRIES = "time-entries"
DOCUMENT_DAILY_SNAPSHOTS = "daily-snapshots"

# === Goal intent vocabulary ===

METRIC_BILLABLE_HOURS = "billable_hours"
METRIC_NON_BILLABLE_HOURS = "non_billable_hours"
METRIC_REVENUE = "revenue"
METRIC_REALIZATION_RATE = "realization_rate"
METRIC_UTILIZATION = "utilization"
METRIC_RETENTION = "retention"
METRIC_CVS = "cvs"
METRIC_MEETINGS = "meetings"
METRIC_FOCUS_HOURS = "focus_hours"

SCOPE_COMPANY = "company"
SCOPE_TEAM = "team"
SCOPE_USER = "user"

TIMEFRAME_DAILY = "daily"
TIMEFRAME_WEEKLY = "weekly"
TIMEFRAME_MONTHLY = "monthly"
TIMEFRAME_QUARTERLY = "quarterly"
TIMEFRAME_ANNUAL = "annual"

COMPARATOR_GTE = ">="
COMPARATOR_LTE = "<="
COMPARATOR_EQ = "=="

UNIT_HOURS = "hours"
UNIT_PERCENT = "percent"
UNIT_DOLLARS = "dollars"
UNIT_COUNT = "count"

DEFAULT_TIMEFRAME = TIMEFRAME_WEEKLY
DEFAULT_SCOPE = SCOPE_USER
DEFAULT_COMPARATOR = COMPARATOR_GTE

# === Goals ===

GOAL_STATUS_ACTIVE = "active"
GOAL_STATUS_COMPLETED = "completed"

GOAL_SCOPE_PERSONAL = "PERSONAL"

EVALUATION_MET = "Met"
EVALUATION_MISSED = "Missed"

GOAL_TYPE_BILLABLE_HOURS = "BILLABLE_HOURS"
GOAL_TYPE_CASE_BASED = "CASE_BASED"
GOAL_TYPE_TIME_MANAGEMENT = "TIME_MANAGEMENT"
GOAL_TYPE_CULTURE = "CULTURE"
GOAL_TYPE_REVENUE = "REVENUE"
GOAL_TYPE_GENERAL = "GENERAL"

DEFAULT_HISTORY_LIMIT = 100

# Goal-performance tiers (dashboard metric, independent of Met/Missed)
PERFORMANCE_EXCEEDED = "exceeded"
PERFORMANCE_MET = "met"
PERFORMANCE_PARTIAL = "partial"
PERFORMANCE_MISSED = "missed"
PERFORMANCE_PARTIAL_THRESHOLD = 90.0
PERFORMANCE_MET_THRESHOLD = 100.0

# === Time entries ===

TIME_ENTRY_STATUS_COMPLETED = "COMPLETED"
SOURCE_MANUAL_FORM = "manual-form"
SOURCE_TIMER = "timer"
GOAL_COUNTED_SOURCES = (SOURCE_MANUAL_FORM, SOURCE_TIMER)
SECONDS_PER_HOUR = 3600

# === Metrics ===

DEFAULT_EXPECTED_BILLABLE_HOURS = 35
DEFAULT_EXPECTED_NON_BILLABLE_POINTS = 56.0
