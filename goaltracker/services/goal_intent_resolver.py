"""
Goal intent resolver.
Turns free-text goal sentences ("log 30 billable hours weekly") into
structured GoalIntent objects and maps intents onto personal goals or
company-wide billable targets.

Every detection table below is evaluated top to bottom and the first
matching entry wins, so the order of each list decides ambiguous text.
"""
import re
import time
import uuid
from datetime import datetime
from typing import Iterable, List, Optional, Pattern, Sequence, Tuple, TypeVar

from goaltracker.constants import (
    METRIC_BILLABLE_HOURS, METRIC_NON_BILLABLE_HOURS, METRIC_REVENUE,
    METRIC_REALIZATION_RATE, METRIC_UTILIZATION, METRIC_RETENTION,
    METRIC_CVS, METRIC_MEETINGS, METRIC_FOCUS_HOURS,
    TIMEFRAME_DAILY, TIMEFRAME_WEEKLY, TIMEFRAME_MONTHLY,
    TIMEFRAME_QUARTERLY, TIMEFRAME_ANNUAL,
    SCOPE_COMPANY, SCOPE_TEAM, SCOPE_USER,
    COMPARATOR_GTE, COMPARATOR_LTE, COMPARATOR_EQ,
    UNIT_HOURS, UNIT_PERCENT, UNIT_DOLLARS, UNIT_COUNT,
    DEFAULT_TIMEFRAME, DEFAULT_SCOPE, DEFAULT_COMPARATOR,
    GOAL_STATUS_ACTIVE
)
from goaltracker.schemas import GoalIntent, Goal, CompanyGoals

T = TypeVar("T")

_I = re.IGNORECASE

METRIC_PATTERNS: List[Tuple[str, List[Pattern]]] = [
    (METRIC_BILLABLE_HOURS, [
        re.compile(r"\bbillable hours?\b", _I),
        re.compile(r"\bhours billed\b", _I),
        re.compile(r"\bbilled hours\b", _I),
        re.compile(r"\bbh\b", _I),
    ]),
    (METRIC_NON_BILLABLE_HOURS, [
        re.compile(r"\bnon[-\s]?billable hours?\b", _I),
        re.compile(r"\bnbh\b", _I),
    ]),
    (METRIC_REVENUE, [
        re.compile(r"\brevenue\b", _I),
        re.compile(r"\btop ?line\b", _I),
        re.compile(r"\bbookings?\b", _I),
    ]),
    (METRIC_REALIZATION_RATE, [re.compile(r"\brealization\b", _I)]),
    (METRIC_UTILIZATION, [re.compile(r"\butili[sz]ation\b", _I)]),
    (METRIC_RETENTION, [
        re.compile(r"\bretention\b", _I),
        re.compile(r"\bchurn\b", _I),
    ]),
    (METRIC_CVS, [
        re.compile(r"\bcvs\b", _I),
        re.compile(r"contribution value score", _I),
    ]),
    (METRIC_MEETINGS, [
        re.compile(r"\bmeetings?\b", _I),
        re.compile(r"\bclient calls?\b", _I),
        re.compile(r"\bcheck[-\s]?ins?\b", _I),
    ]),
    (METRIC_FOCUS_HOURS, [
        re.compile(r"\bfocus( ed)? hours?\b", _I),
        re.compile(r"\bdeep work\b", _I),
    ]),
]

TIMEFRAME_PATTERNS: List[Tuple[str, List[Pattern]]] = [
    (TIMEFRAME_DAILY, [
        re.compile(r"\bdaily\b", _I),
        re.compile(r"\beach day\b", _I),
        re.compile(r"\bevery day\b", _I),
        re.compile(r"\bper day\b", _I),
        re.compile(r"\btoday\b", _I),
    ]),
    (TIMEFRAME_WEEKLY, [
        re.compile(r"\bweekly\b", _I),
        re.compile(r"\bthis week\b", _I),
        re.compile(r"\bper week\b", _I),
        re.compile(r"\bwk\b", _I),
    ]),
    (TIMEFRAME_MONTHLY, [
        re.compile(r"\bmonthly\b", _I),
        re.compile(r"\bthis month\b", _I),
        re.compile(r"\bper month\b", _I),
        re.compile(r"\bmo\b", _I),
    ]),
    (TIMEFRAME_QUARTERLY, [
        re.compile(r"\bquarter(ly)?\b", _I),
        re.compile(r"\bQ[1-4]\b", _I),
    ]),
    (TIMEFRAME_ANNUAL, [
        re.compile(r"\bannual(ly)?\b", _I),
        re.compile(r"\bper year\b", _I),
        re.compile(r"\byearly\b", _I),
        re.compile(r"\byr\b", _I),
    ]),
]

SCOPE_PATTERNS: List[Tuple[str, List[Pattern]]] = [
    (SCOPE_COMPANY, [
        re.compile(r"\bcompany(-?wide)?\b", _I),
        re.compile(r"\borg(aniz|anis)ation(-?wide)?\b", _I),
        re.compile(r"\bfirma?wide\b", _I),
        re.compile(r"\ball\s+(staff|team|members)\b", _I),
    ]),
    (SCOPE_TEAM, [
        re.compile(r"\bteam\b", _I),
        re.compile(r"\bdepartment\b", _I),
        re.compile(r"\bpractice group\b", _I),
    ]),
    (SCOPE_USER, [
        re.compile(r"\bmy\b", _I),
        re.compile(r"\bme\b", _I),
        re.compile(r"\bpersonal\b", _I),
        re.compile(r"\bindividual\b", _I),
    ]),
]

COMPARATOR_PATTERNS: List[Tuple[str, List[Pattern]]] = [
    (COMPARATOR_GTE, [
        re.compile(r"\bat\s*least\b", _I),
        re.compile(r"\bminimum\b", _I),
        re.compile(r"\b>=\b"),
        re.compile(r"\bmore than( or equal)?\b", _I),
        re.compile(r"\babove\b", _I),
    ]),
    (COMPARATOR_LTE, [
        re.compile(r"\bat\s*most\b", _I),
        re.compile(r"\bmaximum\b", _I),
        re.compile(r"\b<=\b"),
        re.compile(r"\bless than( or equal)?\b", _I),
        re.compile(r"\bbelow\b", _I),
    ]),
    (COMPARATOR_EQ, [
        re.compile(r"\bequal(s)?\b", _I),
        re.compile(r"\bexact(ly)?\b", _I),
        re.compile(r"\b==\b"),
    ]),
]

# Fallback when no metric synonym is present
HOURS_HINT = re.compile(r"hours?", _I)
PERCENT_HINT = re.compile(r"%")

PERCENT_TARGET = re.compile(r"(\d{1,3}(?:\.\d+)?)\s*%")
CURRENCY_TARGETS = [
    re.compile(r"\$\s*([\d,]+(?:\.\d+)?)"),
    re.compile(r"USD\s*([\d,]+(?:\.\d+)?)", _I),
]
# Allows one qualifier between number and unit: "30 billable hours"
HOURS_TARGET = re.compile(r"(\d+(?:\.\d+)?)\s*(?:[a-z][a-z-]*\s+)?hours?\b", _I)
NUMBER_TARGET = re.compile(r"\b(\d+(?:\.\d+)?)\b")

ENTITY_NAME = re.compile(
    r"\b(?:for|in|on)\s+(?:the\s+)?([A-Z][\w&]*(?:\s+[A-Z][\w&]*)*)\s+(?:team|department|practice group)\b"
)

PERSONAL_GOAL_TYPES = {
    METRIC_BILLABLE_HOURS: "Billable / Work Output",
    METRIC_FOCUS_HOURS: "Time Management",
    METRIC_MEETINGS: "Team Contribution / Culture",
    METRIC_REALIZATION_RATE: "Billable / Work Output",
}

PERSONAL_GOAL_NAMES = {
    METRIC_BILLABLE_HOURS: "Billable Hours",
    METRIC_FOCUS_HOURS: "Focused Work Hours",
    METRIC_MEETINGS: "Client Meetings",
    METRIC_REALIZATION_RATE: "Realization Rate",
    METRIC_UTILIZATION: "Utilization",
}

DEFAULT_PERSONAL_GOAL_LABEL = "Personal Goal"

COMPANY_BILLABLE_FIELDS = {
    TIMEFRAME_WEEKLY: "weekly_billable",
    TIMEFRAME_MONTHLY: "monthly_billable",
    TIMEFRAME_ANNUAL: "annual_billable",
}


def detect(groups: Sequence[Tuple[T, Iterable[Pattern]]], text: str) -> Optional[T]:
    """Return the value of the first group with a pattern found in text"""
    for value, patterns in groups:
        for pattern in patterns:
            if pattern.search(text):
                return value
    return None


def _parse_number(raw: str) -> float:
    try:
        return float(raw.replace(",", ""))
    except ValueError:
        return 0.0


def extract_target(text: str) -> Tuple[float, Optional[str]]:
    """
    Extract the numeric target and its unit.

    Tried in order, stopping at the first nonzero value:
    percent (stored as a fraction), currency, hours, bare number.

    Returns:
        Tuple of (target, unit); (0.0, None) when nothing usable is found
    """
    match = PERCENT_TARGET.search(text)
    if match:
        target = _parse_number(match.group(1)) / 100
        if target:
            return target, UNIT_PERCENT

    for pattern in CURRENCY_TARGETS:
        match = pattern.search(text)
        if match:
            target = _parse_number(match.group(1))
            if target:
                return target, UNIT_DOLLARS
            break

    match = HOURS_TARGET.search(text)
    if match:
        target = _parse_number(match.group(1))
        if target:
            return target, UNIT_HOURS

    match = NUMBER_TARGET.search(text)
    if match:
        target = _parse_number(match.group(1))
        if target:
            return target, UNIT_COUNT

    return 0.0, None


def detect_metric(text: str) -> Optional[str]:
    metric_key = detect(METRIC_PATTERNS, text)
    if metric_key:
        return metric_key
    if HOURS_HINT.search(text):
        return METRIC_BILLABLE_HOURS
    if PERCENT_HINT.search(text):
        return METRIC_REALIZATION_RATE
    return None


def resolve_goal_intent_from_text(text: str, defaults: Optional[dict] = None) -> Optional[GoalIntent]:
    """
    Resolve one free-text goal sentence into a GoalIntent.

    Args:
        text: Goal sentence, e.g. "Log at least 30 billable hours weekly"
        defaults: Optional "scope", "timeframe" and "comparator" used when
            the text does not mention them

    Returns:
        GoalIntent, or None when no metric or no nonzero target was found
    """
    if not text or not isinstance(text, str):
        return None

    defaults = defaults or {}

    metric_key = detect_metric(text)
    timeframe = detect(TIMEFRAME_PATTERNS, text) or defaults.get("timeframe") or DEFAULT_TIMEFRAME
    scope = detect(SCOPE_PATTERNS, text) or defaults.get("scope") or DEFAULT_SCOPE
    comparator = detect(COMPARATOR_PATTERNS, text) or defaults.get("comparator") or DEFAULT_COMPARATOR
    target, unit = extract_target(text)

    if not metric_key or not target:
        return None

    entity_match = ENTITY_NAME.search(text)

    return GoalIntent(
        metric_key=metric_key,
        scope=scope,
        timeframe=timeframe,
        comparator=comparator,
        target=target,
        unit=unit,
        entity_name=entity_match.group(1) if entity_match else None,
        original_text=text
    )


def generate_goal_id() -> str:
    return f"goal-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


def map_canonical_to_personal_goal(intent: GoalIntent) -> Goal:
    """Build a fresh, active personal goal from a resolved intent"""
    goal_type = PERSONAL_GOAL_TYPES.get(intent.metric_key, DEFAULT_PERSONAL_GOAL_LABEL)
    name = PERSONAL_GOAL_NAMES.get(intent.metric_key, DEFAULT_PERSONAL_GOAL_LABEL)

    return Goal(
        id=generate_goal_id(),
        name=name,
        type=goal_type,
        frequency=intent.timeframe,
        target=intent.target,
        current=0,
        status=GOAL_STATUS_ACTIVE,
        description=intent.original_text or f"{name} target",
        metric_key=intent.metric_key,
        created_at=datetime.now()
    )


def apply_canonical_to_company_goals(
    intents: Iterable[GoalIntent],
    base: Optional[CompanyGoals] = None
) -> CompanyGoals:
    """
    Merge billable-hour intents into company-wide targets.

    Each weekly/monthly/annual target becomes max(existing, intent target),
    so re-applying the same or a smaller goal never lowers a target.
    Intents for other metrics or timeframes are ignored.
    """
    result = base.model_copy() if base else CompanyGoals()

    for intent in intents:
        if intent.metric_key != METRIC_BILLABLE_HOURS:
            continue
        field = COMPANY_BILLABLE_FIELDS.get(intent.timeframe)
        if field is None:
            continue
        setattr(result, field, max(getattr(result, field), intent.target))

    return result
