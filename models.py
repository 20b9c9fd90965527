from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# ============================================================
# ENUMS
# ============================================================
class IssueCategory(str, Enum):
    SAFETY = "Safety"
    STRUCTURAL = "Structural"
    ELECTRICAL = "Electrical"
    PLUMBING = "Plumbing"
    HVAC = "HVAC"
    NETWORK = "Network"
    MAINTENANCE = "Maintenance"
    CLEANLINESS = "Cleanliness"
    FURNITURE = "Furniture"
    OTHER = "Other"

    @classmethod
    def _missing_(cls, value):
        # Case-insensitive match; anything unrecognised is OTHER
        if isinstance(value, str):
            s = value.replace("\xa0", " ").strip().lower()
            for member in cls:
                if member.value.lower() == s or member.name.lower() == s:
                    return member
        return cls.OTHER


class IssuePriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class TimeOfDay(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class DayOfWeek(str, Enum):
    WEEKDAY = "weekday"
    WEEKEND = "weekend"


class ReasonTag(str, Enum):
    SAFETY_CATEGORY = "safety_category"
    SAFETY_RISK = "safety_risk"
    HIGH_OCCUPANCY = "high_occupancy"
    BLOCKS_ACCESS = "blocks_access"
    ACADEMIC_DISRUPTION = "academic_disruption"
    RECURRING = "recurring"
    EXAM_PERIOD = "exam_period"
    CRITICAL_INFRASTRUCTURE = "critical_infrastructure"
    HIGH_ESCALATION = "high_escalation"
    VOTES_STRONG = "votes_strong"
    VOTES_SIGNIFICANT = "votes_significant"
    VOTES_VALIDATED = "votes_validated"
    VOTES_SOME = "votes_some"
    TIER_CRITICAL = "tier_critical"
    TIER_HIGH = "tier_high"
    TIER_MEDIUM = "tier_medium"
    TIER_LOW = "tier_low"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================
# INPUT MODEL (caller → Scoring Engine)
# ============================================================
class PriorityInput(BaseModel):
    """Description of a reported issue.

    Only ``category`` and ``reported_at`` are required. Everything else may be
    missing and the engine falls back to documented defaults. No range checks
    here: the engine is total, range validation belongs to the API layer
    (see ``PriorityRequest``).
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    # Core issue data
    category: IssueCategory = Field(..., examples=["Safety"])
    severity: Optional[float] = Field(None, examples=[7], description="1-10 scale")
    description: Optional[str] = None

    # Location
    building_id: Optional[str] = None
    room_id: Optional[str] = None
    zone_id: Optional[str] = None
    room_type: Optional[str] = None
    affected_area: Optional[float] = Field(None, description="square meters")
    occupancy: Optional[int] = Field(None, description="people affected")

    # Time
    reported_at: datetime
    is_recurring: Optional[bool] = None
    previous_occurrences: Optional[int] = None

    # Impact flags
    blocks_access: Optional[bool] = None
    safety_risk: Optional[bool] = None
    critical_infrastructure: Optional[bool] = None
    affects_academics: Optional[bool] = None
    weather_sensitive: Optional[bool] = None

    # Context
    time_of_day: Optional[TimeOfDay] = None
    day_of_week: Optional[DayOfWeek] = None
    current_semester: Optional[bool] = None
    exam_period: Optional[bool] = None

    # Historical
    avg_resolution_time: Optional[float] = Field(None, description="hours")
    historical_cost_avg: Optional[float] = None
    escalation_rate: Optional[float] = Field(None, description="fraction 0-1")

    # Community votes
    vote_count: Optional[int] = None

    @field_validator("category", mode="before")
    @classmethod
    def _known_or_other(cls, v) -> IssueCategory:
        return IssueCategory(v)

    @field_validator("reported_at")
    @classmethod
    def _assume_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class PriorityRequest(PriorityInput):
    """API body for a single issue.

    Adds boundary validation and stamps ``reportedAt`` with the current time
    when the client leaves it out.
    """

    severity: Optional[float] = Field(None, ge=0, le=10, examples=[7])
    occupancy: Optional[int] = Field(None, ge=0, le=10000, examples=[80])
    affected_area: Optional[float] = Field(None, ge=0, le=1_000_000)
    previous_occurrences: Optional[int] = Field(None, ge=0)
    avg_resolution_time: Optional[float] = Field(None, ge=0)
    historical_cost_avg: Optional[float] = Field(None, ge=0)
    escalation_rate: Optional[float] = Field(None, ge=0, le=1)
    vote_count: Optional[int] = Field(None, ge=0)
    reported_at: datetime = Field(default_factory=utc_now)


class BatchRequest(BaseModel):
    inputs: List[PriorityRequest]


class RecalculateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    original_input: PriorityRequest
    context_updates: dict = Field(default_factory=dict)


# ============================================================
# OUTPUT MODEL (Scoring Engine → caller)
# ============================================================
class PriorityBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    category_score: int
    severity_score: int
    impact_score: int
    urgency_score: int
    context_score: int
    historical_score: float
    vote_score: int


class PriorityScore(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    score: int
    priority: IssuePriority
    confidence: float
    breakdown: PriorityBreakdown
    reasoning: List[str]
    # one tag per reasoning line, same order
    reasoning_tags: List[ReasonTag]
    recommended_sla: int = Field(..., alias="recommendedSLA")
