# engines/urgency_engine.py
#
# Temporal urgency and calendar context. Both start from a neutral 50.

from datetime import datetime

from models import DayOfWeek, IssueCategory, PriorityInput, TimeOfDay
from .scoring import clamp

BASE_SCORE = 50

RECURRING_BOOST = 20
OCCURRENCE_POINTS = 3
OCCURRENCE_CAP = 15
WEATHER_BOOST = 10
STALE_AFTER_HOURS = 72
STALE_PENALTY = 10
FRESH_WITHIN_HOURS = 1
FRESH_BOOST = 10

EXAM_BOOST = 30
SEMESTER_BOOST = 10
PEAK_HOURS_BOOST = 10
NIGHT_PENALTY = 10
WEEKEND_PENALTY = 15

# never discounted for off-hours
WEEKEND_EXEMPT = frozenset({IssueCategory.SAFETY, IssueCategory.STRUCTURAL})


def hours_since(reported_at: datetime, now: datetime) -> float:
    return (now - reported_at).total_seconds() / 3600


def urgency_score(inp: PriorityInput, now: datetime) -> int:
    score = BASE_SCORE

    if inp.is_recurring:
        score += RECURRING_BOOST
    if inp.previous_occurrences:
        score += min(OCCURRENCE_CAP, inp.previous_occurrences * OCCURRENCE_POINTS)
    if inp.weather_sensitive:
        score += WEATHER_BOOST

    age = hours_since(inp.reported_at, now)
    if age > STALE_AFTER_HOURS:
        score -= STALE_PENALTY
    elif age < FRESH_WITHIN_HOURS:
        score += FRESH_BOOST

    return clamp(score)


def weekend_discount_applies(inp: PriorityInput) -> bool:
    if inp.day_of_week != DayOfWeek.WEEKEND:
        return False
    return inp.category not in WEEKEND_EXEMPT and not inp.safety_risk


def context_score(inp: PriorityInput) -> int:
    score = BASE_SCORE

    if inp.exam_period:
        score += EXAM_BOOST
    if inp.current_semester:
        score += SEMESTER_BOOST

    if inp.time_of_day in (TimeOfDay.MORNING, TimeOfDay.AFTERNOON):
        score += PEAK_HOURS_BOOST
    elif inp.time_of_day == TimeOfDay.NIGHT:
        score -= NIGHT_PENALTY

    if weekend_discount_applies(inp):
        score -= WEEKEND_PENALTY

    return clamp(score)
