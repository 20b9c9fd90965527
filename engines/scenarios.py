# engines/scenarios.py

from datetime import datetime, timedelta

from models import DayOfWeek, IssueCategory, PriorityInput, TimeOfDay

# (name, input fields without reported_at, hours since report)
SCENARIOS = (
    (
        "Critical Safety Issue - Fire Exit Blocked",
        dict(
            category=IssueCategory.SAFETY,
            severity=10,
            blocks_access=True,
            safety_risk=True,
            occupancy=200,
            affects_academics=True,
            current_semester=True,
            time_of_day=TimeOfDay.AFTERNOON,
        ),
        0,
    ),
    (
        "Structural Damage - Ceiling Crack",
        dict(
            category=IssueCategory.STRUCTURAL,
            severity=8,
            safety_risk=True,
            occupancy=50,
            affected_area=100,
            current_semester=True,
        ),
        0,
    ),
    (
        "AC Not Working During Exam",
        dict(
            category=IssueCategory.HVAC,
            severity=7,
            occupancy=80,
            affects_academics=True,
            exam_period=True,
            current_semester=True,
            time_of_day=TimeOfDay.MORNING,
        ),
        0,
    ),
    (
        "Recurring Network Issue",
        dict(
            category=IssueCategory.NETWORK,
            severity=6,
            is_recurring=True,
            previous_occurrences=3,
            occupancy=150,
            critical_infrastructure=True,
            escalation_rate=0.6,
        ),
        24,
    ),
    (
        "Minor Furniture Damage - Weekend",
        dict(
            category=IssueCategory.FURNITURE,
            severity=3,
            occupancy=10,
            day_of_week=DayOfWeek.WEEKEND,
            current_semester=True,
        ),
        0,
    ),
    (
        "Power Outage - Critical Infrastructure",
        dict(
            category=IssueCategory.ELECTRICAL,
            severity=9,
            critical_infrastructure=True,
            blocks_access=False,
            occupancy=300,
            affected_area=500,
            affects_academics=True,
        ),
        0,
    ),
)


def build_scenarios(now: datetime):
    """The fixed simulation suite as (name, PriorityInput) pairs."""
    return [
        (name, PriorityInput(reported_at=now - timedelta(hours=age), **fields))
        for name, fields, age in SCENARIOS
    ]
