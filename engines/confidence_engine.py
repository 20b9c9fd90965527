# engines/confidence_engine.py

from models import PriorityInput

BASE_CONFIDENCE = 0.5

# field -> bonus when the caller supplied it (None means absent)
FIELD_BONUSES = (
    ("severity", 0.1),
    ("occupancy", 0.1),
    ("affected_area", 0.05),
    ("avg_resolution_time", 0.1),
    ("escalation_rate", 0.1),
    ("previous_occurrences", 0.05),
)


def confidence(inp: PriorityInput) -> float:
    value = BASE_CONFIDENCE
    for field, bonus in FIELD_BONUSES:
        if getattr(inp, field) is not None:
            value += bonus
    return round(max(0.0, min(1.0, value)), 2)
