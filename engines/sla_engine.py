# engines/sla_engine.py

from models import IssuePriority

# (min score, tier) checked top-down
TIER_THRESHOLDS = (
    (80, IssuePriority.CRITICAL),
    (60, IssuePriority.HIGH),
    (40, IssuePriority.MEDIUM),
)

# (min score, max SLA hours); below 50 the category baseline stands
SLA_CEILINGS = (
    (90, 2),
    (80, 4),
    (70, 8),
    (60, 12),
    (50, 24),
)


def score_to_priority(score: int) -> IssuePriority:
    for threshold, tier in TIER_THRESHOLDS:
        if score >= threshold:
            return tier
    return IssuePriority.LOW


def recommended_sla(baseline_hours: int, score: int) -> int:
    for threshold, ceiling in SLA_CEILINGS:
        if score >= threshold:
            return min(baseline_hours, ceiling)
    return baseline_hours
