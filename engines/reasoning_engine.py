# engines/reasoning_engine.py

from typing import List, Tuple

from models import IssueCategory, IssuePriority, PriorityInput, ReasonTag

HIGH_OCCUPANCY = 50
HIGH_ESCALATION = 0.5

Reason = Tuple[ReasonTag, str]


def vote_reason(vote_count: int) -> Reason:
    if vote_count >= 20:
        return ReasonTag.VOTES_STRONG, (
            f"🔥 Strong community support ({vote_count} votes) - Widely recognized issue"
        )
    if vote_count >= 10:
        return ReasonTag.VOTES_SIGNIFICANT, (
            f"📈 Community voted ({vote_count} votes) - Significant concern"
        )
    if vote_count >= 5:
        return ReasonTag.VOTES_VALIDATED, (
            f"✋ Community support ({vote_count} votes) - Validated concern"
        )
    plural = "" if vote_count == 1 else "s"
    return ReasonTag.VOTES_SOME, f"👍 Community support ({vote_count} vote{plural})"


TIER_REASONS = {
    IssuePriority.CRITICAL: (
        ReasonTag.TIER_CRITICAL, "⚠️ CRITICAL priority - Immediate attention required"
    ),
    IssuePriority.HIGH: (
        ReasonTag.TIER_HIGH, "🔴 HIGH priority - Address within SLA window"
    ),
    IssuePriority.MEDIUM: (
        ReasonTag.TIER_MEDIUM, "🟡 MEDIUM priority - Schedule for resolution"
    ),
    IssuePriority.LOW: (
        ReasonTag.TIER_LOW, "🟢 LOW priority - Address when resources available"
    ),
}


def build_reasoning(inp: PriorityInput, priority: IssuePriority) -> List[Reason]:
    """Ordered (tag, text) pairs explaining a score.

    The order is fixed; the last entry is always the tier summary.
    """
    reasons: List[Reason] = []

    if inp.category in (IssueCategory.SAFETY, IssueCategory.STRUCTURAL):
        reasons.append((
            ReasonTag.SAFETY_CATEGORY,
            f"{inp.category.value} issues are inherently high-priority due to safety concerns",
        ))

    if inp.safety_risk:
        reasons.append((ReasonTag.SAFETY_RISK, "Immediate safety risk identified (+20 points)"))

    if inp.occupancy and inp.occupancy > HIGH_OCCUPANCY:
        reasons.append((
            ReasonTag.HIGH_OCCUPANCY,
            f"High occupancy area ({inp.occupancy} people affected)",
        ))

    if inp.blocks_access:
        reasons.append((ReasonTag.BLOCKS_ACCESS, "Blocks access to critical area (+25 points)"))

    if inp.affects_academics:
        reasons.append((ReasonTag.ACADEMIC_DISRUPTION, "Disrupts academic activities (+15 points)"))

    if inp.is_recurring:
        reasons.append((
            ReasonTag.RECURRING,
            f"Recurring issue ({inp.previous_occurrences or 0} previous occurrences)",
        ))

    if inp.exam_period:
        reasons.append((ReasonTag.EXAM_PERIOD, "Exam period - elevated priority (+30 points)"))

    if inp.critical_infrastructure:
        reasons.append((
            ReasonTag.CRITICAL_INFRASTRUCTURE,
            "Critical infrastructure affected (+15 points)",
        ))

    if inp.escalation_rate and inp.escalation_rate > HIGH_ESCALATION:
        reasons.append((
            ReasonTag.HIGH_ESCALATION,
            f"High escalation rate ({inp.escalation_rate * 100:.0f}% of similar issues escalated)",
        ))

    if inp.vote_count and inp.vote_count > 0:
        reasons.append(vote_reason(inp.vote_count))

    reasons.append(TIER_REASONS[priority])
    return reasons
