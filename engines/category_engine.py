# engines/category_engine.py

from dataclasses import dataclass
from types import MappingProxyType

from models import IssueCategory, PriorityInput
from .scoring import clamp, round_half_up

CRITICAL_INFRASTRUCTURE_BOOST = 15
SAFETY_RISK_BOOST = 20
DEFAULT_SEVERITY = 5


@dataclass(frozen=True)
class CategoryWeights:
    base_score: int
    multiplier: float
    sla_hours: int


# Read-only after import; shared by every engine instance
CATEGORY_WEIGHTS = MappingProxyType({
    IssueCategory.SAFETY: CategoryWeights(85, 1.5, 2),
    IssueCategory.STRUCTURAL: CategoryWeights(80, 1.4, 4),
    IssueCategory.ELECTRICAL: CategoryWeights(70, 1.3, 8),
    IssueCategory.PLUMBING: CategoryWeights(65, 1.2, 12),
    IssueCategory.HVAC: CategoryWeights(50, 1.1, 24),
    IssueCategory.NETWORK: CategoryWeights(45, 1.15, 16),
    IssueCategory.MAINTENANCE: CategoryWeights(40, 1.0, 48),
    IssueCategory.CLEANLINESS: CategoryWeights(30, 0.9, 24),
    IssueCategory.FURNITURE: CategoryWeights(25, 0.8, 72),
    IssueCategory.OTHER: CategoryWeights(35, 1.0, 48),
})


def lookup(category, table=CATEGORY_WEIGHTS) -> CategoryWeights:
    """Weights for ``category``; unknown categories use the OTHER entry."""
    weights = table.get(IssueCategory(category))
    if weights is None:
        return table[IssueCategory.OTHER]
    return weights


def category_score(inp: PriorityInput, weights: CategoryWeights) -> int:
    score = weights.base_score
    if inp.critical_infrastructure:
        score += CRITICAL_INFRASTRUCTURE_BOOST
    if inp.safety_risk:
        score += SAFETY_RISK_BOOST
    return clamp(score)


def severity_score(inp: PriorityInput, weights: CategoryWeights) -> int:
    severity = inp.severity or DEFAULT_SEVERITY
    return clamp(round_half_up(severity * 10 * weights.multiplier))
