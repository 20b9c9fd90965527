# engines/priority_engine.py

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Iterable, List, Mapping, Optional

from pydantic.alias_generators import to_camel

from models import PriorityBreakdown, PriorityInput, PriorityScore
from . import category_engine, historical_engine, impact_engine, sla_engine, urgency_engine
from .category_engine import CATEGORY_WEIGHTS, lookup
from .confidence_engine import FIELD_BONUSES, BASE_CONFIDENCE, confidence
from .reasoning_engine import build_reasoning
from .scoring import clamp, round_half_up

logger = logging.getLogger(__name__)

# breakdown field -> weight; sums to 1.00
WEIGHTS = {
    "category_score": 0.22,
    "severity_score": 0.18,
    "impact_score": 0.22,
    "urgency_score": 0.13,
    "context_score": 0.10,
    "historical_score": 0.05,
    "vote_score": 0.10,
}


def weighted_total(breakdown: PriorityBreakdown) -> int:
    raw = sum(getattr(breakdown, field) * weight for field, weight in WEIGHTS.items())
    return clamp(round_half_up(raw))


class PriorityEngine:
    """Deterministic priority scoring for reported campus issues.

    Stateless apart from the read-only category table, so one instance can be
    shared across threads and requests.
    """

    def __init__(self, weights: Mapping = CATEGORY_WEIGHTS, max_workers: Optional[int] = None):
        self.weights = weights
        self.max_workers = max_workers

    def calculate_priority(self, inp: PriorityInput, now: Optional[datetime] = None) -> PriorityScore:
        now = _aware(now)
        cat = lookup(inp.category, self.weights)

        breakdown = PriorityBreakdown(
            category_score=category_engine.category_score(inp, cat),
            severity_score=category_engine.severity_score(inp, cat),
            impact_score=impact_engine.impact_score(inp),
            urgency_score=urgency_engine.urgency_score(inp, now),
            context_score=urgency_engine.context_score(inp),
            historical_score=historical_engine.historical_score(inp),
            vote_score=historical_engine.vote_score(inp.vote_count),
        )

        score = weighted_total(breakdown)
        priority = sla_engine.score_to_priority(score)
        reasons = build_reasoning(inp, priority)

        logger.debug("scored %s issue: %s (%s)", inp.category.value, score, priority.value)

        return PriorityScore(
            score=score,
            priority=priority,
            confidence=confidence(inp),
            breakdown=breakdown,
            reasoning=[text for _, text in reasons],
            reasoning_tags=[tag for tag, _ in reasons],
            recommended_sla=sla_engine.recommended_sla(cat.sla_hours, score),
        )

    def batch_calculate(self, inputs: Iterable[PriorityInput], now: Optional[datetime] = None) -> List[PriorityScore]:
        inputs = list(inputs)
        # one clock reading for the whole batch
        now = _aware(now)

        if not self.max_workers or self.max_workers <= 1 or len(inputs) <= 1:
            return [self.calculate_priority(inp, now) for inp in inputs]

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            return list(pool.map(lambda inp: self.calculate_priority(inp, now), inputs))

    def recalculate(
        self,
        original: PriorityInput,
        patch: Optional[Mapping] = None,
        now: Optional[datetime] = None,
    ) -> PriorityScore:
        """Score ``original`` with ``patch`` fields laid over it.

        Patch keys may be attribute names (``exam_period``) or wire aliases
        (``examPeriod``). The merge is validated as ``original``'s own model,
        so a ``PriorityRequest`` keeps its range checks.
        """
        merged = original.model_dump()
        merged.update(_normalize_patch(patch or {}))
        updated = type(original).model_validate(merged)
        return self.calculate_priority(updated, now)

    def explain(self) -> dict:
        return {
            "description": "Deterministic priority scoring engine for campus infrastructure issues",
            "algorithm": {
                "weights": {to_camel(field): weight for field, weight in WEIGHTS.items()},
                "scoreRanges": {
                    "critical": "80-100",
                    "high": "60-79",
                    "medium": "40-59",
                    "low": "0-39",
                },
                "slaCeilings": {
                    f">={threshold}": hours for threshold, hours in sla_engine.SLA_CEILINGS
                },
            },
            "categoryBaselines": {
                category.value: {
                    "baseScore": w.base_score,
                    "multiplier": w.multiplier,
                    "slaHours": w.sla_hours,
                }
                for category, w in self.weights.items()
            },
            "boosters": {
                "safetyRisk": f"+{category_engine.SAFETY_RISK_BOOST} points to category",
                "criticalInfrastructure": f"+{category_engine.CRITICAL_INFRASTRUCTURE_BOOST} points to category",
                "blocksAccess": f"+{impact_engine.BLOCKS_ACCESS_POINTS} points to impact",
                "affectsAcademics": f"+{impact_engine.ACADEMIC_DISRUPTION_POINTS} points to impact",
                "highOccupancy": "Up to +40 points to impact",
                "affectedArea": "Up to +20 points to impact",
                "recurring": f"+{urgency_engine.RECURRING_BOOST} points to urgency",
                "previousOccurrences": (
                    f"+{urgency_engine.OCCURRENCE_POINTS} per occurrence to urgency, "
                    f"max +{urgency_engine.OCCURRENCE_CAP}"
                ),
                "weatherSensitive": f"+{urgency_engine.WEATHER_BOOST} points to urgency",
                "examPeriod": f"+{urgency_engine.EXAM_BOOST} points to context",
                "currentSemester": f"+{urgency_engine.SEMESTER_BOOST} points to context",
                "weekend": (
                    f"-{urgency_engine.WEEKEND_PENALTY} points to context "
                    "unless Safety/Structural or safety risk"
                ),
                "escalationRate": f"Up to +{historical_engine.ESCALATION_POINTS} points to historical",
            },
            "votes": {
                "formula": "min(cap, log10(votes + 1) * factor)",
                "factor": historical_engine.VOTE_LOG_FACTOR,
                "cap": historical_engine.VOTE_CAP,
            },
            "confidence": {
                "base": BASE_CONFIDENCE,
                "bonuses": {to_camel(field): bonus for field, bonus in FIELD_BONUSES},
            },
            "inputs": {
                "required": ["category", "reportedAt"],
                "optional": [
                    to_camel(name)
                    for name in PriorityInput.model_fields
                    if name not in ("category", "reported_at")
                ],
            },
        }


def _aware(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def _normalize_patch(patch: Mapping) -> dict:
    by_alias = {to_camel(name): name for name in PriorityInput.model_fields}
    return {by_alias.get(key, key): value for key, value in patch.items()}
