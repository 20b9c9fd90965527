# engines/historical_engine.py

import math

from models import PriorityInput
from .scoring import clamp, round_half_up

BASE_SCORE = 50
ESCALATION_POINTS = 30

VOTE_LOG_FACTOR = 33
VOTE_CAP = 70


def resolution_time_points(avg_resolution_time) -> int:
    if not avg_resolution_time:
        return 0
    if avg_resolution_time > 72:
        return 20
    if avg_resolution_time > 48:
        return 15
    if avg_resolution_time > 24:
        return 10
    return 5


def cost_points(historical_cost_avg) -> int:
    if not historical_cost_avg:
        return 0
    if historical_cost_avg > 50000:
        return 15
    if historical_cost_avg > 20000:
        return 10
    if historical_cost_avg > 5000:
        return 5
    return 0


def historical_score(inp: PriorityInput) -> float:
    score = BASE_SCORE
    if inp.escalation_rate:
        score += inp.escalation_rate * ESCALATION_POINTS
    score += resolution_time_points(inp.avg_resolution_time)
    score += cost_points(inp.historical_cost_avg)
    return clamp(score)


def vote_score(vote_count) -> int:
    """Community votes with diminishing returns.

    1 vote ~ 10, 10 votes ~ 33, 100 votes ~ 67; capped at 70 so votes alone
    never outweigh safety or infrastructure signals.
    """
    if not vote_count or vote_count <= 0:
        return 0
    return round_half_up(min(VOTE_CAP, math.log10(vote_count + 1) * VOTE_LOG_FACTOR))
