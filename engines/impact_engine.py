# engines/impact_engine.py

from models import PriorityInput
from .scoring import clamp

BLOCKS_ACCESS_POINTS = 25
ACADEMIC_DISRUPTION_POINTS = 15


def occupancy_points(occupancy) -> int:
    if not occupancy:
        return 0
    if occupancy > 100:
        return 40
    if occupancy > 50:
        return 30
    if occupancy > 20:
        return 20
    if occupancy > 5:
        return 10
    return 5


def area_points(affected_area) -> int:
    if not affected_area:
        return 0
    if affected_area > 500:
        return 20
    if affected_area > 200:
        return 15
    if affected_area > 50:
        return 10
    return 5


def impact_score(inp: PriorityInput) -> int:
    score = occupancy_points(inp.occupancy) + area_points(inp.affected_area)
    if inp.blocks_access:
        score += BLOCKS_ACCESS_POINTS
    if inp.affects_academics:
        score += ACADEMIC_DISRUPTION_POINTS
    return clamp(score)
