# engines/scoring.py

import math


def clamp(value, low=0, high=100):
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    # builtin round() is banker's rounding; scores round .5 upwards
    return int(math.floor(value + 0.5))
