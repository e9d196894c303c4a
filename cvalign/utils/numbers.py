"""Numeric helpers shared by the scorers."""
import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (82.5 -> 83, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))
