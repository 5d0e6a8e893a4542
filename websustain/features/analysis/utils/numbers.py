import math
from typing import Any


def round_half_up(value: float) -> int:
    """Nearest integer, .5 rounding towards +inf (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    """Round and clamp to the 0-100 score range."""
    return max(0, min(100, round_half_up(value)))


def to_number(value: Any, default: float = 0.0) -> float:
    """Tolerant numeric read for loosely-typed JSON; anything unusable is `default`."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def safe_ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0


def round_to(value: float, digits: int) -> float:
    """Half-up rounding to a number of decimal places."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor
