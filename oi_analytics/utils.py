from __future__ import annotations

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round ``value`` to ``digits`` places with ties moving towards +inf.

    Python's built-in ``round`` uses banker's rounding which would flip
    threshold comparisons on exact halves (e.g. a ratio of 0.745).
    """

    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def within_band(strike: float, price: float, pct: float) -> bool:
    """Return True when ``strike`` sits inside ``price`` +/- ``pct`` percent."""

    if price <= 0:
        return False
    return abs(strike - price) <= price * pct / 100.0


def safe_ratio(numerator: float, denominator: float, default: float = 0.0) -> float:
    return numerator / denominator if denominator else default


__all__ = ["clamp", "round_half_up", "safe_ratio", "within_band"]
