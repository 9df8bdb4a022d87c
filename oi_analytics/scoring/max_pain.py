from __future__ import annotations

from typing import List, Tuple

from .base import ScoreContext


class MaxPainScorer:
    key = "max_pain"
    default_weight = 1.0

    def score(self, context: ScoreContext) -> Tuple[float, str, List[str]]:
        settings = context.section(self.key)
        threshold = float(settings.get("distance_pct", 2.0))
        delta = float(settings.get("delta", 10.0))
        strike = context.max_pain.max_pain_strike
        distance = context.max_pain.distance_percent

        if distance > threshold:
            return (
                delta,
                f"Max pain {strike:g} is {distance:.1f}% above price -> upward magnet",
                [f"Max pain {strike:g} sits {distance:.1f}% above price and pulls it higher"],
            )
        if distance < -threshold:
            return (
                -delta,
                f"Max pain {strike:g} is {abs(distance):.1f}% below price -> downward magnet",
                [f"Max pain {strike:g} sits {abs(distance):.1f}% below price and pulls it lower"],
            )
        return 0.0, f"Price near max pain {strike:g} ({distance:.1f}%) -> sideways expected", []


__all__ = ["MaxPainScorer"]
