from __future__ import annotations

from typing import List, Tuple

from oi_analytics.analysis.volume import get_volume_confirmation

from .base import ScoreContext


def preliminary_direction(score: float, config: dict) -> str:
    thresholds = config.get("preliminary", {})
    if score >= float(thresholds.get("buy_at", 55.0)):
        return "BUY"
    if score <= float(thresholds.get("sell_at", 45.0)):
        return "SELL"
    return "NEUTRAL"


class VolumeConfirmationScorer:
    """Confirms or contradicts the direction implied by the other factors.

    Must run last: it reads ``context.running_score``.
    """

    key = "volume"
    default_weight = 1.0

    def score(self, context: ScoreContext) -> Tuple[float, str, List[str]]:
        analysis = context.volume
        direction = preliminary_direction(context.running_score, context.config)
        confirmation = get_volume_confirmation(analysis, direction)
        delta = float(confirmation.score)

        if delta > 0:
            line = f"Volume confirmation: {analysis.signal} ({analysis.confidence}% confidence)"
        elif delta < 0:
            line = f"Volume contradiction: {analysis.signal} ({analysis.confidence}% confidence)"
        else:
            line = f"Volume: {analysis.signal} -> no clear signal"
        reasons = [confirmation.description] if delta else []
        return delta, line, reasons


__all__ = ["VolumeConfirmationScorer", "preliminary_direction"]
