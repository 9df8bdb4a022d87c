from __future__ import annotations

from typing import List, Tuple

from .base import ScoreContext


class VWAPTrendScorer:
    """Price relative to the volume-weighted average strike."""

    key = "vwap"
    default_weight = 1.0

    def score(self, context: ScoreContext) -> Tuple[float, str, List[str]]:
        price = context.snapshot.current_price
        vwap = context.snapshot.vwap
        delta = float(context.section(self.key).get("delta", 15.0))

        if price <= 0 or vwap <= 0:
            return 0.0, "VWAP unavailable -> trend skipped", []

        diff_pct = (price - vwap) / vwap * 100
        if price > vwap:
            return (
                delta,
                f"Price {price:.1f} > VWAP {vwap:.1f} -> bullish trend",
                [f"Price trades above VWAP (+{diff_pct:.2f}%): buyers are in control"],
            )
        if price < vwap:
            return (
                -delta,
                f"Price {price:.1f} < VWAP {vwap:.1f} -> bearish trend",
                [f"Price trades below VWAP ({diff_pct:.2f}%): sellers are in control"],
            )
        return 0.0, "Price = VWAP -> neutral trend", []


__all__ = ["VWAPTrendScorer"]
