from __future__ import annotations

from typing import List, Tuple

from .base import ScoreContext


class PutCallRatioScorer:
    key = "pcr"
    default_weight = 1.0

    def score(self, context: ScoreContext) -> Tuple[float, str, List[str]]:
        settings = context.section(self.key)
        ratio = context.pcr.volume_pcr
        if context.pcr.total_call_volume <= 0:
            return 0.0, "Volume PCR unavailable (no call volume) -> sentiment skipped", []
        strong = float(settings.get("strong_delta", 10.0))
        mild = float(settings.get("mild_delta", 5.0))

        if ratio < settings.get("strong_bullish_below", 0.6):
            return (
                strong,
                f"PCR {ratio:.2f} < {settings.get('strong_bullish_below', 0.6)} -> bullish sentiment",
                [f"Very low put/call ratio ({ratio:.2f}): call buying clearly dominates"],
            )
        if ratio < settings.get("bullish_below", 0.8):
            return (
                mild,
                f"PCR {ratio:.2f} < {settings.get('bullish_below', 0.8)} -> mild bullish",
                [f"Low put/call ratio ({ratio:.2f}) leans bullish"],
            )
        if ratio > settings.get("strong_bearish_above", 1.2):
            return (
                -strong,
                f"PCR {ratio:.2f} > {settings.get('strong_bearish_above', 1.2)} -> bearish sentiment",
                [f"Very high put/call ratio ({ratio:.2f}): put buying clearly dominates"],
            )
        if ratio > settings.get("bearish_above", 1.0):
            return (
                -mild,
                f"PCR {ratio:.2f} > {settings.get('bearish_above', 1.0)} -> mild bearish",
                [f"High put/call ratio ({ratio:.2f}) leans bearish"],
            )
        return 0.0, f"PCR {ratio:.2f} -> neutral", []


__all__ = ["PutCallRatioScorer"]
