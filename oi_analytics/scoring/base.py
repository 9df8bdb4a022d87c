from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Protocol, Tuple

from oi_analytics.models import LiquidityWalls, MarketSnapshot, MaxPainResult, PCRResult, VolumeAnalysis


@dataclass(frozen=True)
class ScoreContext:
    """Information passed to each factor scorer."""

    snapshot: MarketSnapshot
    walls: LiquidityWalls
    pcr: PCRResult
    max_pain: MaxPainResult
    volume: VolumeAnalysis
    config: Dict[str, Any]
    running_score: float = 50.0

    def get_weight(self, factor_key: str, default: float) -> float:
        return float(self.config.get("weights", {}).get(factor_key, default))

    def get_bound(self, factor_key: str, default: float) -> float:
        return float(self.config.get("factor_bounds", {}).get(factor_key, default))

    def section(self, factor_key: str) -> Dict[str, Any]:
        return dict(self.config.get(factor_key, {}))


class FactorScorer(Protocol):
    """Protocol each scoring factor must implement."""

    key: str
    default_weight: float

    def score(self, context: ScoreContext) -> Tuple[float, str, List[str]]:
        """Return the raw delta, a breakdown line and narrative reasons."""
