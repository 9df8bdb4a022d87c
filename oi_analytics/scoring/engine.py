from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, List, Optional, Tuple, Type

from oi_analytics.analysis import analyze_volume, calculate_max_pain, calculate_pcr, get_liquidity_walls
from oi_analytics.models import (
    BreakdownEntry,
    FactorScores,
    KeyLevels,
    LiquidityWalls,
    MarketSnapshot,
    MaxPainResult,
    PCRResult,
    SignalFactors,
    TradingSignal,
    VolumeAnalysis,
)
from oi_analytics.utils import clamp

from .base import ScoreContext
from .config import FACTOR_ORDER, merge_config
from .flow import OIFlowScorer, net_oi_changes
from .max_pain import MaxPainScorer
from .narrative import build_reason, build_summary
from .pcr import PutCallRatioScorer
from .trend import VWAPTrendScorer
from .volume import VolumeConfirmationScorer
from .walls import WallInteractionScorer

LOGGER = logging.getLogger(__name__)

SCORER_REGISTRY = {
    PutCallRatioScorer.key: PutCallRatioScorer,
    VWAPTrendScorer.key: VWAPTrendScorer,
    OIFlowScorer.key: OIFlowScorer,
    WallInteractionScorer.key: WallInteractionScorer,
    MaxPainScorer.key: MaxPainScorer,
    VolumeConfirmationScorer.key: VolumeConfirmationScorer,
}

SENTIMENT = {"BUY": "Bullish", "SELL": "Bearish", "NEUTRAL": "Sideway"}


class CompositeSignalScorer:
    """Sums clamped factor deltas onto a base score and classifies the result."""

    def __init__(self, config: Dict[str, Any] | None = None):
        self.config = merge_config(config)
        enabled = set(self.config.get("enabled", FACTOR_ORDER))
        # Volume confirmation depends on the running score so factor order is fixed.
        self._scorers = [self._instantiate(key) for key in FACTOR_ORDER if key in enabled]

    def _instantiate(self, key: str):
        scorer_cls: Type = SCORER_REGISTRY[key]
        return scorer_cls()

    @property
    def enabled_scorers(self) -> List[str]:
        return [scorer.key for scorer in self._scorers]

    def classify(self, score: float) -> Tuple[str, str]:
        thresholds = self.config.get("signal_thresholds", {})
        if score >= thresholds.get("strong_buy", 75.0):
            return "BUY", "STRONG"
        if score >= thresholds.get("buy", 60.0):
            return "BUY", "MODERATE"
        if score >= thresholds.get("mild_buy", 55.0):
            return "BUY", "MILD"
        if score <= thresholds.get("strong_sell", 25.0):
            return "SELL", "STRONG"
        if score <= thresholds.get("sell", 40.0):
            return "SELL", "MODERATE"
        if score <= thresholds.get("mild_sell", 45.0):
            return "SELL", "MILD"
        return "NEUTRAL", "NONE"

    def score(
        self,
        snapshot: MarketSnapshot,
        *,
        walls: Optional[LiquidityWalls] = None,
        pcr: Optional[PCRResult] = None,
        max_pain: Optional[MaxPainResult] = None,
        volume: Optional[VolumeAnalysis] = None,
    ) -> TradingSignal:
        """Score one snapshot; precomputed analyses are used when supplied."""

        strikes = snapshot.strikes
        price = snapshot.current_price
        context = ScoreContext(
            snapshot=snapshot,
            walls=walls if walls is not None else get_liquidity_walls(strikes),
            pcr=pcr if pcr is not None else calculate_pcr(strikes, price),
            max_pain=max_pain if max_pain is not None else calculate_max_pain(strikes, price),
            volume=volume if volume is not None else analyze_volume(strikes, price),
            config=self.config,
            running_score=float(self.config.get("base_score", 50.0)),
        )

        total = context.running_score
        contributions: Dict[str, float] = {}
        breakdown: List[BreakdownEntry] = []
        positive: List[str] = []
        negative: List[str] = []

        for scorer in self._scorers:
            context = dataclasses.replace(context, running_score=total)
            raw_delta, line, reasons = scorer.score(context)
            weight = context.get_weight(scorer.key, getattr(scorer, "default_weight", 1.0))
            bound = context.get_bound(scorer.key, abs(raw_delta * weight))
            delta = clamp(raw_delta * weight, -bound, bound)
            total += delta
            contributions[scorer.key] = delta
            breakdown.append(BreakdownEntry(factor=scorer.key, delta=delta, description=line))
            if delta > 0:
                positive.extend(reasons)
            elif delta < 0:
                negative.extend(reasons)

        spikes = context.volume.volume_spikes
        if spikes:
            spike_info = ", ".join(f"{spike.strike:g}({spike.volume_ratio:.1f}x)" for spike in spikes[:5])
            breakdown.append(
                BreakdownEntry(factor="volume_spikes", delta=0.0, description=f"Volume spikes: {spike_info}")
            )

        bounds = self.config.get("score_bounds", {})
        total = clamp(total, float(bounds.get("min", 0.0)), float(bounds.get("max", 100.0)))
        signal, strength = self.classify(total)

        factor_scores = FactorScores(**contributions)
        net_call, net_put = net_oi_changes(context)
        wall_zone = WallInteractionScorer().zone(context)
        summary = build_summary(
            signal=signal,
            strength=strength,
            score=total,
            snapshot=snapshot,
            walls=context.walls,
            volume_pcr=context.pcr.volume_pcr,
            max_pain=context.max_pain,
            volume=context.volume,
            factor_scores=factor_scores,
            net_call_change=net_call,
            net_put_change=net_put,
            wall_zone=wall_zone,
        )

        LOGGER.debug("Composite score %.1f -> %s/%s (%s)", total, signal, strength, contributions)
        return TradingSignal(
            signal=signal,
            strength=strength,
            score=total,
            sentiment=SENTIMENT[signal],
            reason=build_reason(signal, strength),
            summary=summary,
            factors=SignalFactors(positive=positive, negative=negative),
            key_levels=KeyLevels(
                max_pain=context.max_pain.max_pain_strike,
                call_wall=context.walls.resistance.strike,
                put_wall=context.walls.support.strike,
                significant_strikes=sorted(spike.strike for spike in spikes),
            ),
            factor_scores=factor_scores,
            volume_analysis=context.volume,
            breakdown=breakdown,
        )


__all__ = ["CompositeSignalScorer", "SCORER_REGISTRY"]
