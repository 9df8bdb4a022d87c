from __future__ import annotations

import pytest

from oi_analytics.models import (
    FactorScores,
    LiquidityWalls,
    MarketSnapshot,
    MaxPainResult,
    ResistanceWall,
    SupportWall,
    VolumeAnalysis,
)
from oi_analytics.scoring.narrative import REASONS, build_reason, build_summary


def summary_for(
    signal: str, strength: str, score: float, factor_scores: FactorScores, wall_zone: str = "mid_range"
) -> str:
    return build_summary(
        signal=signal,
        strength=strength,
        score=score,
        snapshot=MarketSnapshot(current_price=2750.5, vwap=2754.42),
        walls=LiquidityWalls(
            support=SupportWall(strike=2700, put_oi=5678, strength=5),
            resistance=ResistanceWall(strike=2800, call_oi=4567, strength=5),
        ),
        volume_pcr=0.74,
        max_pain=MaxPainResult(max_pain_strike=2750),
        volume=VolumeAnalysis(signal="NEUTRAL", confidence=60, volume_pcr=0.74),
        factor_scores=factor_scores,
        net_call_change=0,
        net_put_change=0,
        wall_zone=wall_zone,
    )


@pytest.mark.parametrize("key", sorted(REASONS))
def test_every_classification_has_a_reason(key):
    assert build_reason(*key)


def test_summary_explains_each_nonzero_factor():
    summary = summary_for("SELL", "MODERATE", 40, FactorScores(pcr=5, vwap=-15))

    assert summary.startswith("Summary: solid SELL signal (score 40/100)")
    assert "+ Traders are buying more calls than puts." in summary
    assert "-> PCR 0.74 (low, bullish)" in summary
    assert "- Price is below the volume-weighted average strike (VWAP)." in summary
    assert "  * Put wall (support): 2700" in summary
    assert "  * Call wall (resistance): 2800" in summary
    assert "  * Max pain: 2750" in summary
    assert "40/100 = medium, some factors disagree" in summary
    assert "Consider selling with a stop above resistance 2800." in summary
    assert "call wall at" not in summary


def test_summary_for_neutral_signal_suggests_waiting():
    summary = summary_for("NEUTRAL", "NONE", 50, FactorScores())

    assert summary.startswith("Summary: SIDEWAYS (score 50/100)")
    assert "50/100 = low, factors are balanced" in summary
    assert "Watch for a break above 2800 or below 2700." in summary


def test_summary_is_deterministic():
    scores = FactorScores(pcr=10, vwap=15, wall=25, flow=15)

    first = summary_for("BUY", "STRONG", 100, scores, wall_zone="breakout")

    assert first == summary_for("BUY", "STRONG", 100, scores, wall_zone="breakout")
    assert "+ Breakout above the call wall at 2800." in first


@pytest.mark.parametrize(
    "zone, wall_score, expected",
    [
        ("breakout", 20, "+ Breakout above the call wall at 2800."),
        ("near_support", 25, "+ Price is near the put wall at 2700 (5,678 puts open); writers defend it."),
        ("breakdown", -20, "- Breakdown below the put wall at 2700."),
        ("near_resistance", -25, "- Price is near the call wall at 2800 (4,567 calls open); writers cap it."),
    ],
)
def test_wall_line_follows_the_matched_rule_not_the_delta_size(zone, wall_score, expected):
    summary = summary_for("NEUTRAL", "NONE", 50, FactorScores(wall=wall_score), wall_zone=zone)

    assert expected in summary


def test_wall_line_is_omitted_when_the_factor_contributed_nothing():
    summary = summary_for("NEUTRAL", "NONE", 50, FactorScores(), wall_zone="breakout")

    assert "Breakout" not in summary
