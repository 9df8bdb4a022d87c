from __future__ import annotations

import pytest

from oi_analytics.analysis import calculate_vwap
from oi_analytics.models import MarketSnapshot, PCRResult, StrikeRecord
from oi_analytics.scoring import CompositeSignalScorer


def build_snapshot(strikes, price: float) -> MarketSnapshot:
    return MarketSnapshot(current_price=price, vwap=calculate_vwap(strikes), strikes=strikes, product="GC")


def round_trip_snapshot() -> MarketSnapshot:
    strikes = [
        StrikeRecord(strike_price=2700, call_oi=1234, put_oi=5678, call_volume=100, put_volume=200),
        StrikeRecord(strike_price=2750, call_oi=3456, put_oi=2345, call_volume=250, put_volume=180),
        StrikeRecord(strike_price=2800, call_oi=4567, put_oi=1234, call_volume=300, put_volume=100),
    ]
    return build_snapshot(strikes, 2750.5)


def bullish_snapshot() -> MarketSnapshot:
    strikes = [
        StrikeRecord(
            strike_price=2700, call_oi=100, put_oi=5000, call_volume=1000, put_volume=10, call_oi_change=500
        ),
        StrikeRecord(
            strike_price=2750, call_oi=6000, put_oi=100, call_volume=800, put_volume=10, call_oi_change=400
        ),
    ]
    return build_snapshot(strikes, 2800.0)


def test_round_trip_snapshot_scores_moderate_sell():
    signal = CompositeSignalScorer().score(round_trip_snapshot())

    assert signal.score == 40
    assert signal.signal == "SELL"
    assert signal.strength == "MODERATE"
    assert signal.sentiment == "Bearish"
    assert signal.factor_scores.pcr == 5
    assert signal.factor_scores.vwap == -15
    assert signal.factor_scores.wall == 0
    assert signal.factor_scores.max_pain == 0
    assert signal.factor_scores.flow == 0
    assert signal.factor_scores.volume == 0
    assert [entry.factor for entry in signal.breakdown] == ["pcr", "vwap", "flow", "wall", "max_pain", "volume"]
    assert signal.key_levels.max_pain == 2750
    assert signal.key_levels.put_wall == 2700
    assert signal.key_levels.call_wall == 2800
    assert any("VWAP" in reason for reason in signal.factors.negative)
    assert any("put/call" in reason for reason in signal.factors.positive)
    assert signal.summary.startswith("Summary: solid SELL signal (score 40/100)")


def test_scoring_is_deterministic():
    scorer = CompositeSignalScorer()
    snapshot = round_trip_snapshot()

    assert scorer.score(snapshot) == scorer.score(snapshot)


def test_score_is_clamped_to_bounds():
    signal = CompositeSignalScorer().score(bullish_snapshot())

    assert signal.factor_scores.wall == 25
    assert signal.factor_scores.flow == 15
    assert signal.factor_scores.max_pain == -10
    assert signal.factor_scores.volume == 9
    assert signal.score == 100
    assert (signal.signal, signal.strength, signal.sentiment) == ("BUY", "STRONG", "Bullish")


def test_disabled_factors_are_skipped():
    scorer = CompositeSignalScorer({"enabled": ["pcr"]})

    signal = scorer.score(round_trip_snapshot())

    assert scorer.enabled_scorers == ["pcr"]
    assert signal.score == 55
    assert (signal.signal, signal.strength) == ("BUY", "MILD")
    assert signal.factor_scores.vwap == 0
    assert [entry.factor for entry in signal.breakdown] == ["pcr"]


def test_weights_scale_factor_deltas():
    signal = CompositeSignalScorer({"weights": {"vwap": 0.5}}).score(round_trip_snapshot())

    assert signal.factor_scores.vwap == -7.5
    assert signal.score == 47.5
    assert (signal.signal, signal.strength, signal.sentiment) == ("NEUTRAL", "NONE", "Sideway")


def test_weighted_delta_cannot_exceed_factor_bound():
    signal = CompositeSignalScorer({"weights": {"vwap": 2.0}}).score(round_trip_snapshot())

    assert signal.factor_scores.vwap == -15
    assert signal.score == 40


def test_precomputed_analyses_are_used():
    pcr = PCRResult(volume_pcr=0.5, total_call_volume=650, total_put_volume=325)
    signal = CompositeSignalScorer().score(round_trip_snapshot(), pcr=pcr)

    assert signal.factor_scores.pcr == 10


def test_volume_spikes_are_reported():
    strikes = [StrikeRecord(strike_price=2600 + 10 * i, call_volume=5, put_volume=5) for i in range(10)]
    strikes.append(StrikeRecord(strike_price=2760, call_volume=300, put_volume=100))

    signal = CompositeSignalScorer().score(build_snapshot(strikes, 2750.0))

    assert signal.breakdown[-1].factor == "volume_spikes"
    assert signal.breakdown[-1].delta == 0
    assert "2760" in signal.breakdown[-1].description
    assert signal.key_levels.significant_strikes == [2760]
    assert "notable volume spikes" in signal.summary


@pytest.mark.parametrize(
    "score, expected",
    [
        (100, ("BUY", "STRONG")),
        (75, ("BUY", "STRONG")),
        (60, ("BUY", "MODERATE")),
        (55, ("BUY", "MILD")),
        (54.9, ("NEUTRAL", "NONE")),
        (45.1, ("NEUTRAL", "NONE")),
        (45, ("SELL", "MILD")),
        (40, ("SELL", "MODERATE")),
        (25, ("SELL", "STRONG")),
        (0, ("SELL", "STRONG")),
    ],
)
def test_classification_thresholds(score, expected):
    assert CompositeSignalScorer().classify(score) == expected


def test_reweighted_breakout_is_still_described_as_a_breakout():
    signal = CompositeSignalScorer({"weights": {"wall": 0.8}}).score(bullish_snapshot())

    assert signal.factor_scores.wall == 20
    assert "+ Breakout above the call wall at 2750." in signal.summary
    assert "near the put wall" not in signal.summary


def test_empty_chain_scores_neutral():
    signal = CompositeSignalScorer().score(MarketSnapshot(current_price=2750, strikes=[]))

    assert signal.factor_scores.pcr == 0
    assert signal.score == 50
    assert (signal.signal, signal.strength) == ("NEUTRAL", "NONE")
    assert signal.factors.positive == []
    assert "unavailable" in signal.breakdown[0].description


def test_chain_without_volume_does_not_read_as_bullish_pcr():
    strikes = [
        StrikeRecord(strike_price=2700, call_oi=1234, put_oi=5678),
        StrikeRecord(strike_price=2750, call_oi=3456, put_oi=2345),
        StrikeRecord(strike_price=2800, call_oi=4567, put_oi=1234),
    ]

    signal = CompositeSignalScorer().score(build_snapshot(strikes, 2750.5))

    assert signal.factor_scores.pcr == 0
    assert signal.breakdown[0].factor == "pcr"
    assert "unavailable" in signal.breakdown[0].description
    assert signal.signal == "NEUTRAL"
