from __future__ import annotations

import pandas as pd
import pytest

from oi_analytics.technicals import (
    analyze_trend,
    calculate_atr,
    calculate_ema,
    calculate_rsi,
    calculate_sma,
    find_support_resistance,
    ma_trend,
    rsi_signal,
    volatility_level,
)


def flat_bars(count: int) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Open": [100.0] * count,
            "High": [101.0] * count,
            "Low": [99.0] * count,
            "Close": [100.0] * count,
        }
    )


def test_rsi_extremes_and_short_series():
    assert calculate_rsi([float(value) for value in range(100, 116)]) == 100.0
    assert calculate_rsi([float(value) for value in range(116, 100, -1)]) == 0.0
    assert calculate_rsi([100.0, 101.0]) == 50.0


def test_rsi_balanced_moves_are_neutral():
    closes = [100.0 if index % 2 == 0 else 101.0 for index in range(15)]

    assert calculate_rsi(closes) == 50.0
    assert rsi_signal(50.0) == "NEUTRAL"
    assert rsi_signal(70.0) == "OVERBOUGHT"
    assert rsi_signal(30.0) == "OVERSOLD"


def test_moving_averages():
    assert calculate_sma([1.0, 2.0, 3.0, 4.0], 2) == 3.5
    assert calculate_sma([5.0], 20) == 5.0
    assert calculate_sma([], 20) == 0.0
    assert calculate_ema([10.0, 10.0, 10.0, 20.0], 3) == 15.0
    assert calculate_ema([7.0, 8.0], 3) == 8.0


def test_ma_trend_requires_price_and_alignment():
    assert ma_trend(110, 105, 100, 95) == "BULLISH"
    assert ma_trend(90, 95, 100, 105) == "BEARISH"
    assert ma_trend(110, 100, 105, 95) == "SIDEWAYS"


def test_atr_on_constant_range():
    assert calculate_atr(flat_bars(20)) == 2.0


def test_atr_short_series_and_empty_fallbacks():
    assert calculate_atr(flat_bars(3)) == 2.0
    assert calculate_atr(pd.DataFrame(columns=["Open", "High", "Low", "Close"])) == 10.0


def test_volatility_buckets():
    assert volatility_level(50, 2750) == "HIGH"
    assert volatility_level(25, 2750) == "MEDIUM"
    assert volatility_level(10, 2750) == "LOW"


def test_support_resistance_from_swings_with_padding():
    highs = [10.0, 11.0, 15.0, 11.0, 10.0, 12.0, 18.0, 12.0, 10.0]
    history = pd.DataFrame(
        {
            "Open": highs,
            "High": highs,
            "Low": [value - 2 for value in highs],
            "Close": highs,
        }
    )

    support, resistance = find_support_resistance(history, current_price=13.0)

    assert resistance == [15.0, 18.0, 33.0]
    assert support == [8.0, -7.0, -22.0]


def test_support_resistance_short_history_uses_fixed_offsets():
    support, resistance = find_support_resistance(flat_bars(3), current_price=2750.0)

    assert support == [2740.0, 2730.0, 2720.0]
    assert resistance == [2760.0, 2770.0, 2780.0]


@pytest.mark.parametrize(
    "closes, mas, expected",
    [
        ([100.0 + index for index in range(30)], (120, 110, 100), ("STRONG_UP", 90)),
        ([130.0 - index for index in range(30)], (110, 120, 130), ("STRONG_DOWN", 90)),
        ([100.0] * 30, (100, 100, 100), ("DOWN", 70)),
        ([100.0] * 10, (90, 80, 70), ("SIDEWAYS", 50)),
    ],
)
def test_analyze_trend(closes, mas, expected):
    assert analyze_trend(closes, *mas) == expected
