from __future__ import annotations

from datetime import datetime, timezone

import pandas as pd
import pytest

from oi_analytics.models import PriceBar
from oi_analytics.technicals import TechnicalIndicatorEngine, bars_to_frame, generate_synthetic_bars


def rising_history(count: int = 60) -> pd.DataFrame:
    closes = [100.0 + index for index in range(count)]
    return pd.DataFrame(
        {
            "Open": [close - 0.5 for close in closes],
            "High": [close + 1 for close in closes],
            "Low": [close - 1.5 for close in closes],
            "Close": closes,
        },
        index=pd.date_range("2025-01-01", periods=count, freq="h"),
    )


def test_engine_on_steady_uptrend():
    result = TechnicalIndicatorEngine().calculate(rising_history(), current_price=160.0)

    assert result.rsi == 100.0
    assert result.rsi_signal == "OVERBOUGHT"
    assert result.ma200 == 159.0
    assert result.ma20 > result.ma50
    assert result.price_vs_ma == {"above_ma20": True, "above_ma50": True, "above_ma200": True}
    # the last close equals the short-history ma200, so it does not count as above it
    assert result.trend == "SIDEWAYS"
    assert result.trend_strength == 50
    assert result.atr == 2.5
    assert result.atr_percent == pytest.approx(1.56)
    assert result.volatility == "HIGH"
    assert result.suggested_sl_distance == 3.75
    assert result.suggested_tp1_distance == 5.0
    assert result.suggested_tp2_distance == 7.5
    assert result.support_levels == [145.0, 130.0, 115.0]
    assert result.resistance_levels == [175.0, 190.0, 205.0]
    assert result.synthetic is False
    assert "overbought" in result.summary


def test_engine_accepts_price_bars():
    frame = rising_history(5)
    bars = [
        PriceBar(open=row.Open, high=row.High, low=row.Low, close=row.Close, timestamp=index.to_pydatetime())
        for index, row in frame.iterrows()
    ]

    assert bars_to_frame(bars)["Close"].tolist() == frame["Close"].tolist()
    result = TechnicalIndicatorEngine().calculate(bars, current_price=104.0)
    assert result.rsi == 50.0


def test_engine_rejects_missing_columns():
    with pytest.raises(ValueError):
        TechnicalIndicatorEngine().calculate(pd.DataFrame({"Close": [1.0, 2.0]}), current_price=2.0)


def test_synthetic_bars_are_reproducible_and_pinned():
    now = datetime(2025, 2, 20, 14, tzinfo=timezone.utc)

    first = generate_synthetic_bars(2750.0, seed=7, now=now)
    second = generate_synthetic_bars(2750.0, seed=7, now=now)

    pd.testing.assert_frame_equal(first, second)
    assert len(first) == 200
    assert first["Close"].iloc[-1] == 2750.0
    assert (first["High"] >= first["Low"]).all()
    assert first.index.is_monotonic_increasing


def test_synthetic_history_is_flagged():
    bars = generate_synthetic_bars(2750.0, seed=1)

    result = TechnicalIndicatorEngine().calculate(bars, current_price=2750.0, synthetic=True)

    assert result.synthetic is True
    assert len(result.support_levels) == 3
