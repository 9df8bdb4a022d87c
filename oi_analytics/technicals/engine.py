from __future__ import annotations

import logging
from typing import Iterable, List, Union

import pandas as pd

from oi_analytics.models import PriceBar, TechnicalIndicators
from oi_analytics.utils import round_half_up

from .indicators import (
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

LOGGER = logging.getLogger(__name__)

OHLC_COLUMNS = ["Open", "High", "Low", "Close"]

PriceHistory = Union[pd.DataFrame, Iterable[PriceBar]]


def bars_to_frame(bars: Iterable[PriceBar]) -> pd.DataFrame:
    rows = [
        {"Open": bar.open, "High": bar.high, "Low": bar.low, "Close": bar.close, "timestamp": bar.timestamp}
        for bar in bars
    ]
    if not rows:
        return pd.DataFrame(columns=OHLC_COLUMNS)
    frame = pd.DataFrame(rows)
    if frame["timestamp"].notna().all():
        frame = frame.set_index("timestamp")
    return frame[OHLC_COLUMNS]


class TechnicalIndicatorEngine:
    """Compute the technical snapshot for a chronological OHLC history."""

    def __init__(
        self,
        *,
        rsi_period: int = 14,
        atr_period: int = 14,
        fast_ma: int = 20,
        slow_ma: int = 50,
        long_ma: int = 200,
        sr_levels: int = 3,
    ) -> None:
        self.rsi_period = rsi_period
        self.atr_period = atr_period
        self.fast_ma = fast_ma
        self.slow_ma = slow_ma
        self.long_ma = long_ma
        self.sr_levels = sr_levels

    def calculate(
        self,
        history: PriceHistory,
        current_price: float,
        *,
        synthetic: bool = False,
    ) -> TechnicalIndicators:
        frame = history if isinstance(history, pd.DataFrame) else bars_to_frame(history)
        missing = [column for column in OHLC_COLUMNS if column not in frame.columns]
        if missing:
            raise ValueError(f"Price history is missing required columns: {missing}")
        frame = frame.dropna(subset=OHLC_COLUMNS)
        closes: List[float] = frame["Close"].astype(float).tolist()

        rsi = calculate_rsi(closes, self.rsi_period)
        ma20 = calculate_ema(closes, self.fast_ma)
        ma50 = calculate_ema(closes, self.slow_ma)
        ma200 = calculate_sma(closes, self.long_ma)
        trend_of_mas = ma_trend(current_price, ma20, ma50, ma200)

        atr = calculate_atr(frame, self.atr_period)
        atr_percent = atr / current_price * 100 if current_price else 0.0
        volatility = volatility_level(atr, current_price)

        support, resistance = find_support_resistance(frame, current_price, self.sr_levels)
        trend, trend_strength = analyze_trend(closes, ma20, ma50, ma200)
        signal = rsi_signal(rsi)

        LOGGER.debug(
            "Technicals over %d bars: rsi=%.2f atr=%.2f trend=%s synthetic=%s",
            len(frame),
            rsi,
            atr,
            trend,
            synthetic,
        )
        return TechnicalIndicators(
            rsi=rsi,
            rsi_signal=signal,
            ma20=ma20,
            ma50=ma50,
            ma200=ma200,
            ma_trend=trend_of_mas,
            price_vs_ma={
                "above_ma20": current_price > ma20,
                "above_ma50": current_price > ma50,
                "above_ma200": current_price > ma200,
            },
            atr=atr,
            atr_percent=round_half_up(atr_percent, 2),
            volatility=volatility,
            suggested_sl_distance=round_half_up(atr * 1.5, 2),
            suggested_tp1_distance=round_half_up(atr * 2, 2),
            suggested_tp2_distance=round_half_up(atr * 3, 2),
            support_levels=support,
            resistance_levels=resistance,
            trend=trend,
            trend_strength=trend_strength,
            summary=build_technical_summary(rsi, signal, trend_of_mas, volatility, support, resistance),
            synthetic=synthetic,
        )


def build_technical_summary(
    rsi: float,
    signal: str,
    trend_of_mas: str,
    volatility: str,
    support: List[float],
    resistance: List[float],
) -> str:
    parts = []
    if signal == "OVERBOUGHT":
        parts.append(f"RSI {rsi:g} (overbought, pullback risk)")
    elif signal == "OVERSOLD":
        parts.append(f"RSI {rsi:g} (oversold, bounce risk)")
    else:
        parts.append(f"RSI {rsi:g} (neutral)")

    parts.append(
        {
            "BULLISH": "MA trend: bullish, price above all averages",
            "BEARISH": "MA trend: bearish, price below all averages",
        }.get(trend_of_mas, "MA trend: sideways, price inside the averages")
    )
    if support:
        parts.append(f"Nearest support: {support[0]:g}")
    if resistance:
        parts.append(f"Nearest resistance: {resistance[0]:g}")
    parts.append(f"Volatility: {volatility}")
    return " | ".join(parts)


__all__ = ["OHLC_COLUMNS", "TechnicalIndicatorEngine", "bars_to_frame", "build_technical_summary"]
