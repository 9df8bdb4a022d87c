"""Price-series indicators: RSI, moving averages, ATR, swing levels and trend."""

from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np
import pandas as pd

from oi_analytics.utils import round_half_up

ATR_FALLBACK = 10.0
SWING_WINDOW = 2
LEVEL_STEP = 15.0
SHORT_HISTORY_OFFSETS = (10.0, 20.0, 30.0)


def calculate_rsi(closes: Sequence[float], period: int = 14) -> float:
    """Wilder RSI; neutral 50 without ``period + 1`` closes, 100 with no losses."""

    if len(closes) < period + 1:
        return 50.0

    changes = np.diff(np.asarray(closes, dtype=float))
    gains = np.where(changes > 0, changes, 0.0)
    losses = np.where(changes > 0, 0.0, np.abs(changes))

    avg_gain = gains[:period].sum() / period
    avg_loss = losses[:period].sum() / period
    for gain, loss in zip(gains[period:], losses[period:]):
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period

    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return round_half_up(100 - 100 / (1 + rs), 2)


def rsi_signal(rsi: float) -> str:
    if rsi >= 70:
        return "OVERBOUGHT"
    if rsi <= 30:
        return "OVERSOLD"
    return "NEUTRAL"


def calculate_sma(closes: Sequence[float], period: int) -> float:
    if len(closes) < period:
        return float(closes[-1]) if len(closes) else 0.0
    window = np.asarray(closes[-period:], dtype=float)
    return round_half_up(float(window.mean()), 2)


def calculate_ema(closes: Sequence[float], period: int) -> float:
    """EMA seeded with the (rounded) SMA of the first ``period`` closes."""

    if len(closes) < period:
        return float(closes[-1]) if len(closes) else 0.0

    multiplier = 2 / (period + 1)
    ema = calculate_sma(closes[:period], period)
    for price in closes[period:]:
        ema = (float(price) - ema) * multiplier + ema
    return round_half_up(ema, 2)


def ma_trend(current_price: float, ma20: float, ma50: float, ma200: float) -> str:
    above_all = current_price > ma20 and current_price > ma50 and current_price > ma200
    below_all = current_price < ma20 and current_price < ma50 and current_price < ma200
    if above_all and ma20 > ma50 > ma200:
        return "BULLISH"
    if below_all and ma20 < ma50 < ma200:
        return "BEARISH"
    return "SIDEWAYS"


def true_range(history: pd.DataFrame) -> pd.Series:
    """True range per bar, starting from the second bar."""

    high_low = history["High"] - history["Low"]
    high_close = (history["High"] - history["Close"].shift()).abs()
    low_close = (history["Low"] - history["Close"].shift()).abs()
    ranges = pd.concat([high_low, high_close, low_close], axis=1).max(axis=1)
    return ranges.iloc[1:]


def calculate_atr(history: pd.DataFrame, period: int = 14) -> float:
    """Wilder-smoothed ATR; short series fall back to the last bar's range."""

    if len(history) < period + 1:
        if history.empty:
            return ATR_FALLBACK
        last = history.iloc[-1]
        return float(last["High"] - last["Low"])

    ranges = true_range(history).to_numpy(dtype=float)
    atr = ranges[:period].sum() / period
    for value in ranges[period:]:
        atr = (atr * (period - 1) + value) / period
    return round_half_up(atr, 2)


def volatility_level(atr: float, current_price: float) -> str:
    atr_percent = atr / current_price * 100 if current_price else 0.0
    if atr_percent > 1.5:
        return "HIGH"
    if atr_percent > 0.8:
        return "MEDIUM"
    return "LOW"


def _swing_points(values: np.ndarray, *, highs: bool) -> List[float]:
    points: List[float] = []
    for index in range(SWING_WINDOW, len(values) - SWING_WINDOW):
        center = values[index]
        neighbours = np.concatenate(
            (values[index - SWING_WINDOW:index], values[index + 1:index + 1 + SWING_WINDOW])
        )
        if highs and (center > neighbours).all():
            points.append(float(center))
        elif not highs and (center < neighbours).all():
            points.append(float(center))
    return points


def find_support_resistance(
    history: pd.DataFrame,
    current_price: float,
    num_levels: int = 3,
) -> Tuple[List[float], List[float]]:
    """Swing-based support (nearest first, below price) and resistance (above).

    Missing levels are padded in steps of 15 away from the last known level.
    """

    if len(history) < 5:
        return (
            [current_price - offset for offset in SHORT_HISTORY_OFFSETS],
            [current_price + offset for offset in SHORT_HISTORY_OFFSETS],
        )

    swing_highs = _swing_points(history["High"].to_numpy(dtype=float), highs=True)
    swing_lows = _swing_points(history["Low"].to_numpy(dtype=float), highs=False)

    support = sorted((low for low in swing_lows if low < current_price), reverse=True)[:num_levels]
    resistance = sorted(high for high in swing_highs if high > current_price)[:num_levels]

    while len(support) < num_levels:
        last = support[-1] if support else current_price
        support.append(round_half_up(last - LEVEL_STEP, 2))
    while len(resistance) < num_levels:
        last = resistance[-1] if resistance else current_price
        resistance.append(round_half_up(last + LEVEL_STEP, 2))

    return support, resistance


def analyze_trend(closes: Sequence[float], ma20: float, ma50: float, ma200: float) -> Tuple[str, int]:
    """Classify the trend from price-vs-MA position and MA alignment (0-5 points)."""

    if len(closes) < 20:
        return "SIDEWAYS", 50

    current = float(closes[-1])
    first = float(closes[0])
    price_change = (current - first) / first * 100 if first else 0.0

    score = sum(current > ma for ma in (ma20, ma50, ma200))
    score += int(ma20 > ma50) + int(ma50 > ma200)

    if score >= 5 and price_change > 2:
        return "STRONG_UP", 90
    if score >= 4:
        return "UP", 70
    if score <= 0 and price_change < -2:
        return "STRONG_DOWN", 90
    if score <= 1:
        return "DOWN", 70
    return "SIDEWAYS", 50


__all__ = [
    "analyze_trend",
    "calculate_atr",
    "calculate_ema",
    "calculate_rsi",
    "calculate_sma",
    "find_support_resistance",
    "ma_trend",
    "rsi_signal",
    "true_range",
    "volatility_level",
]
