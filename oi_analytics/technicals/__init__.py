"""Technical indicators computed from an OHLC price series."""

from .engine import OHLC_COLUMNS, TechnicalIndicatorEngine, bars_to_frame
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
from .synthetic import generate_synthetic_bars


__all__ = [
    "OHLC_COLUMNS",
    "TechnicalIndicatorEngine",
    "analyze_trend",
    "bars_to_frame",
    "calculate_atr",
    "calculate_ema",
    "calculate_rsi",
    "calculate_sma",
    "find_support_resistance",
    "generate_synthetic_bars",
    "ma_trend",
    "rsi_signal",
    "volatility_level",
]
