from __future__ import annotations

from typing import List

from oi_analytics.models import TechnicalIndicators, TradingSignal

SYNTHETIC_NOTICE = "Technicals computed from a synthetic price series; treat them as placeholders."


def technical_warnings(signal: str, technicals: TechnicalIndicators) -> List[str]:
    warnings: List[str] = []
    if technicals.rsi_signal == "OVERBOUGHT" and signal == "BUY":
        warnings.append(f"RSI overbought ({technicals.rsi:g}): price may pause or pull back.")
    if technicals.rsi_signal == "OVERSOLD" and signal == "SELL":
        warnings.append(f"RSI oversold ({technicals.rsi:g}): price may bounce.")
    if technicals.volatility == "HIGH":
        warnings.append(
            f"High volatility (ATR {technicals.atr:g}, {technicals.atr_percent:g}%): use a wider stop loss."
        )
    if technicals.synthetic:
        warnings.append(SYNTHETIC_NOTICE)
    return warnings


def apply_technical_warnings(signal: TradingSignal, technicals: TechnicalIndicators) -> TradingSignal:
    """Attach technicals to ``signal`` and append the warnings they raise.

    The score and classification are left untouched.
    """

    warnings = list(signal.warnings) + technical_warnings(signal.signal, technicals)
    return signal.model_copy(update={"technicals": technicals, "warnings": warnings})


__all__ = ["SYNTHETIC_NOTICE", "apply_technical_warnings", "technical_warnings"]
