"""Plain-English explanation of a scored signal.

The text is a pure function of the scoring inputs so identical snapshots
always produce identical summaries.
"""

from __future__ import annotations

from typing import List

from oi_analytics.models import FactorScores, LiquidityWalls, MarketSnapshot, MaxPainResult, VolumeAnalysis

REASONS = {
    ("BUY", "STRONG"): "Strong buy: most factors point higher (low PCR, price above VWAP, call inflows, support nearby).",
    ("BUY", "MODERATE"): "Several factors lean bullish: the options market points higher.",
    ("BUY", "MILD"): "Slight bullish tilt from the options data.",
    ("SELL", "STRONG"): "Strong sell: most factors point lower (high PCR, price below VWAP, put inflows, resistance nearby).",
    ("SELL", "MODERATE"): "Several factors lean bearish: the options market points lower.",
    ("SELL", "MILD"): "Slight bearish tilt from the options data.",
    ("NEUTRAL", "NONE"): "Mixed signals: no clear direction, wait for confirmation before trading.",
}

# Keyed by the zone name returned from ``scoring.walls.locate_price``.
WALL_LINES = {
    "breakout": "Breakout above the call wall at {resistance.strike:g}.",
    "breakdown": "Breakdown below the put wall at {support.strike:g}.",
    "near_support": (
        "Price is near the put wall at {support.strike:g} ({support.put_oi:,.0f} puts open); writers defend it."
    ),
    "near_resistance": (
        "Price is near the call wall at {resistance.strike:g} ({resistance.call_oi:,.0f} calls open); writers cap it."
    ),
}


def build_reason(signal: str, strength: str) -> str:
    return REASONS[(signal, strength)]


def _opening(signal: str, strength: str, score: float) -> List[str]:
    label = f"(score {score:g}/100)"
    if signal == "BUY":
        return {
            "STRONG": [f"Summary: clear BUY signal {label}", "Options positioning is strongly bullish for the short term."],
            "MODERATE": [f"Summary: solid BUY signal {label}", "Several factors support upside; watch for reversals."],
        }.get(strength, [f"Summary: weak BUY signal {label}", "A slight upward tilt; wait for further confirmation."])
    if signal == "SELL":
        return {
            "STRONG": [f"Summary: clear SELL signal {label}", "Options positioning is strongly bearish for the short term."],
            "MODERATE": [f"Summary: solid SELL signal {label}", "Several factors support downside; watch for reversals."],
        }.get(strength, [f"Summary: weak SELL signal {label}", "A slight downward tilt; wait for further confirmation."])
    return [
        f"Summary: SIDEWAYS {label}",
        "No clear direction yet; bullish and bearish factors are roughly balanced.",
    ]


def build_summary(
    *,
    signal: str,
    strength: str,
    score: float,
    snapshot: MarketSnapshot,
    walls: LiquidityWalls,
    volume_pcr: float,
    max_pain: MaxPainResult,
    volume: VolumeAnalysis,
    factor_scores: FactorScores,
    net_call_change: float,
    net_put_change: float,
    wall_zone: str = "mid_range",
) -> str:
    price = snapshot.current_price
    vwap = snapshot.vwap
    lines = _opening(signal, strength, score)
    lines += ["", "Why:", ""]

    if factor_scores.pcr > 0:
        lines.append("+ Traders are buying more calls than puts.")
        lines.append(f"  -> PCR {volume_pcr:.2f} ({'very low' if volume_pcr < 0.6 else 'low'}, bullish)")
        lines.append("")
    elif factor_scores.pcr < 0:
        lines.append("- Traders are buying more puts than calls (bearish bets or hedging).")
        lines.append(f"  -> PCR {volume_pcr:.2f} ({'very high' if volume_pcr > 1.2 else 'high'}, bearish)")
        lines.append("")

    if factor_scores.vwap and vwap > 0:
        diff = (price - vwap) / vwap * 100
        if factor_scores.vwap > 0:
            lines.append("+ Price is above the volume-weighted average strike (VWAP).")
            lines.append(f"  -> {price:.1f} vs VWAP {vwap:.1f} ({diff:+.2f}%)")
        else:
            lines.append("- Price is below the volume-weighted average strike (VWAP).")
            lines.append(f"  -> {price:.1f} vs VWAP {vwap:.1f} ({diff:+.2f}%)")
        lines.append("")

    if factor_scores.flow > 0:
        lines.append("+ Open interest is building on the call side.")
        lines.append(f"  -> call OI {net_call_change:+,.0f} vs put OI {net_put_change:+,.0f}")
        lines.append("")
    elif factor_scores.flow < 0:
        lines.append("- Open interest is building on the put side.")
        lines.append(f"  -> put OI {net_put_change:+,.0f} vs call OI {net_call_change:+,.0f}")
        lines.append("")

    if factor_scores.wall and wall_zone in WALL_LINES:
        sign = "+" if factor_scores.wall > 0 else "-"
        lines.append(f"{sign} " + WALL_LINES[wall_zone].format(support=walls.support, resistance=walls.resistance))
        lines.append("")

    if factor_scores.max_pain > 0:
        lines.append(f"+ Price is below max pain ({max_pain.max_pain_strike:g}); expiry tends to pull it up.")
        lines.append("")
    elif factor_scores.max_pain < 0:
        lines.append(f"- Price is above max pain ({max_pain.max_pain_strike:g}); expiry tends to pull it down.")
        lines.append("")

    if factor_scores.volume or volume.volume_spikes:
        if factor_scores.volume > 0:
            lines.append(f"+ Volume confirms the signal ({volume.confidence}% confidence).")
            lines.append(f"  -> volume PCR {volume.volume_pcr:.2f} | {volume.description}")
        elif factor_scores.volume < 0:
            lines.append("- Volume contradicts the signal; wait for confirmation.")
            lines.append(f"  -> volume PCR {volume.volume_pcr:.2f} | {volume.description}")
        if volume.volume_spikes:
            spikes = ", ".join(
                f"{spike.strike:g} ({'call' if spike.is_call_dominant else 'put'}, {spike.volume_ratio:.1f}x)"
                for spike in volume.volume_spikes[:3]
            )
            lines.append(f"  -> notable volume spikes: {spikes}")
        lines.append("")

    lines.append("Key levels:")
    lines.append(f"  * Put wall (support): {walls.support.strike:g}")
    lines.append(f"  * Call wall (resistance): {walls.resistance.strike:g}")
    lines.append(f"  * Max pain: {max_pain.max_pain_strike:g}")
    lines.append("")

    lines.append("Confidence:")
    if score >= 70 or score <= 30:
        lines.append(f"  {score:g}/100 = high, most factors agree")
    elif score >= 55 or score <= 45:
        lines.append(f"  {score:g}/100 = medium, some factors disagree")
    else:
        lines.append(f"  {score:g}/100 = low, factors are balanced")
    lines.append("")

    lines.append("Suggestion:")
    if signal == "BUY" and score >= 60:
        lines.append(f"  Consider buying with a stop below support {walls.support.strike:g}.")
        lines.append(
            f"  First target {walls.resistance.strike:g} (resistance) or {max_pain.max_pain_strike:g} (max pain)."
        )
    elif signal == "SELL" and score <= 40:
        lines.append(f"  Consider selling with a stop above resistance {walls.resistance.strike:g}.")
        lines.append(
            f"  First target {walls.support.strike:g} (support) or {max_pain.max_pain_strike:g} (max pain)."
        )
    else:
        lines.append("  Stand aside until direction is clearer.")
        lines.append(
            f"  Watch for a break above {walls.resistance.strike:g} or below {walls.support.strike:g}."
        )

    return "\n".join(lines)


__all__ = ["REASONS", "WALL_LINES", "build_reason", "build_summary"]
