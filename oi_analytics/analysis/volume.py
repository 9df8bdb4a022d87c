"""Volume anomaly detection and volume-based confirmation of a direction."""

from __future__ import annotations

from typing import List, Sequence

from oi_analytics.models import StrikeRecord, VolumeAnalysis, VolumeConfirmation, VolumeSpike
from oi_analytics.utils import clamp, round_half_up, safe_ratio, within_band

ATM_BAND_PCT = 2.0
SPIKE_MULTIPLIER = 2.0
MAX_SPIKES = 10
CONCENTRATION_BONUS_ABOVE = 30.0


def _classify(volume_pcr: float, spikes: List[VolumeSpike], concentration: float) -> tuple[str, float, str]:
    near_call = sum(1 for spike in spikes if spike.near_price and spike.is_call_dominant)
    near_put = sum(1 for spike in spikes if spike.near_price and not spike.is_call_dominant)

    if volume_pcr < 0.7:
        return (
            "BULLISH",
            65 + min(20.0, (0.7 - volume_pcr) * 50),
            f"Call volume dominates (volume PCR {volume_pcr:.2f}).",
        )
    if volume_pcr > 1.2:
        return (
            "BEARISH",
            65 + min(20.0, (volume_pcr - 1.2) * 30),
            f"Put volume dominates (volume PCR {volume_pcr:.2f}).",
        )
    if near_call > near_put * 1.5:
        return (
            "BULLISH",
            55 + min(15.0, near_call * 5),
            f"{near_call} call-heavy volume spikes near price.",
        )
    if near_put > near_call * 1.5:
        return (
            "BEARISH",
            55 + min(15.0, near_put * 5),
            f"{near_put} put-heavy volume spikes near price.",
        )
    return (
        "NEUTRAL",
        40 + min(10.0, concentration / 5),
        f"Balanced volume (volume PCR {volume_pcr:.2f}).",
    )


def analyze_volume(strikes: Sequence[StrikeRecord], current_price: float) -> VolumeAnalysis:
    """Find strikes trading more than twice the average and classify flow.

    Spikes are ranked by total volume (largest first) and capped at ten.
    ``volume_pcr`` falls back to 1.0 when no calls traded.
    """

    if not strikes:
        return VolumeAnalysis(description="No volume data available.")

    total_call = sum(row.call_volume for row in strikes)
    total_put = sum(row.put_volume for row in strikes)
    total_volume = total_call + total_put
    volume_pcr = safe_ratio(total_put, total_call, default=1.0)
    avg_volume = total_volume / len(strikes)

    spikes: List[VolumeSpike] = []
    for row in strikes:
        strike_volume = row.total_volume
        if strike_volume > avg_volume * SPIKE_MULTIPLIER:
            spikes.append(
                VolumeSpike(
                    strike=row.strike_price,
                    total_volume=strike_volume,
                    call_volume=row.call_volume,
                    put_volume=row.put_volume,
                    volume_ratio=safe_ratio(strike_volume, avg_volume),
                    is_call_dominant=row.call_volume > row.put_volume,
                    near_price=within_band(row.strike_price, current_price, ATM_BAND_PCT),
                )
            )
    spikes.sort(key=lambda spike: spike.total_volume, reverse=True)
    spikes = spikes[:MAX_SPIKES]

    atm_volume = sum(
        row.total_volume for row in strikes if within_band(row.strike_price, current_price, ATM_BAND_PCT)
    )
    concentration = safe_ratio(atm_volume, total_volume) * 100

    signal, confidence, description = _classify(volume_pcr, spikes, concentration)
    if concentration > CONCENTRATION_BONUS_ABOVE:
        confidence = min(100.0, confidence + 10)
        description += f" {concentration:.1f}% of volume is concentrated at the money."

    return VolumeAnalysis(
        total_call_volume=total_call,
        total_put_volume=total_put,
        total_volume=total_volume,
        volume_pcr=volume_pcr,
        avg_volume_per_strike=round_half_up(avg_volume),
        volume_spikes=spikes,
        atm_volume_concentration=round_half_up(concentration, 1),
        signal=signal,
        confidence=int(round_half_up(confidence)),
        description=description,
    )


def get_volume_confirmation(analysis: VolumeAnalysis, direction: str) -> VolumeConfirmation:
    """Score how strongly volume agrees with a preliminary BUY/SELL direction.

    Agreement yields ``round((confidence - 50) / 5)``, contradiction the
    negated value; the result is clamped to [-10, 10].
    """

    if direction == "NEUTRAL":
        return VolumeConfirmation(score=0, confirms=True, description="No preliminary direction to confirm.")

    magnitude = round_half_up((analysis.confidence - 50) / 5)
    agrees = (direction == "BUY" and analysis.signal == "BULLISH") or (
        direction == "SELL" and analysis.signal == "BEARISH"
    )
    contradicts = (direction == "BUY" and analysis.signal == "BEARISH") or (
        direction == "SELL" and analysis.signal == "BULLISH"
    )

    if agrees:
        score = magnitude
        description = f"Volume confirms {direction} ({analysis.signal.lower()}, {analysis.confidence}% confidence)."
    elif contradicts:
        score = -magnitude
        description = f"Volume contradicts {direction} ({analysis.signal.lower()}, {analysis.confidence}% confidence)."
    else:
        score = 0
        description = "Volume is neutral."

    return VolumeConfirmation(
        score=int(clamp(score, -10, 10)),
        confirms=not contradicts,
        description=description,
    )


__all__ = ["analyze_volume", "get_volume_confirmation"]
