"""Put/call ratio analysis across the whole chain and the ATM band."""

from __future__ import annotations

from typing import Optional, Sequence

from oi_analytics.models import PCRResult, StrikeRecord
from oi_analytics.utils import round_half_up, safe_ratio, within_band

ATM_BAND_PCT = 2.0
OI_WEIGHT = 0.6
VOLUME_WEIGHT = 0.4
BULLISH_BELOW = 0.7
BEARISH_ABOVE = 1.0


def calculate_pcr(strikes: Sequence[StrikeRecord], current_price: Optional[float] = None) -> PCRResult:
    """Compute OI, volume and ATM put/call ratios and classify the blend.

    Every ratio is 0 when the call side of it is 0. Classification uses the
    unrounded ``0.6 * oi_pcr + 0.4 * volume_pcr``; only the reported ratios
    are rounded to two decimals.
    """

    total_put_oi = sum(row.put_oi for row in strikes)
    total_call_oi = sum(row.call_oi for row in strikes)
    total_put_volume = sum(row.put_volume for row in strikes)
    total_call_volume = sum(row.call_volume for row in strikes)

    oi_pcr = safe_ratio(total_put_oi, total_call_oi)
    volume_pcr = safe_ratio(total_put_volume, total_call_volume)

    atm_pcr = 0.0
    if current_price and current_price > 0:
        atm_rows = [row for row in strikes if within_band(row.strike_price, current_price, ATM_BAND_PCT)]
        atm_pcr = safe_ratio(sum(row.put_oi for row in atm_rows), sum(row.call_oi for row in atm_rows))

    blended = OI_WEIGHT * oi_pcr + VOLUME_WEIGHT * volume_pcr
    if blended < BULLISH_BELOW:
        signal = "BULLISH"
        description = f"Low put/call ratio ({blended:.2f}) shows call-side dominance."
    elif blended > BEARISH_ABOVE:
        signal = "BEARISH"
        description = f"High put/call ratio ({blended:.2f}) shows put-side dominance."
    else:
        signal = "NEUTRAL"
        description = f"Balanced put/call ratio ({blended:.2f})."

    return PCRResult(
        oi_pcr=round_half_up(oi_pcr, 2),
        volume_pcr=round_half_up(volume_pcr, 2),
        atm_pcr=round_half_up(atm_pcr, 2),
        signal=signal,
        total_put_oi=total_put_oi,
        total_call_oi=total_call_oi,
        total_put_volume=total_put_volume,
        total_call_volume=total_call_volume,
        description=description,
    )


__all__ = ["calculate_pcr"]
