"""Max pain: the settlement strike that minimises option buyers' payout."""

from __future__ import annotations

import logging
from typing import List, Sequence

from oi_analytics.models import MaxPainResult, PainPoint, StrikeRecord
from oi_analytics.utils import round_half_up

LOGGER = logging.getLogger(__name__)

SIGNAL_THRESHOLD_PCT = 1.0


def total_pain_at(settlement: float, strikes: Sequence[StrikeRecord]) -> float:
    """Aggregate intrinsic value owed to option holders if the chain settles at ``settlement``."""

    pain = 0.0
    for row in strikes:
        if settlement > row.strike_price:
            pain += row.call_oi * (settlement - row.strike_price)
        elif settlement < row.strike_price:
            pain += row.put_oi * (row.strike_price - settlement)
    return pain


def calculate_max_pain(strikes: Sequence[StrikeRecord], current_price: float) -> MaxPainResult:
    """Solve for the max-pain strike over every unique strike in the chain.

    Candidates are scanned in ascending order and only a strictly lower
    payout replaces the current best, so ties resolve to the lowest strike.
    """

    if not strikes:
        return MaxPainResult(description="No strike data available.")

    candidates = sorted({row.strike_price for row in strikes})
    pain_by_strike: List[PainPoint] = []
    best_strike = candidates[0]
    best_pain = None
    for candidate in candidates:
        pain = total_pain_at(candidate, strikes)
        pain_by_strike.append(PainPoint(strike=candidate, total_pain=pain))
        if best_pain is None or pain < best_pain:
            best_strike = candidate
            best_pain = pain

    distance = best_strike - current_price
    distance_percent = distance / current_price * 100 if current_price else 0.0

    if distance_percent > SIGNAL_THRESHOLD_PCT:
        signal = "BULLISH"
        description = (
            f"Max pain {best_strike:g} sits {distance_percent:.2f}% above price; "
            "expiry gravity pulls higher."
        )
    elif distance_percent < -SIGNAL_THRESHOLD_PCT:
        signal = "BEARISH"
        description = (
            f"Max pain {best_strike:g} sits {abs(distance_percent):.2f}% below price; "
            "expiry gravity pulls lower."
        )
    else:
        signal = "NEUTRAL"
        description = f"Price is close to max pain {best_strike:g}."

    LOGGER.debug("Max pain %s (distance %.2f%%)", best_strike, distance_percent)
    return MaxPainResult(
        max_pain_strike=best_strike,
        distance_from_price=round_half_up(distance, 2),
        distance_percent=round_half_up(distance_percent, 2),
        pain_by_strike=pain_by_strike,
        signal=signal,
        description=description,
    )


__all__ = ["calculate_max_pain", "total_pain_at"]
