"""Open interest change tracking between two chain snapshots."""

from __future__ import annotations

from typing import Dict, List, Sequence

from oi_analytics.models import OIBuildup, OIChangeAnalysis, StrikeOIChange, StrikeRecord
from oi_analytics.utils import safe_ratio

BIAS_THRESHOLD_FRACTION = 0.05
BUILDUP_DOMINANCE = 1.5


def analyze_oi_changes(
    current: Sequence[StrikeRecord],
    previous: Sequence[StrikeRecord],
    significant_threshold_pct: float = 10.0,
) -> OIChangeAnalysis:
    """Compare two OI snapshots strike by strike.

    Strikes are taken from ``current``; a strike missing from ``previous``
    counts as new positioning from zero. The overall bias is BULLISH when
    call OI grew more than put OI by over 5% of the larger previous total.
    """

    previous_by_strike: Dict[float, StrikeRecord] = {row.strike_price: row for row in previous}

    changes: List[StrikeOIChange] = []
    total_call_change = total_put_change = 0.0
    total_prev_call = total_prev_put = 0.0
    for row in current:
        prior = previous_by_strike.get(row.strike_price)
        prev_call = prior.call_oi if prior else 0.0
        prev_put = prior.put_oi if prior else 0.0
        call_change = row.call_oi - prev_call
        put_change = row.put_oi - prev_put
        changes.append(
            StrikeOIChange(
                strike=row.strike_price,
                call_oi=row.call_oi,
                put_oi=row.put_oi,
                prev_call_oi=prev_call,
                prev_put_oi=prev_put,
                call_change=call_change,
                put_change=put_change,
                call_change_pct=safe_ratio(call_change, prev_call) * 100,
                put_change_pct=safe_ratio(put_change, prev_put) * 100,
            )
        )
        total_call_change += call_change
        total_put_change += put_change
        total_prev_call += prev_call
        total_prev_put += prev_put

    net_call_bias = total_call_change - total_put_change
    threshold = max(total_prev_call, total_prev_put) * BIAS_THRESHOLD_FRACTION
    if net_call_bias > threshold:
        signal = "BULLISH"
        description = "Call OI is building faster than put OI."
    elif net_call_bias < -threshold:
        signal = "BEARISH"
        description = "Put OI is building faster than call OI."
    else:
        signal = "NEUTRAL"
        description = "OI changes are balanced."

    significant = [
        change
        for change in changes
        if abs(change.call_change_pct) >= significant_threshold_pct
        or abs(change.put_change_pct) >= significant_threshold_pct
    ]

    return OIChangeAnalysis(
        changes=changes,
        total_call_change=total_call_change,
        total_put_change=total_put_change,
        total_call_change_pct=safe_ratio(total_call_change, total_prev_call) * 100,
        total_put_change_pct=safe_ratio(total_put_change, total_prev_put) * 100,
        net_call_bias=net_call_bias,
        signal=signal,
        significant_changes=significant,
        description=description,
    )


def analyze_oi_buildup_near_price(
    changes: Sequence[StrikeOIChange],
    current_price: float,
    range_pct: float = 3.0,
) -> OIBuildup:
    lower = current_price * (1 - range_pct / 100)
    upper = current_price * (1 + range_pct / 100)
    near = [change for change in changes if lower <= change.strike <= upper]
    if not near:
        return OIBuildup(description="No OI changes near the current price.")

    call_buildup = sum(change.call_change for change in near)
    put_buildup = sum(change.put_change for change in near)
    if call_buildup > put_buildup * BUILDUP_DOMINANCE:
        signal = "BULLISH"
        description = "Strong call buildup near the money."
    elif put_buildup > call_buildup * BUILDUP_DOMINANCE:
        signal = "BEARISH"
        description = "Strong put buildup near the money."
    else:
        signal = "NEUTRAL"
        description = "Mixed OI buildup near the money."

    return OIBuildup(
        call_buildup=call_buildup,
        put_buildup=put_buildup,
        near_price_changes=near,
        signal=signal,
        description=description,
    )


def derive_oi_change_records(
    current: Sequence[StrikeRecord],
    previous: Sequence[StrikeRecord],
) -> List[StrikeRecord]:
    """Build change-source rows from two OI snapshots for the strike aggregator."""

    analysis = analyze_oi_changes(current, previous)
    return [
        StrikeRecord(
            strike_price=change.strike,
            call_oi_change=change.call_change,
            put_oi_change=change.put_change,
        )
        for change in analysis.changes
    ]


__all__ = ["analyze_oi_buildup_near_price", "analyze_oi_changes", "derive_oi_change_records"]
