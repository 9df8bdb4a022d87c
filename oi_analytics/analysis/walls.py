"""Liquidity wall detection: strikes with concentrated open interest."""

from __future__ import annotations

import math
from typing import List, Sequence

from oi_analytics.models import (
    KeyLevelSet,
    LiquidityWalls,
    ResistanceWall,
    StrikeRecord,
    SupportWall,
)

TOP_LEVELS = 3


def _wall_strength(top_oi: float, max_oi: float) -> int:
    # The reference OI is the leading wall itself, so any non-empty wall rates 5.
    reference = max_oi or 1.0
    return min(5, math.ceil(top_oi / reference * 5))


def get_liquidity_walls(strikes: Sequence[StrikeRecord]) -> LiquidityWalls:
    """Return put-OI support and call-OI resistance walls plus top-3 levels.

    Each level keeps its open interest and a 0-5 strength relative to the
    leading wall.

    Sorting is stable, so on OI ties the strike that appears first in the
    (ascending) input wins.
    """

    if not strikes:
        return LiquidityWalls()

    by_put = sorted(strikes, key=lambda row: row.put_oi, reverse=True)
    by_call = sorted(strikes, key=lambda row: row.call_oi, reverse=True)
    top_put = by_put[0]
    top_call = by_call[0]

    support = SupportWall(
        strike=top_put.strike_price,
        put_oi=top_put.put_oi,
        strength=_wall_strength(top_put.put_oi, top_put.put_oi),
    )
    resistance = ResistanceWall(
        strike=top_call.strike_price,
        call_oi=top_call.call_oi,
        strength=_wall_strength(top_call.call_oi, top_call.call_oi),
    )
    return LiquidityWalls(
        support=support,
        resistance=resistance,
        support_levels=[
            SupportWall(
                strike=row.strike_price,
                put_oi=row.put_oi,
                strength=_wall_strength(row.put_oi, top_put.put_oi),
            )
            for row in by_put[:TOP_LEVELS]
        ],
        resistance_levels=[
            ResistanceWall(
                strike=row.strike_price,
                call_oi=row.call_oi,
                strength=_wall_strength(row.call_oi, top_call.call_oi),
            )
            for row in by_call[:TOP_LEVELS]
        ],
    )


def find_key_levels(
    strikes: Sequence[StrikeRecord],
    current_price: float,
    top_n: int = 5,
) -> KeyLevelSet:
    """Price-relative levels: put-heavy strikes below and call-heavy strikes above.

    Support is the ``top_n`` largest put-OI strikes under the price, listed
    nearest first. Resistance mirrors it with call OI above the price.
    """

    below: List[StrikeRecord] = [row for row in strikes if row.strike_price < current_price and row.put_oi > 0]
    above: List[StrikeRecord] = [row for row in strikes if row.strike_price > current_price and row.call_oi > 0]

    support = sorted(
        (row.strike_price for row in sorted(below, key=lambda row: row.put_oi, reverse=True)[:top_n]),
        reverse=True,
    )
    resistance = sorted(
        row.strike_price for row in sorted(above, key=lambda row: row.call_oi, reverse=True)[:top_n]
    )
    return KeyLevelSet(support=support, resistance=resistance)


__all__ = ["find_key_levels", "get_liquidity_walls"]
