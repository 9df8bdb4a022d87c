"""Futures/spot spread and translation of chain levels onto the spot scale."""

from __future__ import annotations

from typing import Sequence

from oi_analytics.models import ConvertedLevels, KeyLevels, PriceZone, SpreadInfo, SpreadStatus, TradingZones
from oi_analytics.utils import round_half_up

# Gold futures usually carry a 10-25 point premium over spot.
NORMAL_SPREAD_LOW = 10.0
NORMAL_SPREAD_HIGH = 25.0

BUY_ZONE_BELOW = 5.0
BUY_ZONE_ABOVE = 10.0
SELL_ZONE_BELOW = 10.0
SELL_ZONE_ABOVE = 5.0


def calculate_spread(futures_price: float, spot_price: float) -> SpreadInfo:
    spread = futures_price - spot_price
    spread_percent = spread / spot_price * 100 if spot_price > 0 else 0.0
    return SpreadInfo(
        futures_price=round_half_up(futures_price, 2),
        spot_price=round_half_up(spot_price, 2),
        spread=round_half_up(spread, 2),
        spread_percent=round_half_up(spread_percent, 3),
    )


def convert_levels(
    key_levels: KeyLevels,
    spread: float,
    support_levels: Sequence[float] = (),
    resistance_levels: Sequence[float] = (),
) -> ConvertedLevels:
    """Shift futures-chain levels down by ``spread`` so they can be read against spot."""

    def shift(level: float) -> float:
        return round_half_up(level - spread, 2)

    return ConvertedLevels(
        spread=spread,
        put_wall=shift(key_levels.put_wall),
        call_wall=shift(key_levels.call_wall),
        max_pain=shift(key_levels.max_pain),
        support_levels=[shift(level) for level in support_levels],
        resistance_levels=[shift(level) for level in resistance_levels],
    )


def get_trading_zones(
    levels: ConvertedLevels,
    spot_price: float,
    *,
    below_support: float = BUY_ZONE_BELOW,
    above_support: float = BUY_ZONE_ABOVE,
    below_resistance: float = SELL_ZONE_BELOW,
    above_resistance: float = SELL_ZONE_ABOVE,
) -> TradingZones:
    """Buy zone around the spot-scale put wall, sell zone around the call wall.

    Zone bounds are inclusive and the buy zone is checked first when the two
    overlap.
    """

    buy_start = round_half_up(levels.put_wall - below_support, 2)
    buy_end = round_half_up(levels.put_wall + above_support, 2)
    sell_start = round_half_up(levels.call_wall - below_resistance, 2)
    sell_end = round_half_up(levels.call_wall + above_resistance, 2)

    if buy_start <= spot_price <= buy_end:
        position = "BUY_ZONE"
    elif sell_start <= spot_price <= sell_end:
        position = "SELL_ZONE"
    else:
        position = "NEUTRAL_ZONE"

    return TradingZones(
        buy_zone=PriceZone(
            start=buy_start,
            end=buy_end,
            description=f"Buy zone {buy_start:.2f} - {buy_end:.2f} (near put-wall support {levels.put_wall:g})",
        ),
        sell_zone=PriceZone(
            start=sell_start,
            end=sell_end,
            description=f"Sell zone {sell_start:.2f} - {sell_end:.2f} (near call-wall resistance {levels.call_wall:g})",
        ),
        current_position=position,
        distance_to_support=round_half_up(spot_price - levels.put_wall, 2),
        distance_to_resistance=round_half_up(levels.call_wall - spot_price, 2),
    )


def get_spread_status(
    spread: float,
    low: float = NORMAL_SPREAD_LOW,
    high: float = NORMAL_SPREAD_HIGH,
) -> SpreadStatus:
    """Classify a futures premium against the usual ``[low, high]`` band (inclusive)."""

    if spread > high:
        return SpreadStatus(status="HIGH", description=f"Spread unusually wide ({spread:.2f} points), contango likely")
    if spread < low:
        return SpreadStatus(status="LOW", description=f"Spread narrow ({spread:.2f} points), futures close to spot")
    return SpreadStatus(status="NORMAL", description=f"Spread normal ({spread:.2f} points)")


__all__ = ["calculate_spread", "convert_levels", "get_spread_status", "get_trading_zones"]
