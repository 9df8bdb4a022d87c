from __future__ import annotations

from typing import List, Tuple

from oi_analytics.models import LiquidityWalls

from .base import ScoreContext

WALL_ZONES = ("near_support", "near_resistance", "breakout", "breakdown", "mid_range", "no_range")


def locate_price(price: float, walls: LiquidityWalls, proximity_pct: float = 20.0) -> str:
    """Name the wall rule that applies to ``price``; one of ``WALL_ZONES``."""

    support = walls.support.strike
    resistance = walls.resistance.strike
    price_range = resistance - support
    if price_range <= 0:
        return "no_range"

    from_support = (price - support) / price_range * 100
    from_resistance = (resistance - price) / price_range * 100
    if 0 <= from_support < proximity_pct:
        return "near_support"
    if 0 <= from_resistance < proximity_pct:
        return "near_resistance"
    if price > resistance:
        return "breakout"
    if price < support:
        return "breakdown"
    return "mid_range"


class WallInteractionScorer:
    """Where price sits inside the put-wall to call-wall range."""

    key = "wall"
    default_weight = 1.0

    def zone(self, context: ScoreContext) -> str:
        proximity = float(context.section(self.key).get("proximity_pct", 20.0))
        return locate_price(context.snapshot.current_price, context.walls, proximity)

    def score(self, context: ScoreContext) -> Tuple[float, str, List[str]]:
        settings = context.section(self.key)
        near_delta = float(settings.get("proximity_delta", 20.0))
        break_delta = float(settings.get("breakout_delta", 25.0))

        price = context.snapshot.current_price
        support = context.walls.support.strike
        resistance = context.walls.resistance.strike
        zone = self.zone(context)
        if zone == "no_range":
            return 0.0, "Walls do not form a support/resistance range -> skipped", []

        price_range = resistance - support
        from_support = (price - support) / price_range * 100
        from_resistance = (resistance - price) / price_range * 100

        if zone == "near_support":
            return (
                near_delta,
                f"Price near put wall {support:g} ({from_support:.0f}% from support) -> bounce expected",
                [f"Price is close to put-wall support at {support:g}"],
            )
        if zone == "near_resistance":
            return (
                -near_delta,
                f"Price near call wall {resistance:g} ({from_resistance:.0f}% from resistance) -> rejection expected",
                [f"Price is close to call-wall resistance at {resistance:g}"],
            )
        if zone == "breakout":
            return (
                break_delta,
                f"Breakout: price {price:.1f} > call wall {resistance:g}",
                [f"Price broke above call-wall resistance at {resistance:g}"],
            )
        if zone == "breakdown":
            return (
                -break_delta,
                f"Breakdown: price {price:.1f} < put wall {support:g}",
                [f"Price broke below put-wall support at {support:g}"],
            )
        return 0.0, f"Price mid-range ({from_support:.0f}% from support) -> neutral", []


__all__ = ["WALL_ZONES", "WallInteractionScorer", "locate_price"]
