from __future__ import annotations

from oi_analytics.analysis import find_key_levels, get_liquidity_walls
from oi_analytics.models import StrikeRecord


def build_strikes():
    return [
        StrikeRecord(strike_price=2650, call_oi=300, put_oi=4100),
        StrikeRecord(strike_price=2700, call_oi=1234, put_oi=5678),
        StrikeRecord(strike_price=2750, call_oi=3456, put_oi=2345),
        StrikeRecord(strike_price=2800, call_oi=4567, put_oi=1234),
        StrikeRecord(strike_price=2850, call_oi=3900, put_oi=150),
    ]


def test_walls_pick_largest_put_and_call_oi():
    walls = get_liquidity_walls(build_strikes())

    assert walls.support.strike == 2700
    assert walls.support.put_oi == 5678
    assert walls.resistance.strike == 2800
    assert walls.resistance.call_oi == 4567
    assert [level.strike for level in walls.support_levels] == [2700, 2650, 2750]
    assert [level.strike for level in walls.resistance_levels] == [2800, 2850, 2750]


def test_top_levels_carry_their_open_interest():
    walls = get_liquidity_walls(build_strikes())

    assert [(level.strike, level.put_oi) for level in walls.support_levels] == [
        (2700, 5678),
        (2650, 4100),
        (2750, 2345),
    ]
    assert [(level.strike, level.call_oi) for level in walls.resistance_levels] == [
        (2800, 4567),
        (2850, 3900),
        (2750, 3456),
    ]
    assert [level.strength for level in walls.support_levels] == [5, 4, 3]
    assert [level.strength for level in walls.resistance_levels] == [5, 5, 4]


def test_wall_strength_is_always_full_for_non_empty_walls():
    walls = get_liquidity_walls(build_strikes())

    assert walls.support.strength == 5
    assert walls.resistance.strength == 5


def test_empty_chain_yields_zeroed_walls():
    walls = get_liquidity_walls([])

    assert walls.support.strike == 0
    assert walls.support.put_oi == 0
    assert walls.support.strength == 0
    assert walls.resistance.strike == 0
    assert walls.resistance.strength == 0
    assert walls.support_levels == []
    assert walls.resistance_levels == []


def test_zero_open_interest_has_zero_strength():
    walls = get_liquidity_walls([StrikeRecord(strike_price=2700, call_volume=10)])

    assert walls.support.strength == 0
    assert walls.resistance.strength == 0


def test_oi_ties_keep_the_lowest_strike():
    strikes = [
        StrikeRecord(strike_price=2700, put_oi=500, call_oi=900),
        StrikeRecord(strike_price=2750, put_oi=500, call_oi=900),
    ]

    walls = get_liquidity_walls(strikes)

    assert walls.support.strike == 2700
    assert walls.resistance.strike == 2700


def test_key_levels_are_relative_to_price_and_nearest_first():
    levels = find_key_levels(build_strikes(), current_price=2760, top_n=2)

    assert levels.support == [2700, 2650]
    assert levels.resistance == [2800, 2850]
