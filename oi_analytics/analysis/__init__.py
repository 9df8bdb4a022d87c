"""Deterministic analyses over a merged options-chain strike set."""

from .aggregation import merge_strike_sources
from .gamma import black_scholes_gamma, calculate_gex
from .max_pain import calculate_max_pain, total_pain_at
from .oi_changes import analyze_oi_buildup_near_price, analyze_oi_changes, derive_oi_change_records
from .put_call_ratio import calculate_pcr
from .spread import calculate_spread, convert_levels, get_spread_status, get_trading_zones
from .volume import analyze_volume, get_volume_confirmation
from .vwap import calculate_vwap
from .walls import find_key_levels, get_liquidity_walls


__all__ = [
    "analyze_oi_buildup_near_price",
    "analyze_oi_changes",
    "analyze_volume",
    "black_scholes_gamma",
    "calculate_gex",
    "calculate_max_pain",
    "calculate_pcr",
    "calculate_spread",
    "calculate_vwap",
    "convert_levels",
    "derive_oi_change_records",
    "find_key_levels",
    "get_liquidity_walls",
    "get_spread_status",
    "get_trading_zones",
    "get_volume_confirmation",
    "merge_strike_sources",
    "total_pain_at",
]
