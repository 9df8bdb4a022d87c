from __future__ import annotations

import copy
from typing import Any, Dict, Mapping

FACTOR_ORDER = ("pcr", "vwap", "flow", "wall", "max_pain", "volume")

DEFAULT_SIGNAL_CONFIG: Dict[str, Any] = {
    "enabled": list(FACTOR_ORDER),
    "base_score": 50.0,
    "weights": {
        "pcr": 1.0,
        "vwap": 1.0,
        "flow": 1.0,
        "wall": 1.0,
        "max_pain": 1.0,
        "volume": 1.0,
    },
    "score_bounds": {
        "min": 0.0,
        "max": 100.0,
    },
    "factor_bounds": {
        "pcr": 10.0,
        "vwap": 15.0,
        "flow": 15.0,
        "wall": 25.0,
        "max_pain": 10.0,
        "volume": 10.0,
    },
    "pcr": {
        "strong_bullish_below": 0.6,
        "bullish_below": 0.8,
        "strong_bearish_above": 1.2,
        "bearish_above": 1.0,
        "strong_delta": 10.0,
        "mild_delta": 5.0,
    },
    "vwap": {
        "delta": 15.0,
    },
    "flow": {
        "delta": 15.0,
    },
    "wall": {
        "proximity_pct": 20.0,
        "proximity_delta": 20.0,
        "breakout_delta": 25.0,
    },
    "max_pain": {
        "distance_pct": 2.0,
        "delta": 10.0,
    },
    "preliminary": {
        "buy_at": 55.0,
        "sell_at": 45.0,
    },
    "signal_thresholds": {
        "strong_buy": 75.0,
        "buy": 60.0,
        "mild_buy": 55.0,
        "strong_sell": 25.0,
        "sell": 40.0,
        "mild_sell": 45.0,
    },
}


def _merge(base: Dict[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            base[key] = _merge(base[key], value)
        else:
            base[key] = copy.deepcopy(value)
    return base


def merge_config(overrides: Mapping[str, Any] | None) -> Dict[str, Any]:
    """Overlay ``overrides`` on the default signal configuration.

    Nested sections merge key by key; ``enabled`` and other non-mapping
    values replace the default outright.
    """

    merged = copy.deepcopy(DEFAULT_SIGNAL_CONFIG)
    if not overrides:
        return merged
    return _merge(merged, overrides)


__all__ = ["DEFAULT_SIGNAL_CONFIG", "FACTOR_ORDER", "merge_config"]
