from __future__ import annotations

from typing import Sequence

import numpy as np

from oi_analytics.models import StrikeRecord


def calculate_vwap(strikes: Sequence[StrikeRecord]) -> float:
    """Volume-weighted average strike across the chain, 0 when nothing traded."""

    if not strikes:
        return 0.0
    prices = np.array([row.strike_price for row in strikes], dtype=float)
    volumes = np.array([row.put_volume + row.call_volume for row in strikes], dtype=float)
    total_volume = volumes.sum()
    if total_volume == 0:
        return 0.0
    return float((prices * volumes).sum() / total_volume)


__all__ = ["calculate_vwap"]
