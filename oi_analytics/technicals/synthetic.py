"""Synthetic OHLC history used when no real price series is available.

The bars are random and only anchored to the current price; indicators
derived from them are placeholders and are flagged ``synthetic`` downstream.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import numpy as np
import pandas as pd


def generate_synthetic_bars(
    current_price: float,
    num_bars: int = 200,
    seed: Optional[int] = None,
    now: Optional[datetime] = None,
) -> pd.DataFrame:
    """Random-walk hourly bars starting 5% below ``current_price``.

    The final close is pinned to ``current_price``. Pass ``seed`` for a
    reproducible series.
    """

    rng = np.random.default_rng(seed)
    end = now or datetime.now(timezone.utc)

    opens = np.empty(num_bars)
    highs = np.empty(num_bars)
    lows = np.empty(num_bars)
    closes = np.empty(num_bars)

    price = current_price * 0.95
    for index in range(num_bars):
        change = (rng.random() - 0.48) * 10
        spread = rng.random() * 5 + 2
        open_ = price
        close = price + change
        opens[index] = open_
        closes[index] = close
        highs[index] = max(open_, close) + rng.random() * spread
        lows[index] = min(open_, close) - rng.random() * spread
        price = close

    frame = pd.DataFrame(
        {"Open": opens, "High": highs, "Low": lows, "Close": closes},
        index=pd.DatetimeIndex(
            [end - timedelta(hours=num_bars - index) for index in range(num_bars)],
            name="Datetime",
        ),
    ).round(2)

    if num_bars:
        last = frame.index[-1]
        frame.loc[last, "Close"] = current_price
        frame.loc[last, "High"] = max(frame.loc[last, "High"], current_price)
        frame.loc[last, "Low"] = min(frame.loc[last, "Low"], current_price)
    return frame


__all__ = ["generate_synthetic_bars"]
