"""Dealer gamma exposure (GEX) implied by the open interest on each strike.

Calls are counted as positive gamma and puts as negative gamma. A positive
total points to dealers dampening moves (mean reversion) and a negative total
to dealers chasing them (trend following). The zero-gamma level is the price
near spot where the net exposure comes closest to changing sign.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np
from scipy.stats import norm

from oi_analytics.models import GammaExposure, GammaPoint, StrikeRecord
from oi_analytics.utils import round_half_up

LOGGER = logging.getLogger(__name__)

CONTRACT_SIZE = 100
RISK_FREE_RATE = 0.05
DEFAULT_DAYS_TO_EXPIRY = 30.0
DEFAULT_IV = 0.15
MIN_YEARS = 0.001
FLIP_SEARCH_PCT = 10.0
FLIP_SEARCH_STEPS = 20

INTERPRETATIONS = {
    "POSITIVE": "Positive GEX: dealers hedge against the move, so volatility stays low and price tends to range.",
    "NEGATIVE": "Negative GEX: dealers hedge with the move, so volatility runs high and price tends to trend.",
    "FLAT": "No net gamma exposure in the chain.",
}


def black_scholes_gamma(
    spot: float,
    strikes,
    years: float,
    volatility: float,
    risk_free_rate: float = RISK_FREE_RATE,
) -> np.ndarray:
    """Black-Scholes gamma for every strike in ``strikes`` at one spot price."""

    strikes = np.asarray(strikes, dtype=float)
    if spot <= 0 or years <= 0 or volatility <= 0:
        return np.zeros_like(strikes)

    valid = np.where(strikes > 0, strikes, np.nan)
    vol_sqrt_t = volatility * np.sqrt(years)
    d1 = (np.log(spot / valid) + (risk_free_rate + 0.5 * volatility**2) * years) / vol_sqrt_t
    return np.nan_to_num(norm.pdf(d1) / (spot * vol_sqrt_t), nan=0.0)


def _net_gex(price: float, strike_prices, net_oi, years, volatility, risk_free_rate) -> float:
    gamma = black_scholes_gamma(price, strike_prices, years, volatility, risk_free_rate)
    return float(np.sum(gamma * net_oi) * price * CONTRACT_SIZE)


def _zero_gamma_level(strike_prices, net_oi, current_price, years, volatility, risk_free_rate) -> float:
    band = current_price * FLIP_SEARCH_PCT / 100
    grid = np.linspace(current_price - band, current_price + band, FLIP_SEARCH_STEPS + 1)
    exposures = np.array(
        [abs(_net_gex(price, strike_prices, net_oi, years, volatility, risk_free_rate)) for price in grid]
    )
    return float(grid[int(np.argmin(exposures))])


def calculate_gex(
    strikes: Sequence[StrikeRecord],
    current_price: float,
    days_to_expiry: float = DEFAULT_DAYS_TO_EXPIRY,
    iv: float = DEFAULT_IV,
    risk_free_rate: float = RISK_FREE_RATE,
) -> GammaExposure:
    """Per-strike and total gamma exposure plus the zero-gamma flip level.

    Each strike contributes ``gamma * OI * price * 100``, positive for calls
    and negative for puts. The flip level is the lowest-exposure point of a
    21-step grid spanning +/-10% around ``current_price``; it is ``None`` for an
    empty chain or a non-positive price.
    """

    if not strikes or current_price <= 0:
        return GammaExposure(interpretation=INTERPRETATIONS["FLAT"])

    ordered = sorted(strikes, key=lambda row: row.strike_price)
    strike_prices = np.array([row.strike_price for row in ordered], dtype=float)
    call_oi = np.array([row.call_oi for row in ordered], dtype=float)
    put_oi = np.array([row.put_oi for row in ordered], dtype=float)
    years = max(days_to_expiry / 365, MIN_YEARS)

    gamma = black_scholes_gamma(current_price, strike_prices, years, iv, risk_free_rate)
    call_gex = gamma * call_oi * current_price * CONTRACT_SIZE
    put_gex = -gamma * put_oi * current_price * CONTRACT_SIZE

    profile = [
        GammaPoint(
            strike=float(strike),
            gex=round_half_up(call + put, 2),
            call_gex=round_half_up(call, 2),
            put_gex=round_half_up(put, 2),
        )
        for strike, call, put in zip(strike_prices, call_gex, put_gex)
    ]

    total = float(np.sum(call_gex) + np.sum(put_gex))
    regime = "POSITIVE" if total > 0 else "NEGATIVE" if total < 0 else "FLAT"
    zero_level: Optional[float] = round_half_up(
        _zero_gamma_level(strike_prices, call_oi - put_oi, current_price, years, iv, risk_free_rate), 2
    )
    LOGGER.debug("GEX total %.2f (%s), zero gamma near %s", total, regime, zero_level)

    return GammaExposure(
        total_gex=round_half_up(total, 2),
        total_call_gex=round_half_up(float(np.sum(call_gex)), 2),
        total_put_gex=round_half_up(float(np.sum(put_gex)), 2),
        zero_gamma_level=zero_level,
        profile=profile,
        regime=regime,
        interpretation=INTERPRETATIONS[regime],
    )


__all__ = ["black_scholes_gamma", "calculate_gex"]
