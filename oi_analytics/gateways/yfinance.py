"""Price-series gateway backed by the public yfinance client."""

from __future__ import annotations

import logging
import random
import time
from typing import Any, Callable, Optional

import pandas as pd
import yfinance as yf

from .base import DataNotAvailable, GatewayError, PriceSeriesGateway

LOGGER = logging.getLogger(__name__)

OHLC_COLUMNS = ["Open", "High", "Low", "Close"]

Downloader = Callable[..., pd.DataFrame]


class YFinancePriceSeriesGateway(PriceSeriesGateway):
    """Fetch OHLC history (e.g. ``GC=F`` for gold futures) from Yahoo Finance."""

    def __init__(
        self,
        download: Optional[Downloader] = None,
        max_retries: int = 3,
        base_delay: float = 0.75,
        max_delay: float = 4.0,
        jitter: float = 0.3,
    ) -> None:
        self._download = download or yf.download
        self._max_retries = max(1, max_retries)
        self._base_delay = base_delay
        self._max_delay = max_delay
        self._jitter = jitter

    @property
    def name(self) -> str:
        return "yfinance"

    def get_history(self, symbol: str, lookback: str = "1mo", interval: str = "1h") -> pd.DataFrame:
        history = self._retry(
            lambda: self._download(symbol, period=lookback, interval=interval, progress=False),
            context=f"download {interval} history for {symbol}",
        )
        history = self._normalize_history(symbol, history)
        if history.empty:
            raise DataNotAvailable(f"No price history returned for {symbol}")

        missing = [column for column in OHLC_COLUMNS if column not in history.columns]
        if missing:
            raise GatewayError(f"Price history for {symbol} is missing required columns: {missing}")
        history = history.dropna(subset=OHLC_COLUMNS)
        if history.empty:
            raise DataNotAvailable(f"Price history for {symbol} has no complete OHLC bars")
        LOGGER.info("Fetched %d %s bars for %s", len(history), interval, symbol)
        return history[OHLC_COLUMNS].sort_index()

    def _retry(self, operation: Callable[[], Any], context: str):
        last_error: Exception | None = None
        for attempt in range(self._max_retries):
            try:
                return operation()
            except Exception as exc:  # yfinance raises untyped errors
                last_error = exc
                LOGGER.warning("Failed to %s (attempt %d/%d): %s", context, attempt + 1, self._max_retries, exc)
                if attempt == self._max_retries - 1:
                    break
                self._apply_backoff(attempt)

        raise GatewayError(f"Failed to {context}: {last_error}") from last_error

    def _apply_backoff(self, attempt: int) -> None:
        delay = min(self._max_delay, self._base_delay * (1 + attempt))
        delay += random.uniform(0, self._jitter)
        time.sleep(delay)

    @staticmethod
    def _normalize_history(symbol: str, history: Optional[pd.DataFrame]) -> pd.DataFrame:
        """Flatten yfinance's (field, ticker) MultiIndex columns to plain OHLC names."""

        if history is None or history.empty:
            return pd.DataFrame(columns=OHLC_COLUMNS)

        if isinstance(history.columns, pd.MultiIndex):
            if symbol in history.columns.get_level_values(-1):
                history = history.xs(symbol, axis=1, level=-1)
            elif symbol in history.columns.get_level_values(0):
                history = history.xs(symbol, axis=1, level=0)
            else:
                history = history.droplevel(-1, axis=1)

        history = history.copy()
        history.columns = [str(col) for col in history.columns]
        return history


__all__ = ["YFinancePriceSeriesGateway"]
