"""Core abstractions for the collaborators the pipeline talks to."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Mapping, Optional, Sequence

import pandas as pd

SourceRows = Sequence[Mapping[str, Any]]


class GatewayError(Exception):
    """Base exception raised for gateway related failures."""


class DataNotAvailable(GatewayError):
    """Raised when requested data is not available from a gateway."""


@dataclass(frozen=True)
class SourceExport:
    """One scraped export (OI, volume or OI change) for a product/expiry."""

    rows: SourceRows
    price: Optional[float] = None
    timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class StrikeSources:
    """Latest per-source exports for a product/expiry plus the prior OI export."""

    product: str
    expiry: Optional[str]
    oi: Optional[SourceExport] = None
    volume: Optional[SourceExport] = None
    oi_change: Optional[SourceExport] = None
    previous_oi: Optional[SourceExport] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def exports(self) -> List[SourceExport]:
        return [export for export in (self.oi, self.volume, self.oi_change) if export is not None]

    def latest_price(self) -> Optional[float]:
        """Most recent positive underlying price reported by any source."""

        priced = [export for export in self.exports() if export.price and export.price > 0]
        if not priced:
            return None
        stamped = [export for export in priced if export.timestamp is not None]
        if stamped:
            return max(stamped, key=lambda export: export.timestamp).price
        return priced[0].price


@dataclass(frozen=True)
class PriceQuote:
    """Spot quote with the futures price used to translate chain levels."""

    spot: float
    futures: Optional[float] = None
    timestamp: Optional[datetime] = None
    source: str = "unknown"

    @property
    def spread(self) -> Optional[float]:
        if self.futures is None:
            return None
        return self.futures - self.spot


class StorageGateway(ABC):
    """Read access to persisted per-strike source exports."""

    @abstractmethod
    def latest_sources(self, product: str, expiry: Optional[str] = None) -> StrikeSources:
        """Return the latest exports for ``product`` (and ``expiry`` when given)."""


class PriceFeedGateway(ABC):
    """Spot price provider; a missing quote is tolerated by callers."""

    @abstractmethod
    def get_quote(self, product: str) -> Optional[PriceQuote]:
        """Return the current quote for ``product`` or ``None``."""


class PriceSeriesGateway(ABC):
    """Historical OHLC provider for the technical indicators."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human readable provider name."""

    @abstractmethod
    def get_history(self, symbol: str, lookback: str, interval: str) -> pd.DataFrame:
        """Return chronological bars with ``Open/High/Low/Close`` columns."""


__all__ = [
    "DataNotAvailable",
    "GatewayError",
    "PriceFeedGateway",
    "PriceQuote",
    "PriceSeriesGateway",
    "SourceExport",
    "StorageGateway",
    "StrikeSources",
]
