"""Gateway implementations for snapshot storage, quotes and price history."""

from __future__ import annotations

from importlib import import_module
from typing import Dict, Optional, Type

from .base import (
    DataNotAvailable,
    GatewayError,
    PriceFeedGateway,
    PriceQuote,
    PriceSeriesGateway,
    SourceExport,
    StorageGateway,
    StrikeSources,
)
from .json_file import JsonSnapshotGateway

_PRICE_SERIES_REGISTRY: Dict[str, str] = {
    "yfinance": "oi_analytics.gateways.yfinance:YFinancePriceSeriesGateway",
}


def create_price_series_gateway(provider: str) -> Optional[PriceSeriesGateway]:
    """Instantiate a price-series gateway by name.

    ``"synthetic"`` and ``"none"`` have no backing gateway and return ``None``.

    Raises:
        KeyError: If the provider name is unknown.
    """

    normalized = provider.strip().lower()
    if normalized in {"synthetic", "none"}:
        return None
    try:
        dotted_path = _PRICE_SERIES_REGISTRY[normalized]
    except KeyError as exc:
        raise KeyError(f"Unknown price series provider: {provider}") from exc

    module_name, class_name = dotted_path.split(":", 1)
    module = import_module(module_name)
    gateway_cls: Type[PriceSeriesGateway] = getattr(module, class_name)
    return gateway_cls()


__all__ = [
    "DataNotAvailable",
    "GatewayError",
    "JsonSnapshotGateway",
    "PriceFeedGateway",
    "PriceQuote",
    "PriceSeriesGateway",
    "SourceExport",
    "StorageGateway",
    "StrikeSources",
    "create_price_series_gateway",
]
