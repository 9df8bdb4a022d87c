"""Storage and price-feed gateway backed by a JSON export file.

Expected layout (a single snapshot object, or ``{"snapshots": [...]}``)::

    {
      "product": "GC",
      "expiry": "2025-02-26",
      "sources": {
        "oi": {"price": 2750.5, "timestamp": "2025-02-20T14:00:00Z", "strikes": [...]},
        "volume": {...},
        "oi_change": {...}
      },
      "previous_oi": {"strikes": [...]},
      "quote": {"spot": 2735.2, "futures": 2750.5, "source": "manual"}
    }

Strike rows accept either ``strike_price``/``call_oi`` style keys or the
``strike``/``callOi``/``putVol``/``callChange`` export keys.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .base import (
    DataNotAvailable,
    GatewayError,
    PriceFeedGateway,
    PriceQuote,
    SourceExport,
    StorageGateway,
    StrikeSources,
)

LOGGER = logging.getLogger(__name__)

SOURCE_KEYS = ("oi", "volume", "oi_change")


def _parse_timestamp(raw: Any) -> Optional[datetime]:
    if raw in (None, ""):
        return None
    if isinstance(raw, datetime):
        return raw
    try:
        return datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError as exc:
        raise GatewayError(f"Invalid timestamp in snapshot export: {raw!r}") from exc


def _parse_export(raw: Optional[Mapping[str, Any]]) -> Optional[SourceExport]:
    if raw is None:
        return None
    rows = raw.get("strikes")
    if rows is None:
        raise GatewayError("Source export is missing its 'strikes' list")
    price = raw.get("price")
    return SourceExport(
        rows=list(rows),
        price=float(price) if price is not None else None,
        timestamp=_parse_timestamp(raw.get("timestamp")),
    )


class JsonSnapshotGateway(StorageGateway, PriceFeedGateway):
    """Serve strike sources and quotes from an exported JSON document."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._snapshots: Optional[List[Dict[str, Any]]] = None

    def _load(self) -> List[Dict[str, Any]]:
        if self._snapshots is not None:
            return self._snapshots
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                document = json.load(handle)
        except FileNotFoundError as exc:
            raise GatewayError(f"Snapshot export not found at {self.path}") from exc
        except json.JSONDecodeError as exc:
            raise GatewayError(f"Snapshot export at {self.path} is not valid JSON: {exc}") from exc

        if isinstance(document, Mapping) and "snapshots" in document:
            snapshots = list(document["snapshots"])
        elif isinstance(document, Mapping):
            snapshots = [dict(document)]
        else:
            raise GatewayError(f"Snapshot export at {self.path} must contain an object at the root")
        LOGGER.debug("Loaded %d snapshot(s) from %s", len(snapshots), self.path)
        self._snapshots = snapshots
        return snapshots

    def _select(self, product: str, expiry: Optional[str]) -> Dict[str, Any]:
        matches = [
            snapshot
            for snapshot in self._load()
            if str(snapshot.get("product", "")).upper() == product.upper()
            and (expiry is None or str(snapshot.get("expiry")) == expiry)
        ]
        if not matches:
            raise DataNotAvailable(f"No snapshot for product={product} expiry={expiry} in {self.path}")
        return matches[-1]

    def latest_sources(self, product: str, expiry: Optional[str] = None) -> StrikeSources:
        snapshot = self._select(product, expiry)
        sources = snapshot.get("sources") or {}
        exports = {key: _parse_export(sources.get(key)) for key in SOURCE_KEYS}
        if exports["oi"] is None:
            raise DataNotAvailable(f"Snapshot for {product} has no open interest export")
        return StrikeSources(
            product=product.upper(),
            expiry=str(snapshot["expiry"]) if snapshot.get("expiry") is not None else expiry,
            oi=exports["oi"],
            volume=exports["volume"],
            oi_change=exports["oi_change"],
            previous_oi=_parse_export(snapshot.get("previous_oi")),
            metadata={"path": str(self.path)},
        )

    def get_quote(self, product: str) -> Optional[PriceQuote]:
        try:
            snapshot = self._select(product, None)
        except DataNotAvailable:
            return None
        raw = snapshot.get("quote")
        if not raw or raw.get("spot") is None:
            return None
        futures = raw.get("futures")
        return PriceQuote(
            spot=float(raw["spot"]),
            futures=float(futures) if futures is not None else None,
            timestamp=_parse_timestamp(raw.get("timestamp")),
            source=str(raw.get("source", "json")),
        )


__all__ = ["JsonSnapshotGateway"]
