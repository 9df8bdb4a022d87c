"""Merge per-source strike exports into one strike set."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from oi_analytics.models import StrikeRecord

LOGGER = logging.getLogger(__name__)

SourceRow = Union[StrikeRecord, Mapping[str, Any]]

OI_FIELDS: Tuple[str, ...] = ("call_oi", "put_oi")
VOLUME_FIELDS: Tuple[str, ...] = ("call_volume", "put_volume")
CHANGE_FIELDS: Tuple[str, ...] = ("call_oi_change", "put_oi_change")


def _as_record(row: SourceRow) -> StrikeRecord:
    if isinstance(row, StrikeRecord):
        return row
    return StrikeRecord.model_validate(dict(row))


def _apply_source(
    merged: Dict[float, Dict[str, float]],
    rows: Optional[Iterable[SourceRow]],
    fields: Tuple[str, ...],
) -> None:
    if not rows:
        return
    for row in rows:
        record = _as_record(row)
        slot = merged.setdefault(record.strike_price, {})
        for field in fields:
            slot[field] = getattr(record, field)


def merge_strike_sources(
    oi: Optional[Iterable[SourceRow]] = None,
    volume: Optional[Iterable[SourceRow]] = None,
    oi_change: Optional[Iterable[SourceRow]] = None,
) -> List[StrikeRecord]:
    """Join up to three per-strike sources into ascending ``StrikeRecord`` rows.

    Each source only contributes its own fields: the OI export supplies
    ``call_oi``/``put_oi``, the volume export ``call_volume``/``put_volume``
    and the change export the two ``*_oi_change`` deltas. A strike present
    in any source appears exactly once; fields a source did not provide stay
    at zero. Missing sources are simply skipped.
    """

    merged: Dict[float, Dict[str, float]] = {}
    _apply_source(merged, oi, OI_FIELDS)
    _apply_source(merged, volume, VOLUME_FIELDS)
    _apply_source(merged, oi_change, CHANGE_FIELDS)

    records = [
        StrikeRecord(strike_price=strike, **fields)
        for strike, fields in sorted(merged.items())
    ]
    LOGGER.debug("Merged %d strikes from OI/volume/change sources", len(records))
    return records


__all__ = ["merge_strike_sources"]
