from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StrikeRecord(BaseModel):
    """Unified per-strike view of open interest, volume and OI deltas."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    strike_price: float = Field(alias="strike")
    call_oi: float = Field(default=0.0, alias="callOi")
    put_oi: float = Field(default=0.0, alias="putOi")
    call_volume: float = Field(default=0.0, alias="callVol")
    put_volume: float = Field(default=0.0, alias="putVol")
    call_oi_change: float = Field(default=0.0, alias="callChange")
    put_oi_change: float = Field(default=0.0, alias="putChange")

    @field_validator(
        "call_oi",
        "put_oi",
        "call_volume",
        "put_volume",
        "call_oi_change",
        "put_oi_change",
        mode="before",
    )
    @classmethod
    def coerce_float(cls, value: Any) -> float:
        return float(value or 0.0)

    @field_validator("call_oi", "put_oi", "call_volume", "put_volume")
    @classmethod
    def non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("open interest and volume must be non-negative")
        return value

    @property
    def total_oi(self) -> float:
        return self.call_oi + self.put_oi

    @property
    def total_volume(self) -> float:
        return self.call_volume + self.put_volume


class MarketSnapshot(BaseModel):
    """Inputs for one scoring pass: price context plus the merged strike set."""

    model_config = ConfigDict(frozen=True)

    current_price: float = Field(gt=0)
    vwap: float = Field(default=0.0, ge=0)
    strikes: List[StrikeRecord] = Field(default_factory=list)
    product: Optional[str] = None
    expiry: Optional[str] = None


class PriceBar(BaseModel):
    model_config = ConfigDict(frozen=True)

    open: float
    high: float
    low: float
    close: float
    timestamp: Optional[datetime] = None


__all__ = ["MarketSnapshot", "PriceBar", "StrikeRecord"]
