"""Result models produced by the analyses and the composite scorer."""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Bias = Literal["BULLISH", "BEARISH", "NEUTRAL"]
SignalDirection = Literal["BUY", "SELL", "NEUTRAL"]
SignalStrength = Literal["STRONG", "MODERATE", "MILD", "NONE"]
Sentiment = Literal["Bullish", "Bearish", "Sideway"]


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class SupportWall(_FrozenModel):
    strike: float = 0.0
    put_oi: float = 0.0
    strength: int = 0


class ResistanceWall(_FrozenModel):
    strike: float = 0.0
    call_oi: float = 0.0
    strength: int = 0


class LiquidityWalls(_FrozenModel):
    support: SupportWall = Field(default_factory=SupportWall)
    resistance: ResistanceWall = Field(default_factory=ResistanceWall)
    support_levels: List[SupportWall] = Field(default_factory=list)
    resistance_levels: List[ResistanceWall] = Field(default_factory=list)


class PCRResult(_FrozenModel):
    oi_pcr: float = 0.0
    volume_pcr: float = 0.0
    atm_pcr: float = 0.0
    signal: Bias = "NEUTRAL"
    total_put_oi: float = 0.0
    total_call_oi: float = 0.0
    total_put_volume: float = 0.0
    total_call_volume: float = 0.0
    description: str = ""


class PainPoint(_FrozenModel):
    strike: float
    total_pain: float


class MaxPainResult(_FrozenModel):
    max_pain_strike: float = 0.0
    distance_from_price: float = 0.0
    distance_percent: float = 0.0
    pain_by_strike: List[PainPoint] = Field(default_factory=list)
    signal: Bias = "NEUTRAL"
    description: str = ""


class VolumeSpike(_FrozenModel):
    strike: float
    total_volume: float
    call_volume: float
    put_volume: float
    volume_ratio: float
    is_call_dominant: bool
    near_price: bool


class VolumeAnalysis(_FrozenModel):
    total_call_volume: float = 0.0
    total_put_volume: float = 0.0
    total_volume: float = 0.0
    volume_pcr: float = 1.0
    avg_volume_per_strike: float = 0.0
    volume_spikes: List[VolumeSpike] = Field(default_factory=list)
    atm_volume_concentration: float = 0.0
    signal: Bias = "NEUTRAL"
    confidence: int = 0
    description: str = ""


class VolumeConfirmation(_FrozenModel):
    score: int = 0
    confirms: bool = True
    description: str = ""


class TechnicalIndicators(_FrozenModel):
    rsi: float = 50.0
    rsi_signal: Literal["OVERBOUGHT", "OVERSOLD", "NEUTRAL"] = "NEUTRAL"
    ma20: float = 0.0
    ma50: float = 0.0
    ma200: float = 0.0
    ma_trend: Literal["BULLISH", "BEARISH", "SIDEWAYS"] = "SIDEWAYS"
    price_vs_ma: Dict[str, bool] = Field(default_factory=dict)
    atr: float = 0.0
    atr_percent: float = 0.0
    volatility: Literal["HIGH", "MEDIUM", "LOW"] = "LOW"
    suggested_sl_distance: float = 0.0
    suggested_tp1_distance: float = 0.0
    suggested_tp2_distance: float = 0.0
    support_levels: List[float] = Field(default_factory=list)
    resistance_levels: List[float] = Field(default_factory=list)
    trend: Literal["STRONG_UP", "UP", "SIDEWAYS", "DOWN", "STRONG_DOWN"] = "SIDEWAYS"
    trend_strength: int = 50
    summary: str = ""
    synthetic: bool = False


class KeyLevels(_FrozenModel):
    max_pain: float = 0.0
    call_wall: float = 0.0
    put_wall: float = 0.0
    significant_strikes: List[float] = Field(default_factory=list)


class FactorScores(_FrozenModel):
    pcr: float = 0.0
    vwap: float = 0.0
    wall: float = 0.0
    max_pain: float = 0.0
    flow: float = 0.0
    volume: float = 0.0


class SignalFactors(_FrozenModel):
    positive: List[str] = Field(default_factory=list)
    negative: List[str] = Field(default_factory=list)


class BreakdownEntry(_FrozenModel):
    factor: str
    delta: float
    description: str


class TradingSignal(_FrozenModel):
    """Final classification of one scoring pass."""

    signal: SignalDirection
    strength: SignalStrength
    score: float
    sentiment: Sentiment
    reason: str
    summary: str
    factors: SignalFactors = Field(default_factory=SignalFactors)
    key_levels: KeyLevels = Field(default_factory=KeyLevels)
    factor_scores: FactorScores = Field(default_factory=FactorScores)
    volume_analysis: VolumeAnalysis = Field(default_factory=VolumeAnalysis)
    breakdown: List[BreakdownEntry] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    technicals: Optional[TechnicalIndicators] = None


class StrikeOIChange(_FrozenModel):
    strike: float
    call_oi: float
    put_oi: float
    prev_call_oi: float
    prev_put_oi: float
    call_change: float
    put_change: float
    call_change_pct: float
    put_change_pct: float


class OIChangeAnalysis(_FrozenModel):
    changes: List[StrikeOIChange] = Field(default_factory=list)
    total_call_change: float = 0.0
    total_put_change: float = 0.0
    total_call_change_pct: float = 0.0
    total_put_change_pct: float = 0.0
    net_call_bias: float = 0.0
    signal: Bias = "NEUTRAL"
    significant_changes: List[StrikeOIChange] = Field(default_factory=list)
    description: str = ""


class OIBuildup(_FrozenModel):
    call_buildup: float = 0.0
    put_buildup: float = 0.0
    near_price_changes: List[StrikeOIChange] = Field(default_factory=list)
    signal: Bias = "NEUTRAL"
    description: str = ""


class KeyLevelSet(_FrozenModel):
    support: List[float] = Field(default_factory=list)
    resistance: List[float] = Field(default_factory=list)


class SpreadInfo(_FrozenModel):
    futures_price: float
    spot_price: float
    spread: float
    spread_percent: float


class ConvertedLevels(_FrozenModel):
    """Futures-chain levels translated onto the spot price scale."""

    spread: float
    put_wall: float
    call_wall: float
    max_pain: float
    support_levels: List[float] = Field(default_factory=list)
    resistance_levels: List[float] = Field(default_factory=list)



class SpreadStatus(_FrozenModel):
    status: Literal["NORMAL", "HIGH", "LOW"]
    description: str


class PriceZone(_FrozenModel):
    start: float
    end: float
    description: str = ""


class TradingZones(_FrozenModel):
    """Buy and sell zones around the spot-scale walls and where spot sits now."""

    buy_zone: PriceZone
    sell_zone: PriceZone
    current_position: Literal["BUY_ZONE", "SELL_ZONE", "NEUTRAL_ZONE"]
    distance_to_support: float
    distance_to_resistance: float


class GammaPoint(_FrozenModel):
    strike: float
    gex: float
    call_gex: float
    put_gex: float


class GammaExposure(_FrozenModel):
    total_gex: float = 0.0
    total_call_gex: float = 0.0
    total_put_gex: float = 0.0
    zero_gamma_level: Optional[float] = None
    profile: List[GammaPoint] = Field(default_factory=list)
    regime: Literal["POSITIVE", "NEGATIVE", "FLAT"] = "FLAT"
    interpretation: str = ""

__all__ = [
    "Bias",
    "BreakdownEntry",
    "ConvertedLevels",
    "FactorScores",
    "GammaExposure",
    "GammaPoint",
    "KeyLevelSet",
    "KeyLevels",
    "LiquidityWalls",
    "MaxPainResult",
    "OIBuildup",
    "OIChangeAnalysis",
    "PCRResult",
    "PainPoint",
    "PriceZone",
    "ResistanceWall",
    "Sentiment",
    "SignalDirection",
    "SignalFactors",
    "SignalStrength",
    "SpreadInfo",
    "SpreadStatus",
    "StrikeOIChange",
    "SupportWall",
    "TechnicalIndicators",
    "TradingSignal",
    "TradingZones",
    "VolumeAnalysis",
    "VolumeConfirmation",
    "VolumeSpike",
]
