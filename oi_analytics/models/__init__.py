from .results import (
    BreakdownEntry,
    ConvertedLevels,
    FactorScores,
    GammaExposure,
    GammaPoint,
    KeyLevels,
    KeyLevelSet,
    LiquidityWalls,
    MaxPainResult,
    OIBuildup,
    OIChangeAnalysis,
    PainPoint,
    PCRResult,
    PriceZone,
    ResistanceWall,
    SignalFactors,
    SpreadInfo,
    SpreadStatus,
    StrikeOIChange,
    SupportWall,
    TechnicalIndicators,
    TradingSignal,
    TradingZones,
    VolumeAnalysis,
    VolumeConfirmation,
    VolumeSpike,
)
from .serialization import serialize_model
from .strike import MarketSnapshot, PriceBar, StrikeRecord


__all__ = [
    "BreakdownEntry",
    "ConvertedLevels",
    "FactorScores",
    "GammaExposure",
    "GammaPoint",
    "KeyLevels",
    "KeyLevelSet",
    "LiquidityWalls",
    "MarketSnapshot",
    "MaxPainResult",
    "OIBuildup",
    "OIChangeAnalysis",
    "PainPoint",
    "PCRResult",
    "PriceBar",
    "PriceZone",
    "ResistanceWall",
    "SignalFactors",
    "SpreadInfo",
    "SpreadStatus",
    "StrikeOIChange",
    "StrikeRecord",
    "SupportWall",
    "TechnicalIndicators",
    "TradingSignal",
    "TradingZones",
    "VolumeAnalysis",
    "VolumeConfirmation",
    "VolumeSpike",
    "serialize_model",
]
