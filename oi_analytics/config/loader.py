"""Environment aware configuration loader for the OI signal pipeline."""

from __future__ import annotations

import copy
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Mapping, MutableMapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from oi_analytics.scoring.config import DEFAULT_SIGNAL_CONFIG

DEFAULT_SETTINGS: Dict[str, Any] = {
    "products": {
        "GC": "GC=F",
    },
    "scoring": {
        "enabled": list(DEFAULT_SIGNAL_CONFIG["enabled"]),
        "weights": dict(DEFAULT_SIGNAL_CONFIG["weights"]),
        "score_bounds": dict(DEFAULT_SIGNAL_CONFIG["score_bounds"]),
    },
    "analysis": {
        "parallel": True,
        "max_workers": 5,
        "oi_change_threshold_pct": 10.0,
        "key_level_count": 5,
        "buildup_range_pct": 3.0,
        "gex_days_to_expiry": 30.0,
        "gex_iv": 0.15,
    },
    "technicals": {
        "enabled": True,
        "lookback": "1mo",
        "interval": "1h",
        "allow_synthetic": True,
        "synthetic_seed": None,
        "rsi_period": 14,
        "atr_period": 14,
    },
    "gateways": {
        "price_series": "yfinance",
        "snapshot_path": None,
    },
    "logging": {
        "level": "INFO",
        "directory": "logs",
    },
}

CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"
CONFIG_DIR_VARIABLE = "OI_SIGNAL_CONFIG_DIR"
ENVIRONMENT_VARIABLE = "APP_ENV"


class ScoringSettings(BaseModel):
    """Scoring configuration wrapper for the composite signal scorer."""

    model_config = ConfigDict(extra="allow")

    enabled: List[str] = Field(default_factory=lambda: list(DEFAULT_SIGNAL_CONFIG.get("enabled", [])))
    weights: Dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_SIGNAL_CONFIG.get("weights", {})))
    score_bounds: Dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_SIGNAL_CONFIG.get("score_bounds", {}))
    )
    extra: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _capture_extra(cls, values: Any) -> Any:
        if not isinstance(values, Mapping):
            return values
        values = dict(values)
        known_keys = {"enabled", "weights", "score_bounds", "extra"}
        extras = {key: values.pop(key) for key in list(values) if key not in known_keys}
        merged_extra = dict(values.get("extra") or {})
        merged_extra.update(extras)
        values["extra"] = merged_extra
        return values

    @field_validator("weights", mode="before")
    @classmethod
    def _coerce_weights(cls, value: Mapping[str, Any]) -> Dict[str, float]:
        return {key: float(val) for key, val in dict(value or {}).items()}

    def to_engine_config(self) -> Dict[str, Any]:
        config = {
            "enabled": list(self.enabled),
            "weights": dict(self.weights),
            "score_bounds": dict(self.score_bounds),
        }
        config.update(copy.deepcopy(self.extra))
        return config


class AnalysisSettings(BaseModel):
    parallel: bool = True
    max_workers: int = Field(default=5, ge=1)
    oi_change_threshold_pct: float = 10.0
    key_level_count: int = Field(default=5, ge=1)
    buildup_range_pct: float = 3.0
    gex_days_to_expiry: float = Field(default=30.0, gt=0)
    gex_iv: float = Field(default=0.15, gt=0)


class TechnicalSettings(BaseModel):
    enabled: bool = True
    lookback: str = "1mo"
    interval: str = "1h"
    allow_synthetic: bool = True
    synthetic_seed: Optional[int] = None
    rsi_period: int = Field(default=14, ge=1)
    atr_period: int = Field(default=14, ge=1)


class GatewaySettings(BaseModel):
    price_series: str = "yfinance"
    snapshot_path: Optional[str] = None

    @field_validator("price_series")
    @classmethod
    def _known_price_series(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in {"yfinance", "synthetic", "none"}:
            raise ValueError(f"Unsupported price series provider: {value}")
        return value


class LoggingSettings(BaseModel):
    level: str = "INFO"
    directory: str = "logs"

    @field_validator("level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


class AppSettings(BaseModel):
    """Fully resolved application settings loaded from YAML."""

    model_config = ConfigDict(frozen=True)

    env: str
    products: Dict[str, str]
    scoring: ScoringSettings
    analysis: AnalysisSettings
    technicals: TechnicalSettings
    gateways: GatewaySettings
    logging: LoggingSettings

    @field_validator("env")
    @classmethod
    def _normalize_env(cls, value: str) -> str:
        return value.lower()

    @field_validator("products", mode="before")
    @classmethod
    def _coerce_products(cls, value: Mapping[str, Any]) -> Dict[str, str]:
        return {str(key).upper(): str(symbol) for key, symbol in dict(value or {}).items()}

    def price_symbol(self, product: str) -> str:
        """Price-series ticker for ``product``, falling back to the product code itself."""

        return self.products.get(product.upper(), product.upper())

    def scoring_dict(self) -> Dict[str, Any]:
        return self.scoring.to_engine_config()


def _deep_merge(base: MutableMapping[str, Any], overrides: Mapping[str, Any]) -> MutableMapping[str, Any]:
    for key, value in overrides.items():
        if isinstance(value, Mapping):
            existing = base.get(key)
            if isinstance(existing, MutableMapping):
                base[key] = _deep_merge(copy.deepcopy(existing), value)
            else:
                base[key] = copy.deepcopy(value)
        else:
            base[key] = copy.deepcopy(value)
    return base


def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle.read()) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {path} must contain a mapping at the root.")
    return data


def config_dir() -> Path:
    """Directory holding the per-environment YAML files.

    ``OI_SIGNAL_CONFIG_DIR`` overrides the source-checkout default, which an
    installed package does not ship.
    """

    override = os.getenv(CONFIG_DIR_VARIABLE, "").strip()
    return Path(override).expanduser() if override else CONFIG_DIR


def _build_settings(env: str, directory: Path) -> AppSettings:
    config_path = directory / f"{env}.yaml"
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file for environment '{env}' not found at {config_path}")

    merged = copy.deepcopy(DEFAULT_SETTINGS)
    merged = _deep_merge(merged, _load_yaml(config_path))
    merged["env"] = env
    return AppSettings.model_validate(merged)


@lru_cache(maxsize=None)
def _cached_settings(env: str, directory: Path) -> AppSettings:
    return _build_settings(env, directory)


def get_settings(env: Optional[str] = None) -> AppSettings:
    """Load settings for the requested environment (default: APP_ENV or 'dev')."""

    resolved_env = (env or os.getenv(ENVIRONMENT_VARIABLE, "dev")).strip().lower()
    return _cached_settings(resolved_env, config_dir())


def reset_settings_cache() -> None:
    """Clear the cached settings, primarily used during tests."""

    _cached_settings.cache_clear()


__all__ = [
    "AnalysisSettings",
    "AppSettings",
    "CONFIG_DIR",
    "CONFIG_DIR_VARIABLE",
    "ENVIRONMENT_VARIABLE",
    "GatewaySettings",
    "LoggingSettings",
    "ScoringSettings",
    "TechnicalSettings",
    "config_dir",
    "get_settings",
    "reset_settings_cache",
]
