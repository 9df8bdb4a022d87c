import pytest
from pydantic import ValidationError

from oi_analytics.config import get_settings, reset_settings_cache
from oi_analytics.config.loader import CONFIG_DIR_VARIABLE, ENVIRONMENT_VARIABLE, GatewaySettings
from oi_analytics.scoring import CompositeSignalScorer


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch):
    monkeypatch.delenv(CONFIG_DIR_VARIABLE, raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()


def test_dev_settings_load(monkeypatch):
    monkeypatch.setenv(ENVIRONMENT_VARIABLE, "dev")
    settings = get_settings()

    assert settings.env == "dev"
    assert settings.price_symbol("gc") == "GC=F"
    assert settings.price_symbol("SI") == "SI=F"
    assert settings.analysis.parallel is True
    assert settings.analysis.key_level_count == 5
    assert settings.technicals.synthetic_seed == 7
    assert settings.gateways.price_series == "yfinance"
    assert settings.logging.level == "DEBUG"
    assert settings.scoring.score_bounds["max"] == 100.0


def test_prod_settings_override(monkeypatch):
    monkeypatch.setenv(ENVIRONMENT_VARIABLE, "prod")
    settings = get_settings()

    assert settings.analysis.max_workers == 8
    assert settings.analysis.oi_change_threshold_pct == 15.0
    assert settings.technicals.allow_synthetic is False
    assert settings.technicals.lookback == "3mo"
    assert settings.scoring.weights["flow"] == 0.8
    assert settings.scoring.weights["pcr"] == 1.0
    assert settings.price_symbol("SI") == "SI"


def test_scoring_extras_reach_the_engine(monkeypatch):
    monkeypatch.setenv(ENVIRONMENT_VARIABLE, "prod")
    config = get_settings().scoring_dict()

    assert config["wall"] == {"proximity_pct": 15.0}
    scorer = CompositeSignalScorer(config)
    assert scorer.config["wall"]["proximity_pct"] == 15.0
    assert scorer.config["wall"]["breakout_delta"] == 25.0


def test_explicit_env_wins_and_is_cached(monkeypatch):
    monkeypatch.setenv(ENVIRONMENT_VARIABLE, "prod")

    assert get_settings("DEV").env == "dev"
    assert get_settings("dev") is get_settings("dev")


def test_missing_environment_raises(monkeypatch):
    monkeypatch.setenv(ENVIRONMENT_VARIABLE, "unknown")
    with pytest.raises(FileNotFoundError):
        get_settings()


def test_unknown_price_series_is_rejected():
    with pytest.raises(ValidationError):
        GatewaySettings(price_series="bloomberg")


def test_config_directory_can_be_overridden(monkeypatch, tmp_path):
    (tmp_path / "staging.yaml").write_text(
        "products:\n  MGC: \"MGC=F\"\nanalysis:\n  gex_iv: 0.2\n", encoding="utf-8"
    )
    monkeypatch.setenv(CONFIG_DIR_VARIABLE, str(tmp_path))

    settings = get_settings("staging")

    assert settings.env == "staging"
    assert settings.price_symbol("MGC") == "MGC=F"
    assert settings.analysis.gex_iv == 0.2
    assert settings.analysis.gex_days_to_expiry == 30.0
    with pytest.raises(FileNotFoundError):
        get_settings("dev")
