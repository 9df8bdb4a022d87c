from __future__ import annotations

import copy
import json
import logging

import pytest

from oi_analytics.cli import build_parser, run_from_args
from oi_analytics.config.loader import DEFAULT_SETTINGS, AppSettings

EXPORT = {
    "product": "GC",
    "expiry": "2025-02-26",
    "sources": {
        "oi": {
            "price": 2750.5,
            "strikes": [
                {"strike": 2700, "callOi": 1234, "putOi": 5678},
                {"strike": 2750, "callOi": 3456, "putOi": 2345},
                {"strike": 2800, "callOi": 4567, "putOi": 1234},
            ],
        },
        "volume": {
            "strikes": [
                {"strike": 2700, "callVol": 100, "putVol": 200},
                {"strike": 2750, "callVol": 250, "putVol": 180},
                {"strike": 2800, "callVol": 300, "putVol": 100},
            ]
        },
    },
    "quote": {"spot": 2735.2, "futures": 2750.5, "source": "manual"},
}


@pytest.fixture(autouse=True)
def detach_log_handlers():
    yield
    logger = logging.getLogger("oi_analytics")
    for handler in list(logger.handlers):
        if isinstance(handler, logging.FileHandler):
            logger.removeHandler(handler)
            handler.close()


@pytest.fixture
def settings(tmp_path) -> AppSettings:
    data = copy.deepcopy(DEFAULT_SETTINGS)
    data["env"] = "test"
    data["logging"]["directory"] = str(tmp_path / "logs")
    data["technicals"]["synthetic_seed"] = 11
    return AppSettings.model_validate(data)


@pytest.fixture
def export_path(tmp_path):
    path = tmp_path / "export.json"
    path.write_text(json.dumps(EXPORT), encoding="utf-8")
    return path


def test_parser_defaults():
    args = build_parser().parse_args(["analyze", "--snapshot", "export.json"])

    assert args.product == "GC"
    assert args.expiry is None
    assert args.price_series is None
    assert args.json is False


def test_analyze_prints_narrative(settings, export_path, tmp_path, capsys):
    exit_code = run_from_args(
        ["analyze", "--snapshot", str(export_path), "--price-series", "none"], settings=settings
    )

    output = capsys.readouterr().out
    assert exit_code == 0
    assert "Signal: SELL (MODERATE) score=40 sentiment=Bearish" in output
    assert "Summary: solid SELL signal" in output
    assert "Spot levels (spread +15.3)" in output
    assert "Spread normal (15.30 points)" in output
    assert "zero gamma near" in output
    assert "WARNING" not in output
    assert (tmp_path / "logs" / "oi_signal.log").exists()


def test_analyze_json_output(settings, export_path, capsys):
    exit_code = run_from_args(
        ["analyze", "--snapshot", str(export_path), "--price-series", "synthetic", "--json"], settings=settings
    )

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert payload["product"] == "GC"
    assert payload["signal"]["signal"] == "SELL"
    assert payload["signal"]["score"] == 40
    assert payload["technicals"]["synthetic"] is True
    assert payload["spread"]["spread"] == 15.3
    assert payload["spread_status"]["status"] == "NORMAL"
    assert payload["trading_zones"]["current_position"] in {"BUY_ZONE", "SELL_ZONE", "NEUTRAL_ZONE"}
    assert payload["gamma"]["regime"] in {"POSITIVE", "NEGATIVE"}


def test_missing_product_returns_error_code(settings, export_path, caplog):
    with caplog.at_level(logging.ERROR, logger="oi_analytics.cli"):
        exit_code = run_from_args(
            ["analyze", "--snapshot", str(export_path), "--product", "SI", "--price-series", "none"],
            settings=settings,
        )

    assert exit_code == 1
    assert "Analysis failed for SI" in caplog.text


def test_snapshot_path_is_required(settings):
    with pytest.raises(SystemExit):
        run_from_args(["analyze"], settings=settings)
