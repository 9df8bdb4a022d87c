"""Command line interface for the OI signal analyzer."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Optional, Sequence

from oi_analytics.config import AppSettings, get_settings
from oi_analytics.gateways import GatewayError, JsonSnapshotGateway, create_price_series_gateway
from oi_analytics.models import serialize_model
from oi_analytics.pipeline import AnalysisReport, SignalPipeline

LOGGER = logging.getLogger("oi_analytics.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Score options-chain OI snapshots into a trading signal")
    parser.add_argument("command", choices=["analyze"], help="Command to execute")
    parser.add_argument(
        "--snapshot",
        type=Path,
        default=None,
        help="JSON export with OI/volume/change sources (defaults to gateways.snapshot_path)",
    )
    parser.add_argument("--product", type=str, default="GC", help="Product code, e.g. GC")
    parser.add_argument("--expiry", type=str, default=None, help="Expiry to analyze (defaults to latest)")
    parser.add_argument("--env", type=str, default=None, help="Settings environment (defaults to APP_ENV or dev)")
    parser.add_argument(
        "--price-series",
        choices=["yfinance", "synthetic", "none"],
        default=None,
        help="Price history provider for technicals (defaults to gateways.price_series)",
    )
    parser.add_argument("--json", action="store_true", help="Print the full report as JSON")
    return parser


def _configure_logging(settings: AppSettings) -> None:
    root = logging.getLogger("oi_analytics")
    root.setLevel(settings.logging.level)
    if not any(isinstance(existing, logging.FileHandler) for existing in root.handlers):
        log_dir = Path(settings.logging.directory)
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_dir / "oi_signal.log", encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)
    logging.basicConfig(level=settings.logging.level)


def _display(report: AnalysisReport) -> None:
    signal = report.signal
    print(f"{report.product} {report.expiry or ''} @ {report.snapshot.current_price:g}".strip())
    print(f"Signal: {signal.signal} ({signal.strength}) score={signal.score:g} sentiment={signal.sentiment}")
    print()
    print(signal.summary)
    if signal.breakdown:
        print()
        print("Breakdown:")
        for entry in signal.breakdown:
            print(f"  [{entry.delta:+g}] {entry.factor}: {entry.description}")
    if report.spot_levels is not None:
        levels = report.spot_levels
        print()
        print(
            f"Spot levels (spread {levels.spread:+g}): put wall {levels.put_wall:g}, "
            f"call wall {levels.call_wall:g}, max pain {levels.max_pain:g}"
        )
    if report.spread_status is not None:
        print(report.spread_status.description)
    if report.trading_zones is not None:
        zones = report.trading_zones
        print(f"{zones.buy_zone.description} | {zones.sell_zone.description} | now: {zones.current_position}")
    gamma = report.gamma
    if gamma.profile:
        print()
        print(f"GEX {gamma.total_gex:,.0f}, zero gamma near {gamma.zero_gamma_level:g}: {gamma.interpretation}")
    for warning in signal.warnings:
        print(f"WARNING: {warning}")


def _technical_overrides(settings: AppSettings, provider: str) -> AppSettings:
    """Fold the price-series choice into the technical settings.

    ``none`` turns technicals off; ``synthetic`` opts into generated bars
    even where the environment disallows them.
    """

    if provider == "none":
        update = {"enabled": False}
    elif provider == "synthetic":
        update = {"enabled": True, "allow_synthetic": True}
    else:
        return settings
    technicals = settings.technicals.model_copy(update=update)
    return settings.model_copy(update={"technicals": technicals})


def run_from_args(argv: Sequence[str] | None = None, settings: Optional[AppSettings] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = settings or get_settings(args.env)
    _configure_logging(settings)

    snapshot_path = args.snapshot or settings.gateways.snapshot_path
    if snapshot_path is None:
        parser.error("--snapshot is required when gateways.snapshot_path is not configured")

    provider = args.price_series or settings.gateways.price_series
    settings = _technical_overrides(settings, provider)
    gateway = JsonSnapshotGateway(snapshot_path)
    price_series = create_price_series_gateway(provider)
    pipeline = SignalPipeline(gateway, price_feed=gateway, price_series=price_series, settings=settings)

    try:
        report = pipeline.run(args.product, args.expiry)
    except GatewayError as exc:
        LOGGER.error("Analysis failed for %s: %s", args.product, exc)
        return 1

    if args.json:
        print(json.dumps(serialize_model(report), indent=2))
    else:
        _display(report)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    return run_from_args(argv)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
