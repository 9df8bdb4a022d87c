"""Pipeline orchestration: sources -> merged chain -> analyses -> signal."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from oi_analytics.analysis import (
    analyze_oi_buildup_near_price,
    analyze_oi_changes,
    analyze_volume,
    calculate_gex,
    calculate_max_pain,
    calculate_pcr,
    calculate_spread,
    calculate_vwap,
    convert_levels,
    derive_oi_change_records,
    find_key_levels,
    get_liquidity_walls,
    get_spread_status,
    get_trading_zones,
    merge_strike_sources,
)
from oi_analytics.config import AppSettings, get_settings
from oi_analytics.gateways import (
    DataNotAvailable,
    GatewayError,
    PriceFeedGateway,
    PriceQuote,
    PriceSeriesGateway,
    StorageGateway,
    StrikeSources,
)
from oi_analytics.models import (
    ConvertedLevels,
    GammaExposure,
    KeyLevelSet,
    LiquidityWalls,
    MarketSnapshot,
    MaxPainResult,
    OIBuildup,
    OIChangeAnalysis,
    PCRResult,
    SpreadInfo,
    SpreadStatus,
    StrikeRecord,
    TechnicalIndicators,
    TradingSignal,
    TradingZones,
    VolumeAnalysis,
)
from oi_analytics.scoring import CompositeSignalScorer, apply_technical_warnings
from oi_analytics.technicals import TechnicalIndicatorEngine, generate_synthetic_bars

LOGGER = logging.getLogger(__name__)


class AnalysisReport(BaseModel):
    """Everything computed for one product/expiry run."""

    model_config = ConfigDict(frozen=True)

    product: str
    expiry: Optional[str] = None
    snapshot: MarketSnapshot
    walls: LiquidityWalls
    pcr: PCRResult
    max_pain: MaxPainResult
    volume: VolumeAnalysis
    key_levels: KeyLevelSet
    gamma: GammaExposure
    oi_changes: Optional[OIChangeAnalysis] = None
    oi_buildup: Optional[OIBuildup] = None
    technicals: Optional[TechnicalIndicators] = None
    spread: Optional[SpreadInfo] = None
    spot_levels: Optional[ConvertedLevels] = None
    spread_status: Optional[SpreadStatus] = None
    trading_zones: Optional[TradingZones] = None
    signal: TradingSignal


class SignalPipeline:
    """Fetch the latest exports for a product and turn them into a signal."""

    def __init__(
        self,
        storage: StorageGateway,
        *,
        price_feed: Optional[PriceFeedGateway] = None,
        price_series: Optional[PriceSeriesGateway] = None,
        settings: Optional[AppSettings] = None,
        scorer: Optional[CompositeSignalScorer] = None,
        technical_engine: Optional[TechnicalIndicatorEngine] = None,
    ) -> None:
        self.storage = storage
        self.price_feed = price_feed
        self.price_series = price_series
        self.settings = settings or get_settings()
        self.scorer = scorer or CompositeSignalScorer(self.settings.scoring_dict())
        technical_settings = self.settings.technicals
        self.technical_engine = technical_engine or TechnicalIndicatorEngine(
            rsi_period=technical_settings.rsi_period,
            atr_period=technical_settings.atr_period,
        )

    def run(self, product: str, expiry: Optional[str] = None) -> AnalysisReport:
        product = product.upper()
        LOGGER.info("Running OI signal analysis for %s expiry=%s", product, expiry or "latest")

        sources = self.storage.latest_sources(product, expiry)
        if sources.oi is None:
            raise DataNotAvailable(f"No open interest export for {product}")

        current_oi = merge_strike_sources(oi=sources.oi.rows)
        previous_oi = merge_strike_sources(oi=sources.previous_oi.rows) if sources.previous_oi else None
        strikes = merge_strike_sources(
            oi=sources.oi.rows,
            volume=sources.volume.rows if sources.volume else None,
            oi_change=self._change_rows(sources, current_oi, previous_oi),
        )
        LOGGER.info("Merged %d strikes for %s", len(strikes), product)

        quote = self._quote(product)
        current_price = self._resolve_price(sources, quote)
        snapshot = MarketSnapshot(
            current_price=current_price,
            vwap=calculate_vwap(strikes),
            strikes=strikes,
            product=product,
            expiry=sources.expiry,
        )

        analyses = self._run_analyses(snapshot)
        signal = self.scorer.score(
            snapshot,
            walls=analyses["walls"],
            pcr=analyses["pcr"],
            max_pain=analyses["max_pain"],
            volume=analyses["volume"],
        )
        LOGGER.info("Signal for %s: %s %s (score %.1f)", product, signal.signal, signal.strength, signal.score)

        oi_changes = oi_buildup = None
        if previous_oi is not None:
            analysis_settings = self.settings.analysis
            oi_changes = analyze_oi_changes(current_oi, previous_oi, analysis_settings.oi_change_threshold_pct)
            oi_buildup = analyze_oi_buildup_near_price(
                oi_changes.changes, current_price, analysis_settings.buildup_range_pct
            )

        technicals = self._technicals(product, current_price)
        if technicals is not None:
            signal = apply_technical_warnings(signal, technicals)

        spread = spot_levels = spread_status = trading_zones = None
        if quote is not None and quote.futures is not None:
            spread = calculate_spread(quote.futures, quote.spot)
            spot_levels = convert_levels(
                signal.key_levels,
                spread.spread,
                analyses["key_levels"].support,
                analyses["key_levels"].resistance,
            )
            spread_status = get_spread_status(spread.spread)
            trading_zones = get_trading_zones(spot_levels, quote.spot)

        return AnalysisReport(
            product=product,
            expiry=sources.expiry,
            snapshot=snapshot,
            walls=analyses["walls"],
            pcr=analyses["pcr"],
            max_pain=analyses["max_pain"],
            volume=analyses["volume"],
            key_levels=analyses["key_levels"],
            gamma=analyses["gamma"],
            oi_changes=oi_changes,
            oi_buildup=oi_buildup,
            technicals=technicals,
            spread=spread,
            spot_levels=spot_levels,
            spread_status=spread_status,
            trading_zones=trading_zones,
            signal=signal,
        )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------
    @staticmethod
    def _change_rows(
        sources: StrikeSources,
        current_oi: List[StrikeRecord],
        previous_oi: Optional[List[StrikeRecord]],
    ):
        if sources.oi_change is not None:
            return sources.oi_change.rows
        if previous_oi is not None:
            LOGGER.info("No OI change export; deriving changes from the previous OI snapshot")
            return derive_oi_change_records(current_oi, previous_oi)
        return None

    def _quote(self, product: str) -> Optional[PriceQuote]:
        if self.price_feed is None:
            return None
        try:
            return self.price_feed.get_quote(product)
        except GatewayError as exc:
            LOGGER.warning("Price feed unavailable for %s: %s", product, exc)
            return None

    @staticmethod
    def _resolve_price(sources: StrikeSources, quote: Optional[PriceQuote]) -> float:
        price = sources.latest_price()
        if price:
            return price
        if quote is not None:
            return quote.futures if quote.futures is not None else quote.spot
        raise DataNotAvailable(f"No current price available for {sources.product}")

    def _run_analyses(self, snapshot: MarketSnapshot) -> Dict[str, Any]:
        strikes = snapshot.strikes
        price = snapshot.current_price
        analysis_settings = self.settings.analysis
        tasks: Dict[str, Callable[[], Any]] = {
            "walls": lambda: get_liquidity_walls(strikes),
            "pcr": lambda: calculate_pcr(strikes, price),
            "max_pain": lambda: calculate_max_pain(strikes, price),
            "volume": lambda: analyze_volume(strikes, price),
            "key_levels": lambda: find_key_levels(strikes, price, analysis_settings.key_level_count),
            "gamma": lambda: calculate_gex(
                strikes, price, analysis_settings.gex_days_to_expiry, analysis_settings.gex_iv
            ),
        }

        if not analysis_settings.parallel:
            return {name: task() for name, task in tasks.items()}

        with ThreadPoolExecutor(max_workers=analysis_settings.max_workers) as executor:
            futures = {name: executor.submit(task) for name, task in tasks.items()}
            return {name: future.result() for name, future in futures.items()}

    def _technicals(self, product: str, current_price: float) -> Optional[TechnicalIndicators]:
        technical_settings = self.settings.technicals
        if not technical_settings.enabled:
            return None

        if self.price_series is not None:
            symbol = self.settings.price_symbol(product)
            try:
                history = self.price_series.get_history(
                    symbol, technical_settings.lookback, technical_settings.interval
                )
                return self.technical_engine.calculate(history, current_price)
            except GatewayError as exc:
                LOGGER.warning("Price history unavailable for %s: %s", symbol, exc)

        if not technical_settings.allow_synthetic:
            LOGGER.warning("Skipping technicals for %s: no price history and synthetic bars disabled", product)
            return None

        LOGGER.warning("Using a synthetic price series for %s technicals", product)
        bars = generate_synthetic_bars(current_price, seed=technical_settings.synthetic_seed)
        return self.technical_engine.calculate(bars, current_price, synthetic=True)


__all__ = ["AnalysisReport", "SignalPipeline"]
