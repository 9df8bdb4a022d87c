from __future__ import annotations

from unittest.mock import MagicMock, patch

import pandas as pd
import pytest

from oi_analytics.gateways import DataNotAvailable, GatewayError, create_price_series_gateway
from oi_analytics.gateways.yfinance import YFinancePriceSeriesGateway


def make_history() -> pd.DataFrame:
    index = pd.date_range("2025-02-20 10:00", periods=3, freq="h")
    return pd.DataFrame(
        {
            "Open": [2740.0, 2745.0, 2748.0],
            "High": [2746.0, 2750.0, 2752.0],
            "Low": [2738.0, 2743.0, 2747.0],
            "Close": [2745.0, 2748.0, 2750.5],
            "Volume": [100, 120, 90],
        },
        index=index,
    )[::-1]


def test_get_history_returns_sorted_ohlc_frame():
    download = MagicMock(return_value=make_history())
    gateway = YFinancePriceSeriesGateway(download=download)

    history = gateway.get_history("GC=F", "1mo", "1h")

    download.assert_called_once_with("GC=F", period="1mo", interval="1h", progress=False)
    assert list(history.columns) == ["Open", "High", "Low", "Close"]
    assert history.index.is_monotonic_increasing
    assert history["Close"].iloc[-1] == 2750.5


def test_multiindex_columns_are_flattened():
    frame = make_history()
    frame.columns = pd.MultiIndex.from_product([frame.columns, ["GC=F"]])
    gateway = YFinancePriceSeriesGateway(download=MagicMock(return_value=frame))

    history = gateway.get_history("GC=F")

    assert list(history.columns) == ["Open", "High", "Low", "Close"]


def test_empty_download_is_unavailable():
    gateway = YFinancePriceSeriesGateway(download=MagicMock(return_value=pd.DataFrame()))

    with pytest.raises(DataNotAvailable):
        gateway.get_history("GC=F")


def test_retries_then_raises_gateway_error():
    download = MagicMock(side_effect=[Exception("rate limit"), make_history()])
    gateway = YFinancePriceSeriesGateway(download=download, max_retries=3)

    with patch("oi_analytics.gateways.yfinance.random.uniform", return_value=0), patch(
        "oi_analytics.gateways.yfinance.time.sleep"
    ) as sleep_mock:
        history = gateway.get_history("GC=F")

    assert download.call_count == 2
    sleep_mock.assert_called_once()
    assert len(history) == 3

    failing = YFinancePriceSeriesGateway(download=MagicMock(side_effect=Exception("down")), max_retries=2)
    with patch("oi_analytics.gateways.yfinance.time.sleep"):
        with pytest.raises(GatewayError):
            failing.get_history("GC=F")


def test_factory_resolves_providers():
    assert isinstance(create_price_series_gateway("YFinance"), YFinancePriceSeriesGateway)
    assert create_price_series_gateway("synthetic") is None
    assert create_price_series_gateway("none") is None
    with pytest.raises(KeyError):
        create_price_series_gateway("bloomberg")
