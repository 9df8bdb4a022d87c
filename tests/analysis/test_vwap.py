from __future__ import annotations

import pytest

from oi_analytics.analysis import calculate_vwap
from oi_analytics.models import StrikeRecord


def test_vwap_weights_strikes_by_total_volume():
    strikes = [
        StrikeRecord(strike_price=2700, call_volume=100, put_volume=200),
        StrikeRecord(strike_price=2750, call_volume=250, put_volume=180),
        StrikeRecord(strike_price=2800, call_volume=300, put_volume=100),
    ]

    assert calculate_vwap(strikes) == pytest.approx(3_112_500 / 1130)


def test_vwap_is_zero_without_volume():
    assert calculate_vwap([]) == 0.0
    assert calculate_vwap([StrikeRecord(strike_price=2700, call_oi=10)]) == 0.0
