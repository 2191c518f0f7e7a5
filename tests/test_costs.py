from __future__ import annotations

import pytest

from core.costs import DEFAULT_FEE_RATE, apply_fees, fee_amount, gross_with_fee


def test_apply_fees_basic():
    net, fee = apply_fees(1000, fee_bps=10)
    assert fee == 1.0
    assert net == 999.0


def test_gross_with_fee_adds_fee_to_spend():
    total, fee = gross_with_fee(1000, fee_rate=0.001)
    assert fee == 1.0
    assert total == 1001.0


def test_rate_takes_priority_over_bps():
    assert fee_amount(2000, fee_rate=0.0005, fee_bps=50) == 1.0


def test_default_fee_rate_is_10_bps():
    assert DEFAULT_FEE_RATE == 0.001
    assert fee_amount(500) == 0.5


@pytest.mark.parametrize("kwargs", [{"fee_rate": -0.1}, {"fee_bps": -1}])
def test_negative_rates_rejected(kwargs):
    with pytest.raises(ValueError):
        fee_amount(100, **kwargs)


def test_negative_notional_rejected():
    with pytest.raises(ValueError):
        apply_fees(-1.0)
