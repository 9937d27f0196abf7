"""Tests for the tiered commission calculator."""

import pytest

from utils.field_activity.commission import (
    Sale,
    current_tier,
    prepay_bonus,
    prepay_percentage,
    remove_sale,
    summarize,
)


def sales_of(*specs):
    return [Sale(id=i, amount=amount, payment_type=kind) for i, (amount, kind) in enumerate(specs)]


@pytest.mark.parametrize("revenue, expected", [
    (0, None),
    (2999.99, None),
    (3000, (3000, 0.03)),
    (4500, (4000, 0.04)),
    (9000, (9000, 0.09)),
    (25000, (9000, 0.09)),
])
def test_current_tier(revenue, expected):
    assert current_tier(revenue) == expected


def test_sale_validation():
    with pytest.raises(ValueError):
        Sale(id=1, amount=0, payment_type='Ezpay')
    with pytest.raises(ValueError):
        Sale(id=1, amount=100, payment_type='Cash')


def test_prepay_percentage():
    sales = sales_of((100, 'Prepay'), (100, 'Ezpay'), (100, 'Ezpay'), (100, 'Ezpay'))
    assert prepay_percentage(sales) == 25
    assert prepay_percentage([]) == 0


def test_prepay_bonus_thresholds():
    quarter = sales_of((1000, 'Prepay'), (1000, 'Ezpay'), (1000, 'Ezpay'), (1000, 'Ezpay'))
    assert prepay_bonus(quarter, 4000) == 0.02

    forty = sales_of((1000, 'Prepay'), (1000, 'Prepay'), (1000, 'Ezpay'), (1000, 'Ezpay'), (1000, 'Ezpay'))
    assert prepay_bonus(forty, 5000) == 0.03

    low = sales_of((1000, 'Prepay'), *[(1000, 'Ezpay')] * 4)
    assert prepay_bonus(low, 5000) == 0.0


def test_no_bonus_before_first_tier():
    sales = sales_of((1000, 'Prepay'))
    assert prepay_bonus(sales, 1000) == 0.0
    assert summarize(sales).commission == 0.0


def test_summarize():
    sales = sales_of((2500, 'Prepay'), (2500, 'Ezpay'))

    summary = summarize(sales)

    assert summary.total_revenue == 5000
    assert summary.tier_threshold == 5000
    assert summary.tier_rate == pytest.approx(0.05)
    assert summary.prepay_bonus == pytest.approx(0.03)
    assert summary.total_rate == pytest.approx(0.08)
    assert summary.commission == pytest.approx(400)
    assert summary.prepay_percent == 50


def test_remove_sale():
    sales = sales_of((100, 'Ezpay'), (200, 'Prepay'))
    remaining = remove_sale(sales, 0)
    assert [s.amount for s in remaining] == [200]
    assert len(sales) == 2
