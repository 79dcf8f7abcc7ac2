"""
Tests for the revenue share rent calculation.
"""
import json
from datetime import date
from decimal import Decimal

import pytest

from leafy.models.finance import DailyRevenue
from leafy.models.settings import AppSetting
from leafy.services.revenue_share import (
    MINIMUM_GUARANTEE,
    REVENUE_SHARE,
    RevenueShareCalculator,
)


def add_revenue(store, day: date, amount: str, orders: int = 10):
    store.insert(DailyRevenue, [{
        "date": day,
        "total_sales": Decimal(amount),
        "number_of_orders": orders,
        "cash_sales": Decimal(amount),
        "average_order_value": Decimal(amount) / orders,
    }])


class TestRevenueShareCalculator:
    """Effective rent is the greater of the minimum guarantee and the revenue share."""

    def test_minimum_guarantee_applies_below_break_even(self, store):
        """50,000 revenue at 20% is 10,000, below the 18,000 guarantee."""
        add_revenue(store, date(2024, 3, 5), "30000")
        add_revenue(store, date(2024, 3, 20), "20000")

        result = RevenueShareCalculator(store).calculate(2024, 2)

        assert result.month == "2024-03"
        assert result.total_monthly_revenue == Decimal("50000")
        assert result.revenue_share_amount == Decimal("10000")
        assert result.effective_rent == Decimal("18000")
        assert result.rent_type == MINIMUM_GUARANTEE
        assert result.break_even_revenue == Decimal("90000")

    def test_revenue_share_applies_above_break_even(self, store):
        add_revenue(store, date(2024, 3, 1), "100000")

        result = RevenueShareCalculator(store).calculate(2024, 2)

        assert result.revenue_share_amount == Decimal("20000")
        assert result.effective_rent == Decimal("20000")
        assert result.rent_type == REVENUE_SHARE

    def test_tie_goes_to_revenue_share(self, store):
        add_revenue(store, date(2024, 3, 1), "90000")

        result = RevenueShareCalculator(store).calculate(2024, 2)

        assert result.revenue_share_amount == Decimal("18000")
        assert result.effective_rent == Decimal("18000")
        assert result.rent_type == REVENUE_SHARE

    def test_only_the_requested_month_counts(self, store):
        add_revenue(store, date(2024, 2, 29), "50000")
        add_revenue(store, date(2024, 3, 31), "1000")
        add_revenue(store, date(2024, 4, 1), "50000")

        result = RevenueShareCalculator(store).calculate(2024, 2)

        assert result.total_monthly_revenue == Decimal("1000")

    def test_empty_month(self, store):
        result = RevenueShareCalculator(store).calculate(2024, 0)

        assert result.total_monthly_revenue == Decimal("0")
        assert result.effective_rent == Decimal("18000")
        assert result.rent_type == MINIMUM_GUARANTEE

    def test_uses_stored_settings(self, store):
        store.insert(AppSetting, [
            {"key": "minimumGuaranteeRent", "value": json.dumps(25000)},
            {"key": "revenueSharePercent", "value": json.dumps(25)},
        ])
        add_revenue(store, date(2024, 3, 1), "120000")

        result = RevenueShareCalculator(store).calculate(2024, 2)

        assert result.minimum_guarantee == Decimal("25000")
        assert result.revenue_share_percent == Decimal("25")
        assert result.revenue_share_amount == Decimal("30000")
        assert result.break_even_revenue == Decimal("100000")

    def test_invalid_setting_falls_back_to_default(self, store):
        store.insert(AppSetting, [
            {"key": "minimumGuaranteeRent", "value": "not-json"},
            {"key": "revenueSharePercent", "value": json.dumps("lots")},
        ])

        result = RevenueShareCalculator(store).calculate(2024, 2)

        assert result.minimum_guarantee == Decimal("18000")
        assert result.revenue_share_percent == Decimal("20")

    def test_non_finite_setting_falls_back_to_default(self, store):
        """NaN and Infinity decode as JSON numbers but are not usable amounts."""
        store.insert(AppSetting, [
            {"key": "minimumGuaranteeRent", "value": "Infinity"},
            {"key": "revenueSharePercent", "value": "NaN"},
        ])
        add_revenue(store, date(2024, 1, 10), "100000")

        result = RevenueShareCalculator(store).calculate(2024, 0)

        assert result.minimum_guarantee == Decimal("18000")
        assert result.revenue_share_percent == Decimal("20")
        assert result.effective_rent == Decimal("20000")

    def test_invalid_month_index(self, store):
        with pytest.raises(ValueError):
            RevenueShareCalculator(store).calculate(2024, 12)
