"""
Tests for alert rule parameter validation.
"""
import pytest
from pydantic import ValidationError

from leafy.schemas.alert import (
    AlertRuleCreate,
    DailyRevenueBelowParams,
    MonthlyRentDueParams,
    dump_rule_parameters,
    parse_rule_parameters,
)


class TestParseRuleParameters:
    """Each condition carries only the parameters its check reads."""

    def test_condition_selects_variant(self):
        params = parse_rule_parameters("daily_revenue_below", {"amount": 3000})

        assert isinstance(params, DailyRevenueBelowParams)
        assert params.amount == 3000

    def test_rent_defaults(self):
        params = parse_rule_parameters("monthly_rent_due", {})

        assert isinstance(params, MonthlyRentDueParams)
        assert params.day_of_month == 1
        assert params.reminder_days_before == 3

    def test_missing_amount_is_rejected(self):
        with pytest.raises(ValidationError):
            parse_rule_parameters("daily_revenue_below", {})

    def test_missing_budget_is_rejected(self):
        with pytest.raises(ValidationError):
            parse_rule_parameters("expense_exceeds_budget", {"amount": 100})

    def test_unknown_condition_is_rejected(self):
        with pytest.raises(ValidationError):
            parse_rule_parameters("moon_phase", {})

    def test_day_of_month_out_of_range(self):
        with pytest.raises(ValidationError):
            parse_rule_parameters("monthly_rent_due", {"dayOfMonth": 32})

    def test_dump_uses_stored_key_names(self):
        params = parse_rule_parameters("monthly_rent_due", {"dayOfMonth": 5})

        assert dump_rule_parameters(params) == {"dayOfMonth": 5, "reminderDaysBefore": 3}


class TestAlertRuleCreate:
    def test_parameters_normalized(self):
        rule = AlertRuleCreate(
            name="Rent",
            type="RentDue",
            condition="monthly_rent_due",
            parameters={"dayOfMonth": 7},
        )

        assert rule.parameters == {"dayOfMonth": 7, "reminderDaysBefore": 3}

    def test_invalid_parameters_rejected_at_creation(self):
        with pytest.raises(ValidationError):
            AlertRuleCreate(
                name="Budget",
                type="HighExpense",
                condition="expense_exceeds_budget",
                parameters={},
            )

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            AlertRuleCreate(
                name="Low revenue",
                type="RevenueThreshold",
                condition="daily_revenue_below",
                parameters={"amount": -5},
            )
