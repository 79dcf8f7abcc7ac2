"""
Tests for café-local dates and settings validation.
"""
from datetime import date

import pytest
from pydantic import ValidationError

from leafy.core.clock import iter_month_days, local_today, month_bounds, month_label
from leafy.core.config import Settings


class TestMonthHelpers:
    def test_leap_february(self):
        assert month_bounds(2024, 1) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_december(self):
        assert month_bounds(2023, 11) == (date(2023, 12, 1), date(2023, 12, 31))

    def test_invalid_index(self):
        with pytest.raises(ValueError):
            month_bounds(2024, -1)

    def test_iter_month_days(self):
        days = list(iter_month_days(2023, 1))

        assert len(days) == 28
        assert days[0] == date(2023, 2, 1)

    def test_month_label(self):
        assert month_label(2024, 0) == "2024-01"


class TestLocalToday:
    def test_returns_a_date(self):
        assert isinstance(local_today("Asia/Kolkata"), date)


class TestSettings:
    def test_unknown_timezone_rejected(self):
        with pytest.raises(ValidationError):
            Settings(CAFE_TIMEZONE="Mars/Olympus_Mons")

    def test_sweep_interval_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(ALERT_SWEEP_INTERVAL_MINUTES=0)
