"""
Tests for the periodic alert sweep.
"""
from decimal import Decimal

from leafy.models.alert import Alert, AlertRule
from leafy.models.ingredient import Ingredient
from leafy.services.alert_scheduler import AlertSweepScheduler


class TestAlertSweepScheduler:
    def test_sweep_once_runs_the_engine(self, store, session_factory):
        store.insert(AlertRule, [{
            "name": "Low Stock Warning",
            "type": "LowStock",
            "condition": "stock_below_threshold",
            "parameters": {},
        }])
        store.insert(Ingredient, [{
            "name": "Spinach",
            "category": "Greens",
            "unit": "kg",
            "current_stock": Decimal("1"),
            "minimum_threshold": Decimal("5"),
        }])

        scheduler = AlertSweepScheduler(session_factory, interval_minutes=15)

        assert scheduler.sweep_once() == 1
        assert scheduler.sweep_once() == 0
        assert store.count(Alert) == 1

    def test_overlapping_tick_is_skipped(self, session_factory):
        scheduler = AlertSweepScheduler(session_factory)
        scheduler._lock.acquire()
        try:
            assert scheduler.sweep_once() is None
        finally:
            scheduler._lock.release()

    def test_failed_sweep_returns_none(self):
        def broken_factory():
            raise RuntimeError("database unavailable")

        assert AlertSweepScheduler(broken_factory).sweep_once() is None

    def test_not_running_until_started(self, session_factory):
        assert AlertSweepScheduler(session_factory).running is False
