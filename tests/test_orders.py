"""
Tests for order placement, daily revenue rollup and inventory deduction.
"""
from decimal import Decimal

import pytest

from leafy.core.errors import RowStoreError
from leafy.models.finance import DailyRevenue
from leafy.models.ingredient import Ingredient
from leafy.models.order import InventoryDeductionOutbox, Order
from leafy.schemas.order import CustomBowlSelection, OrderLineItem, PlaceOrderRequest
from leafy.services.orders import OUTBOX_APPLIED, OUTBOX_PENDING, OrderPlacementService


def line(menu_item_id: str, size: str = "Regular", quantity: int = 1, price: str = "50", **extra) -> OrderLineItem:
    return OrderLineItem(
        menu_item_id=menu_item_id,
        menu_item_name="Aloo Masti",
        size=size,
        quantity=quantity,
        unit_price=Decimal(price),
        line_total=Decimal(price) * quantity,
        **extra,
    )


def stock(store, ingredient_id: str) -> Decimal:
    store.db.expire_all()
    return store.get(Ingredient, ingredient_id).current_stock


@pytest.fixture
def service(store):
    return OrderPlacementService(store, order_number_prefix="LL", cafe_timezone="Asia/Kolkata")


class TestOrderTotals:
    """Order total is subtotal minus discount, never below zero."""

    def test_total_is_subtotal_minus_discount(self, service, salad_setup, order_date):
        placed = service.place_order(PlaceOrderRequest(
            items=[line(salad_setup["salad"], quantity=2, price="80")],
            payment_method="Cash",
            discount=Decimal("20"),
            order_date=order_date,
        ))

        assert placed.total_amount == Decimal("140")
        order = service.store.get(Order, placed.id)
        assert order.subtotal == Decimal("160")
        assert order.discount == Decimal("20")

    def test_discount_larger_than_subtotal_clamps_to_zero(self, service, salad_setup, order_date):
        placed = service.place_order(PlaceOrderRequest(
            items=[line(salad_setup["salad"], price="50")],
            payment_method="UPI",
            discount=Decimal("80"),
            order_date=order_date,
        ))

        assert placed.total_amount == Decimal("0")

    def test_empty_cart_is_rejected(self):
        with pytest.raises(ValueError):
            PlaceOrderRequest(items=[], payment_method="Cash")


class TestOrderNumbers:
    def test_sequence_per_day(self, service, salad_setup, order_date):
        first = service.place_order(PlaceOrderRequest(
            items=[line(salad_setup["salad"])], payment_method="Cash", order_date=order_date,
        ))
        second = service.place_order(PlaceOrderRequest(
            items=[line(salad_setup["salad"])], payment_method="Cash", order_date=order_date,
        ))

        assert first.order_number == "LL-20240115-001"
        assert second.order_number == "LL-20240115-002"

    def test_sequence_restarts_on_a_new_day(self, service, salad_setup, order_date):
        service.place_order(PlaceOrderRequest(
            items=[line(salad_setup["salad"])], payment_method="Cash", order_date=order_date,
        ))

        assert service.generate_order_number(order_date.replace(day=16)) == "LL-20240116-001"

    def test_duplicate_number_is_rejected(self, store, service, salad_setup, order_date):
        """A number already taken by a concurrent checkout fails instead of duplicating."""
        service.place_order(PlaceOrderRequest(
            items=[line(salad_setup["salad"])], payment_method="Cash", order_date=order_date,
        ))
        service.generate_order_number = lambda _date: "LL-20240115-001"

        with pytest.raises(RowStoreError):
            service.place_order(PlaceOrderRequest(
                items=[line(salad_setup["salad"])], payment_method="Cash", order_date=order_date,
            ))

        assert store.count(Order) == 1
        assert store.first(DailyRevenue).number_of_orders == 1


class TestDailyRevenueRollup:
    """Each order updates the day's revenue row in the same transaction."""

    def test_first_order_creates_the_day(self, store, service, salad_setup, order_date):
        service.place_order(PlaceOrderRequest(
            items=[line(salad_setup["salad"], price="250")], payment_method="UPI", order_date=order_date,
        ))

        record = store.first(DailyRevenue, DailyRevenue.date == order_date)
        assert record.total_sales == Decimal("250")
        assert record.number_of_orders == 1
        assert record.upi_sales == Decimal("250")
        assert record.cash_sales == Decimal("0")
        assert record.average_order_value == Decimal("250")

    def test_second_order_accumulates(self, store, service, salad_setup, order_date):
        service.place_order(PlaceOrderRequest(
            items=[line(salad_setup["salad"], price="250")], payment_method="Cash", order_date=order_date,
        ))
        service.place_order(PlaceOrderRequest(
            items=[line(salad_setup["salad"], price="150")], payment_method="Card", order_date=order_date,
        ))

        store.db.expire_all()
        record = store.first(DailyRevenue, DailyRevenue.date == order_date)
        assert record.total_sales == Decimal("400")
        assert record.number_of_orders == 2
        assert record.average_order_value == Decimal("200")
        assert record.cash_sales == Decimal("250")
        assert record.card_sales == Decimal("150")
        assert record.payment_breakdown == {
            "cash": Decimal("250"),
            "upi": Decimal("0"),
            "card": Decimal("150"),
        }


class TestInventoryDeduction:
    """Recipe quantities times line quantity come off stock after the order."""

    def test_deducts_recipe_for_size(self, store, service, salad_setup, order_date):
        placed = service.place_order(PlaceOrderRequest(
            items=[line(salad_setup["salad"], size="Regular", quantity=2)],
            payment_method="Cash",
            order_date=order_date,
        ))

        assert placed.deduction_pending is False
        assert stock(store, salad_setup["potato"]) == Decimal("9.7")
        assert stock(store, salad_setup["onion"]) == Decimal("9.9")
        assert stock(store, salad_setup["coriander"]) == Decimal("7.5")

    def test_large_size_uses_large_recipe(self, store, service, salad_setup, order_date):
        service.place_order(PlaceOrderRequest(
            items=[line(salad_setup["salad"], size="Large", price="80")],
            payment_method="Cash",
            order_date=order_date,
        ))

        assert stock(store, salad_setup["potato"]) == Decimal("9.8")
        assert stock(store, salad_setup["coriander"]) == Decimal("8")

    def test_excluded_ingredient_is_not_deducted(self, store, service, salad_setup, order_date):
        service.place_order(PlaceOrderRequest(
            items=[line(salad_setup["salad"], excluded_ingredients=["onion"])],
            payment_method="Cash",
            order_date=order_date,
        ))

        assert stock(store, salad_setup["onion"]) == Decimal("10")
        assert stock(store, salad_setup["potato"]) == Decimal("9.85")

    def test_custom_bowl_skips_deduction(self, store, service, salad_setup, order_date):
        service.place_order(PlaceOrderRequest(
            items=[line(salad_setup["salad"], customizations=CustomBowlSelection(base="Lettuce"))],
            payment_method="Cash",
            order_date=order_date,
        ))

        assert stock(store, salad_setup["potato"]) == Decimal("10")

    def test_stock_never_goes_negative(self, store, service, salad_setup, order_date):
        store.update(Ingredient, {"current_stock": Decimal("0.1")}, Ingredient.id == salad_setup["potato"])

        service.place_order(PlaceOrderRequest(
            items=[line(salad_setup["salad"], quantity=3)],
            payment_method="Cash",
            order_date=order_date,
        ))

        assert stock(store, salad_setup["potato"]) == Decimal("0")

    def test_failed_deduction_is_parked_and_retried(self, store, service, salad_setup, order_date, monkeypatch):
        """The order stands when deduction fails; the retry applies it later."""
        original = service.compute_deductions

        def broken(items):
            raise RowStoreError("ingredients", "connection reset")

        monkeypatch.setattr(service, "compute_deductions", broken)
        placed = service.place_order(PlaceOrderRequest(
            items=[line(salad_setup["salad"])],
            payment_method="Cash",
            order_date=order_date,
        ))

        assert placed.deduction_pending is True
        assert store.count(Order) == 1
        assert stock(store, salad_setup["potato"]) == Decimal("10")

        pending = service.pending_deductions()
        assert len(pending) == 1
        assert pending[0].order_id == placed.id
        assert pending[0].status == OUTBOX_PENDING
        assert "connection reset" in pending[0].last_error

        # Still broken: attempts go up, entry stays pending
        result = service.retry_pending_deductions()
        assert result.applied == 0
        assert result.still_pending == 1
        store.db.expire_all()
        assert store.first(InventoryDeductionOutbox).attempts == 2

        monkeypatch.setattr(service, "compute_deductions", original)
        result = service.retry_pending_deductions()

        assert result.applied == 1
        assert result.still_pending == 0
        assert service.pending_deductions() == []
        assert store.first(InventoryDeductionOutbox).status == OUTBOX_APPLIED
        assert stock(store, salad_setup["potato"]) == Decimal("9.85")


class TestListOrders:
    def test_filter_by_date(self, service, salad_setup, order_date):
        service.place_order(PlaceOrderRequest(
            items=[line(salad_setup["salad"])], payment_method="Cash", order_date=order_date,
        ))
        service.place_order(PlaceOrderRequest(
            items=[line(salad_setup["salad"])], payment_method="Cash", order_date=order_date.replace(day=16),
        ))

        assert len(service.list_orders()) == 2
        orders = service.list_orders(order_date)
        assert [o.order_number for o in orders] == ["LL-20240115-001"]
