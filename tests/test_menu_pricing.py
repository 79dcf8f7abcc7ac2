"""
Tests for order-type pricing.
"""
from decimal import Decimal

import pytest

from leafy.core.errors import NotFoundError
from leafy.models.menu import MenuItem
from leafy.schemas.inventory import MenuItemCreate, MenuItemSize, MenuItemUpdate
from leafy.services.menu import MenuService, unit_price


def salad(**size_overrides) -> MenuItem:
    size = {"size": "Regular", "price": "80", "dine_in_price": "50", "takeaway_price": None}
    size.update(size_overrides)
    return MenuItem(name="Aloo Masti", category="Salads", sizes=[size])


class TestUnitPrice:
    def test_delivery_uses_listed_price(self):
        assert unit_price(salad(), "Regular", "Delivery") == Decimal("80")

    def test_dine_in_price(self):
        assert unit_price(salad(), "Regular", "DineIn") == Decimal("50")

    def test_dine_in_falls_back_to_listed_price(self):
        assert unit_price(salad(dine_in_price=None), "Regular", "DineIn") == Decimal("80")

    def test_takeaway_adds_packaging_surcharge(self):
        assert unit_price(salad(), "Regular", "Takeaway") == Decimal("60")

    def test_explicit_takeaway_price(self):
        assert unit_price(salad(takeaway_price="55"), "Regular", "Takeaway") == Decimal("55")

    def test_unknown_size(self):
        with pytest.raises(ValueError):
            unit_price(salad(), "Large", "DineIn")


class TestMenuService:
    def test_add_and_price(self, store):
        service = MenuService(store)
        item = service.add_item(MenuItemCreate(
            name="Tomato Soup",
            category="Soups",
            sizes=[MenuItemSize(size="Single", price=Decimal("80"), dine_in_price=Decimal("50"))],
        ))

        assert service.price_for(item.id, "Single", "Takeaway") == Decimal("60")

    def test_active_only(self, store):
        service = MenuService(store)
        sizes = [MenuItemSize(size="Single", price=Decimal("80"))]
        soup = service.add_item(MenuItemCreate(name="Tomato Soup", category="Soups", sizes=sizes))
        service.add_item(MenuItemCreate(name="Corn Soup", category="Soups", sizes=sizes))

        service.update_item(soup.id, MenuItemUpdate(is_active=False))

        assert [i.name for i in service.list_items(active_only=True)] == ["Corn Soup"]

    def test_missing_item(self, store):
        with pytest.raises(NotFoundError):
            MenuService(store).price_for("missing", "Regular", "DineIn")
