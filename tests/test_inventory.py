"""
Tests for ingredient stock management.
"""
from datetime import date, timedelta
from decimal import Decimal

import pytest

from leafy.core.clock import local_today
from leafy.core.errors import NotFoundError
from leafy.schemas.inventory import IngredientCreate, IngredientUpdate
from leafy.services.inventory import InventoryService, compute_expiry_date


def spinach(**overrides) -> IngredientCreate:
    data = {
        "name": "Spinach",
        "category": "Greens",
        "unit": "kg",
        "current_stock": Decimal("2"),
        "minimum_threshold": Decimal("1"),
        "shelf_life_days": 3,
    }
    data.update(overrides)
    return IngredientCreate(**data)


@pytest.fixture
def service(store):
    return InventoryService(store, cafe_timezone="Asia/Kolkata")


class TestComputeExpiryDate:
    def test_adds_shelf_life(self):
        assert compute_expiry_date(3, date(2024, 2, 27)) == date(2024, 3, 1)

    def test_no_shelf_life(self):
        assert compute_expiry_date(None, date(2024, 2, 27)) is None


class TestInventoryService:
    def test_add_sets_expiry_from_shelf_life(self, service):
        ingredient = service.add_ingredient(spinach())

        assert ingredient.expiry_date == local_today("Asia/Kolkata") + timedelta(days=3)

    def test_explicit_expiry_is_kept(self, service):
        ingredient = service.add_ingredient(spinach(expiry_date=date(2030, 1, 1)))

        assert ingredient.expiry_date == date(2030, 1, 1)

    def test_restock_adds_quantity_and_refreshes_expiry(self, store, service):
        ingredient = service.add_ingredient(spinach(expiry_date=date(2020, 1, 1)))

        restocked = service.restock(ingredient.id, Decimal("3.5"))

        assert restocked.current_stock == Decimal("5.5")
        assert restocked.last_restocked is not None
        assert restocked.expiry_date == local_today("Asia/Kolkata") + timedelta(days=3)

    def test_restock_missing_ingredient(self, service):
        with pytest.raises(NotFoundError) as exc_info:
            service.restock("missing", Decimal("1"))

        assert exc_info.value.entity == "Ingredient"

    def test_deduct_clamps_at_zero(self, service):
        ingredient = service.add_ingredient(spinach())

        assert service.deduct_stock(ingredient.id, Decimal("5")).current_stock == Decimal("0")

    def test_update_and_filter_by_category(self, service):
        ingredient = service.add_ingredient(spinach())
        service.add_ingredient(spinach(name="Paneer", category="Dairy"))

        service.update_ingredient(ingredient.id, IngredientUpdate(supplier="Green Farms"))

        greens = service.list_ingredients("Greens")
        assert [i.name for i in greens] == ["Spinach"]
        assert greens[0].supplier == "Green Farms"

    def test_delete(self, service):
        ingredient = service.add_ingredient(spinach())

        service.delete_ingredient(ingredient.id)

        with pytest.raises(NotFoundError):
            service.get_ingredient(ingredient.id)
        with pytest.raises(NotFoundError):
            service.delete_ingredient(ingredient.id)
