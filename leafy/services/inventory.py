"""
Ingredient stock management.
"""
import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from leafy.core.clock import local_today
from leafy.core.errors import NotFoundError
from leafy.db.base import utcnow
from leafy.db.row_store import RowStore
from leafy.models.ingredient import Ingredient
from leafy.schemas.inventory import IngredientCreate, IngredientUpdate

logger = logging.getLogger(__name__)


def compute_expiry_date(shelf_life_days: Optional[int], today: date) -> Optional[date]:
    if not shelf_life_days:
        return None
    return today + timedelta(days=shelf_life_days)


class InventoryService:
    """
    Ingredient CRUD and stock movements.

    Restocking refreshes the expiry date from the ingredient's shelf life;
    deductions never take stock below zero.
    """

    def __init__(self, store: RowStore, cafe_timezone: Optional[str] = None):
        self.store = store
        self.cafe_timezone = cafe_timezone

    def _today(self) -> date:
        return local_today(self.cafe_timezone)

    def list_ingredients(self, category: Optional[str] = None) -> list[Ingredient]:
        criteria = [Ingredient.category == category] if category else []
        return self.store.select(Ingredient, *criteria, order_by=Ingredient.name)

    def get_ingredient(self, ingredient_id: str) -> Ingredient:
        ingredient = self.store.get(Ingredient, ingredient_id)
        if ingredient is None:
            raise NotFoundError("Ingredient", ingredient_id)
        return ingredient

    def add_ingredient(self, data: IngredientCreate) -> Ingredient:
        row = data.model_dump()
        if row["expiry_date"] is None:
            row["expiry_date"] = compute_expiry_date(data.shelf_life_days, self._today())
        ingredient = self.store.insert(Ingredient, [row])[0]
        logger.info(f"Added ingredient {data.name!r}")
        return self.store.get(Ingredient, ingredient.id)

    def update_ingredient(self, ingredient_id: str, data: IngredientUpdate) -> Ingredient:
        self.get_ingredient(ingredient_id)
        patch = data.model_dump(exclude_unset=True)
        if patch:
            self.store.update(Ingredient, patch, Ingredient.id == ingredient_id)
        return self.store.get(Ingredient, ingredient_id)

    def set_stock(self, ingredient_id: str, new_stock: Decimal) -> Ingredient:
        """Record a stock count as a restock: sets last_restocked and refreshes expiry."""
        ingredient = self.get_ingredient(ingredient_id)
        expiry_date = ingredient.expiry_date
        if ingredient.shelf_life_days:
            expiry_date = compute_expiry_date(ingredient.shelf_life_days, self._today())

        self.store.update(
            Ingredient,
            {
                "current_stock": new_stock,
                "last_restocked": utcnow(),
                "expiry_date": expiry_date,
            },
            Ingredient.id == ingredient_id,
        )
        return self.store.get(Ingredient, ingredient_id)

    def restock(self, ingredient_id: str, added_quantity: Decimal) -> Ingredient:
        """
        Raises:
            NotFoundError: no ingredient with this id
        """
        ingredient = self.get_ingredient(ingredient_id)
        logger.info(f"Restocking {ingredient.name!r} by {added_quantity} {ingredient.unit}")
        return self.set_stock(ingredient_id, ingredient.current_stock + added_quantity)

    def deduct_stock(self, ingredient_id: str, quantity: Decimal) -> Ingredient:
        ingredient = self.get_ingredient(ingredient_id)
        new_stock = max(Decimal("0"), ingredient.current_stock - quantity)
        self.store.update(Ingredient, {"current_stock": new_stock}, Ingredient.id == ingredient_id)
        return self.store.get(Ingredient, ingredient_id)

    def delete_ingredient(self, ingredient_id: str) -> None:
        if not self.store.delete(Ingredient, Ingredient.id == ingredient_id):
            raise NotFoundError("Ingredient", ingredient_id)
