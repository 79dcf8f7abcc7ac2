"""
Recipe management and recipe lookups for order customization.
"""
import logging
from typing import Optional

from leafy.core.errors import NotFoundError
from leafy.db.row_store import RowStore
from leafy.models.ingredient import Ingredient
from leafy.models.menu import MenuItem
from leafy.models.recipe import Recipe, RecipeIngredient
from leafy.schemas.inventory import RecipeCreate, RecipeIngredientCreate, RecipeIngredientUpdate, RecipeUpdate

logger = logging.getLogger(__name__)


class RecipeService:
    """Recipes and their ingredient lines."""

    def __init__(self, store: RowStore):
        self.store = store

    def list_recipes(self, menu_item_id: Optional[str] = None) -> list[Recipe]:
        criteria = [Recipe.menu_item_id == menu_item_id] if menu_item_id else []
        return self.store.select(Recipe, *criteria, order_by=Recipe.created_at)

    def get_recipe(self, recipe_id: str) -> Recipe:
        recipe = self.store.get(Recipe, recipe_id)
        if recipe is None:
            raise NotFoundError("Recipe", recipe_id)
        return recipe

    def match_recipe(self, menu_item_id: str, size: Optional[str]) -> Optional[Recipe]:
        """Recipe for the size variant, else the menu item's first recipe."""
        recipes = self.list_recipes(menu_item_id)
        if not recipes:
            return None
        return next((r for r in recipes if r.size_variant == size), recipes[0])

    def add_recipe(self, data: RecipeCreate) -> Recipe:
        if self.store.get(MenuItem, data.menu_item_id) is None:
            raise NotFoundError("MenuItem", data.menu_item_id)

        with self.store.transaction():
            recipe = self.store.insert(Recipe, [data.model_dump(exclude={"ingredients"})])[0]
            recipe_id = recipe.id
            if data.ingredients:
                self.store.insert(RecipeIngredient, [
                    {"recipe_id": recipe_id, **line.model_dump()} for line in data.ingredients
                ])

        logger.info(f"Added recipe {data.name!r} with {len(data.ingredients)} ingredients")
        return self.store.get(Recipe, recipe_id)

    def update_recipe(self, recipe_id: str, data: RecipeUpdate) -> Recipe:
        self.get_recipe(recipe_id)
        patch = data.model_dump(exclude_unset=True)
        if patch:
            self.store.update(Recipe, patch, Recipe.id == recipe_id)
        return self.store.get(Recipe, recipe_id)

    def delete_recipe(self, recipe_id: str) -> None:
        """Delete a recipe together with its ingredient lines."""
        self.get_recipe(recipe_id)
        with self.store.transaction():
            self.store.delete(RecipeIngredient, RecipeIngredient.recipe_id == recipe_id)
            self.store.delete(Recipe, Recipe.id == recipe_id)

    def add_recipe_ingredient(self, recipe_id: str, data: RecipeIngredientCreate) -> RecipeIngredient:
        self.get_recipe(recipe_id)
        if self.store.get(Ingredient, data.ingredient_id) is None:
            raise NotFoundError("Ingredient", data.ingredient_id)
        line = self.store.insert(RecipeIngredient, [{"recipe_id": recipe_id, **data.model_dump()}])[0]
        return self.store.get(RecipeIngredient, line.id)

    def update_recipe_ingredient(self, line_id: str, data: RecipeIngredientUpdate) -> RecipeIngredient:
        if self.store.get(RecipeIngredient, line_id) is None:
            raise NotFoundError("RecipeIngredient", line_id)
        patch = data.model_dump(exclude_unset=True)
        if patch:
            self.store.update(RecipeIngredient, patch, RecipeIngredient.id == line_id)
        return self.store.get(RecipeIngredient, line_id)

    def remove_recipe_ingredient(self, line_id: str) -> None:
        if not self.store.delete(RecipeIngredient, RecipeIngredient.id == line_id):
            raise NotFoundError("RecipeIngredient", line_id)

    def exclusion_options(self, menu_item_id: str, size: Optional[str]) -> list[str]:
        """Names of the ingredients a customer may ask to leave out of this item."""
        recipe = self.match_recipe(menu_item_id, size)
        if recipe is None:
            return []

        lines = self.store.select(RecipeIngredient, RecipeIngredient.recipe_id == recipe.id)
        if not lines:
            return []
        ingredients = self.store.select(
            Ingredient,
            Ingredient.id.in_([line.ingredient_id for line in lines]),
            order_by=Ingredient.name,
        )
        return [ing.name for ing in ingredients]
