"""
Tests for recipes and the ingredient exclusion list.
"""
from decimal import Decimal

import pytest

from leafy.core.errors import NotFoundError
from leafy.models.recipe import Recipe, RecipeIngredient
from leafy.schemas.inventory import RecipeCreate, RecipeIngredientCreate, RecipeIngredientUpdate
from leafy.services.recipes import RecipeService


class TestMatchRecipe:
    def test_size_variant_wins(self, store, salad_setup):
        recipe = RecipeService(store).match_recipe(salad_setup["salad"], "Large")

        assert recipe.id == salad_setup["large_recipe"]

    def test_no_recipes(self, store):
        assert RecipeService(store).match_recipe("missing", "Regular") is None


class TestExclusionOptions:
    def test_names_sorted(self, store, salad_setup):
        names = RecipeService(store).exclusion_options(salad_setup["salad"], "Regular")

        assert names == ["Fresh Coriander", "Onion", "Potato (Aloo)"]

    def test_large_recipe(self, store, salad_setup):
        names = RecipeService(store).exclusion_options(salad_setup["salad"], "Large")

        assert names == ["Onion", "Potato (Aloo)"]


class TestRecipeService:
    def test_add_recipe_with_lines(self, store, salad_setup):
        recipe = RecipeService(store).add_recipe(RecipeCreate(
            menu_item_id=salad_setup["salad"],
            name="Aloo Masti (Single)",
            size_variant="Single",
            ingredients=[
                RecipeIngredientCreate(ingredient_id=salad_setup["onion"], quantity=Decimal("0.02"), unit="kg"),
            ],
        ))

        assert recipe.size_variant == "Single"
        assert store.count(RecipeIngredient, RecipeIngredient.recipe_id == recipe.id) == 1

    def test_add_recipe_for_missing_menu_item(self, store):
        with pytest.raises(NotFoundError):
            RecipeService(store).add_recipe(RecipeCreate(menu_item_id="missing", name="Ghost"))

        assert store.count(Recipe) == 0

    def test_update_line_quantity(self, store, salad_setup):
        service = RecipeService(store)
        line = store.first(RecipeIngredient, RecipeIngredient.recipe_id == salad_setup["regular_recipe"])

        updated = service.update_recipe_ingredient(line.id, RecipeIngredientUpdate(quantity=Decimal("0.5")))

        assert updated.quantity == Decimal("0.5")

    def test_delete_recipe_removes_lines(self, store, salad_setup):
        RecipeService(store).delete_recipe(salad_setup["regular_recipe"])

        assert store.get(Recipe, salad_setup["regular_recipe"]) is None
        assert store.count(RecipeIngredient, RecipeIngredient.recipe_id == salad_setup["regular_recipe"]) == 0
