"""
Recipes router: recipes, their ingredient lines, and exclusion options.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from leafy.core.deps import get_store
from leafy.db.row_store import RowStore
from leafy.schemas.inventory import (
    ExclusionOptionsResponse,
    RecipeCreate,
    RecipeIngredientCreate,
    RecipeIngredientResponse,
    RecipeIngredientUpdate,
    RecipeResponse,
    RecipeUpdate,
)
from leafy.schemas.order import SizeOption
from leafy.services.recipes import RecipeService

router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.get("", response_model=List[RecipeResponse])
def list_recipes(menu_item_id: Optional[str] = None, store: RowStore = Depends(get_store)):
    return RecipeService(store).list_recipes(menu_item_id)


@router.post("", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
def create_recipe(data: RecipeCreate, store: RowStore = Depends(get_store)):
    return RecipeService(store).add_recipe(data)


@router.get("/exclusions", response_model=ExclusionOptionsResponse)
def exclusion_options(menu_item_id: str, size: SizeOption = "Regular", store: RowStore = Depends(get_store)):
    """Ingredient names a customer can ask to leave out of a menu item."""
    names = RecipeService(store).exclusion_options(menu_item_id, size)
    return ExclusionOptionsResponse(menu_item_id=menu_item_id, size=size, ingredient_names=names)


@router.get("/{recipe_id}", response_model=RecipeResponse)
def get_recipe(recipe_id: str, store: RowStore = Depends(get_store)):
    return RecipeService(store).get_recipe(recipe_id)


@router.patch("/{recipe_id}", response_model=RecipeResponse)
def update_recipe(recipe_id: str, data: RecipeUpdate, store: RowStore = Depends(get_store)):
    return RecipeService(store).update_recipe(recipe_id, data)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recipe(recipe_id: str, store: RowStore = Depends(get_store)):
    """Delete a recipe and its ingredient lines."""
    RecipeService(store).delete_recipe(recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{recipe_id}/ingredients",
    response_model=RecipeIngredientResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_recipe_ingredient(recipe_id: str, data: RecipeIngredientCreate, store: RowStore = Depends(get_store)):
    return RecipeService(store).add_recipe_ingredient(recipe_id, data)


@router.patch("/ingredients/{line_id}", response_model=RecipeIngredientResponse)
def update_recipe_ingredient(line_id: str, data: RecipeIngredientUpdate, store: RowStore = Depends(get_store)):
    return RecipeService(store).update_recipe_ingredient(line_id, data)


@router.delete("/ingredients/{line_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_recipe_ingredient(line_id: str, store: RowStore = Depends(get_store)):
    RecipeService(store).remove_recipe_ingredient(line_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
