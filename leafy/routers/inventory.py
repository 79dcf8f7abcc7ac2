"""
Inventory router for ingredient stock.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from leafy.core.deps import get_store
from leafy.db.row_store import RowStore
from leafy.schemas.inventory import (
    IngredientCreate,
    IngredientResponse,
    IngredientUpdate,
    RestockRequest,
    StockSetRequest,
)
from leafy.services.inventory import InventoryService

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("/ingredients", response_model=List[IngredientResponse])
def list_ingredients(category: Optional[str] = None, store: RowStore = Depends(get_store)):
    return InventoryService(store).list_ingredients(category)


@router.post("/ingredients", response_model=IngredientResponse, status_code=status.HTTP_201_CREATED)
def create_ingredient(data: IngredientCreate, store: RowStore = Depends(get_store)):
    """
    Add an ingredient.

    When no expiry date is given it is derived from the shelf life.
    """
    return InventoryService(store).add_ingredient(data)


@router.get("/ingredients/{ingredient_id}", response_model=IngredientResponse)
def get_ingredient(ingredient_id: str, store: RowStore = Depends(get_store)):
    return InventoryService(store).get_ingredient(ingredient_id)


@router.patch("/ingredients/{ingredient_id}", response_model=IngredientResponse)
def update_ingredient(ingredient_id: str, data: IngredientUpdate, store: RowStore = Depends(get_store)):
    return InventoryService(store).update_ingredient(ingredient_id, data)


@router.put("/ingredients/{ingredient_id}/stock", response_model=IngredientResponse)
def set_stock(ingredient_id: str, data: StockSetRequest, store: RowStore = Depends(get_store)):
    """Record a stock count. Counts as a restock for expiry purposes."""
    return InventoryService(store).set_stock(ingredient_id, data.current_stock)


@router.post("/ingredients/{ingredient_id}/restock", response_model=IngredientResponse)
def restock_ingredient(ingredient_id: str, data: RestockRequest, store: RowStore = Depends(get_store)):
    """Add delivered quantity to current stock and refresh the expiry date."""
    return InventoryService(store).restock(ingredient_id, data.quantity)


@router.delete("/ingredients/{ingredient_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_ingredient(ingredient_id: str, store: RowStore = Depends(get_store)):
    InventoryService(store).delete_ingredient(ingredient_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
