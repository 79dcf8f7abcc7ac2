"""
Menu router.
"""
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from leafy.core.deps import get_store
from leafy.db.row_store import RowStore
from leafy.schemas.inventory import MenuItemCreate, MenuItemResponse, MenuItemUpdate
from leafy.schemas.order import OrderType, SizeOption
from leafy.services.menu import MenuService

router = APIRouter(prefix="/menu", tags=["menu"])


@router.get("/items", response_model=List[MenuItemResponse])
def list_menu_items(
    active_only: bool = False,
    category: Optional[str] = None,
    store: RowStore = Depends(get_store),
):
    return MenuService(store).list_items(active_only=active_only, category=category)


@router.post("/items", response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED)
def create_menu_item(data: MenuItemCreate, store: RowStore = Depends(get_store)):
    return MenuService(store).add_item(data)


@router.get("/items/{item_id}", response_model=MenuItemResponse)
def get_menu_item(item_id: str, store: RowStore = Depends(get_store)):
    return MenuService(store).get_item(item_id)


@router.get("/items/{item_id}/price")
def get_menu_item_price(
    item_id: str,
    size: SizeOption,
    order_type: OrderType = "DineIn",
    store: RowStore = Depends(get_store),
) -> dict:
    """Unit price for a size and order type."""
    try:
        price: Decimal = MenuService(store).price_for(item_id, size, order_type)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"menu_item_id": item_id, "size": size, "order_type": order_type, "unit_price": str(price)}


@router.patch("/items/{item_id}", response_model=MenuItemResponse)
def update_menu_item(item_id: str, data: MenuItemUpdate, store: RowStore = Depends(get_store)):
    return MenuService(store).update_item(item_id, data)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_menu_item(item_id: str, store: RowStore = Depends(get_store)):
    MenuService(store).delete_item(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
