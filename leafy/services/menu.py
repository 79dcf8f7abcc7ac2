"""
Menu items and order-type pricing.
"""
import logging
from decimal import Decimal
from typing import Optional

from leafy.core.errors import NotFoundError
from leafy.db.row_store import RowStore
from leafy.models.menu import MenuItem
from leafy.schemas.inventory import MenuItemCreate, MenuItemUpdate

logger = logging.getLogger(__name__)

# Takeaway surcharge when a size has no explicit takeaway price (packaging)
TAKEAWAY_SURCHARGE = Decimal("10")


def unit_price(menu_item: MenuItem, size: str, order_type: str) -> Decimal:
    """
    Price of one unit of ``menu_item`` in ``size`` for an order type.

    - Delivery: the listed price
    - DineIn: dine_in_price, else the listed price
    - Takeaway: takeaway_price, else the dine-in price plus a surcharge

    Raises:
        ValueError: the menu item does not come in this size
    """
    option = next((s for s in menu_item.sizes or [] if s.get("size") == size), None)
    if option is None:
        raise ValueError(f"{menu_item.name} has no {size} size")

    price = Decimal(str(option["price"]))
    dine_in = option.get("dine_in_price")
    dine_in_price = Decimal(str(dine_in)) if dine_in is not None else price

    if order_type == "DineIn":
        return dine_in_price
    if order_type == "Takeaway":
        takeaway = option.get("takeaway_price")
        return Decimal(str(takeaway)) if takeaway is not None else dine_in_price + TAKEAWAY_SURCHARGE
    return price


class MenuService:
    def __init__(self, store: RowStore):
        self.store = store

    def list_items(self, active_only: bool = False, category: Optional[str] = None) -> list[MenuItem]:
        criteria = []
        if active_only:
            criteria.append(MenuItem.is_active.is_(True))
        if category:
            criteria.append(MenuItem.category == category)
        return self.store.select(MenuItem, *criteria, order_by=(MenuItem.category, MenuItem.name))

    def get_item(self, item_id: str) -> MenuItem:
        item = self.store.get(MenuItem, item_id)
        if item is None:
            raise NotFoundError("MenuItem", item_id)
        return item

    def add_item(self, data: MenuItemCreate) -> MenuItem:
        row = data.model_dump(mode="json")
        item = self.store.insert(MenuItem, [row])[0]
        logger.info(f"Added menu item {data.name!r}")
        return self.store.get(MenuItem, item.id)

    def update_item(self, item_id: str, data: MenuItemUpdate) -> MenuItem:
        self.get_item(item_id)
        patch = data.model_dump(mode="json", exclude_unset=True)
        if patch:
            self.store.update(MenuItem, patch, MenuItem.id == item_id)
        return self.store.get(MenuItem, item_id)

    def delete_item(self, item_id: str) -> None:
        """Delete a menu item. Its recipes go with it."""
        if not self.store.delete(MenuItem, MenuItem.id == item_id):
            raise NotFoundError("MenuItem", item_id)

    def price_for(self, item_id: str, size: str, order_type: str) -> Decimal:
        return unit_price(self.get_item(item_id), size, order_type)
