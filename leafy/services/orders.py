"""
Order placement with recipe-driven inventory deduction.

Placing an order is split into two database transactions:

1. The Order row and the DailyRevenue rollup. Any failure here is fatal
   and surfaces to the caller as RowStoreError.
2. Inventory deduction. Best-effort: a failure is rolled back, logged and
   parked in the inventory deduction outbox so it can be retried. The order
   stands either way.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from leafy.core.clock import local_today
from leafy.core.config import get_settings
from leafy.core.errors import RowStoreError
from leafy.db.row_store import RowStore
from leafy.models.finance import DailyRevenue
from leafy.models.ingredient import Ingredient
from leafy.models.order import InventoryDeductionOutbox, Order
from leafy.models.recipe import RecipeIngredient
from leafy.schemas.order import OrderLineItem, PlaceOrderRequest
from leafy.services.recipes import RecipeService

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CENTS = Decimal("0.01")

OUTBOX_PENDING = "pending"
OUTBOX_APPLIED = "applied"


@dataclass
class PlacedOrder:
    id: str
    order_number: str
    total_amount: Decimal
    deduction_pending: bool  # True when stock deduction landed in the outbox


@dataclass
class RetryResult:
    applied: int
    still_pending: int


class OrderPlacementService:
    """
    Places orders and keeps stock and daily revenue in step with them.

    Order numbers are "{prefix}-{YYYYMMDD}-{seq:03d}" where seq is the count of
    orders already on that date plus one. Two concurrent checkouts can pick
    the same number; the unique constraint on order_number rejects the second
    one with RowStoreError instead of storing a duplicate.
    """

    # Lowercased payment method -> DailyRevenue column
    PAYMENT_COLUMNS = {
        "cash": "cash_sales",
        "upi": "upi_sales",
        "card": "card_sales",
    }

    def __init__(
        self,
        store: RowStore,
        order_number_prefix: Optional[str] = None,
        cafe_timezone: Optional[str] = None,
    ):
        settings = get_settings()
        self.store = store
        self.recipes = RecipeService(store)
        self.order_number_prefix = order_number_prefix or settings.ORDER_NUMBER_PREFIX
        self.cafe_timezone = cafe_timezone or settings.CAFE_TIMEZONE

    def generate_order_number(self, order_date: date) -> str:
        existing = self.store.count(Order, Order.date == order_date)
        return f"{self.order_number_prefix}-{order_date:%Y%m%d}-{existing + 1:03d}"

    def place_order(self, request: PlaceOrderRequest) -> PlacedOrder:
        """
        Place an order.

        Raises:
            RowStoreError: the order or revenue write failed; nothing was stored
        """
        order_date = request.order_date or local_today(self.cafe_timezone)
        subtotal = sum((item.line_total for item in request.items), ZERO)
        total_amount = max(ZERO, subtotal - request.discount)
        items_payload = [item.model_dump(mode="json") for item in request.items]

        with self.store.transaction():
            order_number = self.generate_order_number(order_date)
            order = self.store.insert(Order, [{
                "order_number": order_number,
                "order_type": request.order_type,
                "date": order_date,
                "items": items_payload,
                "subtotal": subtotal,
                "discount": request.discount,
                "total_amount": total_amount,
                "payment_method": request.payment_method,
                "notes": request.notes,
                "customer_name": request.customer_name,
                "customer_phone": request.customer_phone,
                "created_by": request.created_by,
            }])[0]
            order_id = order.id
            self._update_daily_revenue(order_date, total_amount, request.payment_method)

        logger.info(f"Placed order {order_number} ({total_amount} via {request.payment_method})")

        deduction_pending = False
        try:
            self.apply_deductions(request.items)
        except Exception as e:
            logger.warning(f"Inventory deduction failed for order {order_number}: {e}")
            self._park_deduction(order_id, order_number, items_payload, e)
            deduction_pending = True

        return PlacedOrder(
            id=order_id,
            order_number=order_number,
            total_amount=total_amount,
            deduction_pending=deduction_pending,
        )

    def compute_deductions(self, items: list[OrderLineItem]) -> dict[str, Decimal]:
        """
        Stock to remove per ingredient id for a set of line items.

        Items with a custom bowl selection have no recipe and are skipped.
        The recipe matching the item's size wins; otherwise the menu item's
        first recipe is used. Excluded ingredients are matched by name,
        ignoring case.
        """
        deductions: dict[str, Decimal] = defaultdict(lambda: ZERO)

        for item in items:
            if item.customizations is not None:
                continue

            recipe = self.recipes.match_recipe(item.menu_item_id, item.size)
            if recipe is None:
                continue

            recipe_ingredients = self.store.select(
                RecipeIngredient,
                RecipeIngredient.recipe_id == recipe.id,
            )

            excluded = {name.strip().lower() for name in item.excluded_ingredients or []}
            names: dict[str, str] = {}
            if excluded:
                ingredient_ids = [ri.ingredient_id for ri in recipe_ingredients]
                names = {
                    ing.id: ing.name.lower()
                    for ing in self.store.select(Ingredient, Ingredient.id.in_(ingredient_ids))
                }

            for ri in recipe_ingredients:
                if excluded and names.get(ri.ingredient_id) in excluded:
                    continue
                deductions[ri.ingredient_id] += Decimal(ri.quantity) * item.quantity

        return dict(deductions)

    def apply_deductions(self, items: list[OrderLineItem]) -> int:
        """
        Deduct recipe stock for ``items`` in one transaction. Stock is clamped at zero.

        Returns:
            Number of ingredients updated
        """
        with self.store.transaction():
            deductions = self.compute_deductions(items)
            if not deductions:
                return 0

            ingredients = self.store.select(
                Ingredient,
                Ingredient.id.in_(list(deductions)),
                for_update=True,
            )
            for ingredient in ingredients:
                new_stock = max(ZERO, ingredient.current_stock - deductions[ingredient.id])
                self.store.update(Ingredient, {"current_stock": new_stock}, Ingredient.id == ingredient.id)

        return len(ingredients)

    def retry_pending_deductions(self) -> RetryResult:
        """Re-run every parked deduction. Successes are marked applied."""
        pending = [
            (entry.id, entry.order_number, entry.attempts, entry.items)
            for entry in self.pending_deductions()
        ]

        applied = 0
        for entry_id, order_number, attempts, items_payload in pending:
            items = [OrderLineItem.model_validate(item) for item in items_payload]
            try:
                with self.store.transaction():
                    self.apply_deductions(items)
                    self.store.update(
                        InventoryDeductionOutbox,
                        {"status": OUTBOX_APPLIED},
                        InventoryDeductionOutbox.id == entry_id,
                    )
            except Exception as e:
                logger.warning(f"Retry {attempts + 1} of inventory deduction for order {order_number} failed: {e}")
                self.store.update(
                    InventoryDeductionOutbox,
                    {"attempts": attempts + 1, "last_error": str(e)},
                    InventoryDeductionOutbox.id == entry_id,
                )
                continue
            applied += 1
            logger.info(f"Applied parked inventory deduction for order {order_number}")

        return RetryResult(applied=applied, still_pending=len(pending) - applied)

    def pending_deductions(self) -> list[InventoryDeductionOutbox]:
        return self.store.select(
            InventoryDeductionOutbox,
            InventoryDeductionOutbox.status == OUTBOX_PENDING,
            order_by=InventoryDeductionOutbox.created_at,
        )

    def list_orders(self, order_date: Optional[date] = None) -> list[Order]:
        """Orders, newest first, optionally for one date."""
        criteria = [Order.date == order_date] if order_date else []
        return self.store.select(Order, *criteria, order_by=Order.created_at.desc())

    def _update_daily_revenue(self, order_date: date, amount: Decimal, payment_method: str) -> None:
        column = self.PAYMENT_COLUMNS[payment_method.lower()]
        existing = self.store.first(DailyRevenue, DailyRevenue.date == order_date, for_update=True)

        if existing is None:
            row = {
                "date": order_date,
                "total_sales": amount,
                "number_of_orders": 1,
                "cash_sales": ZERO,
                "upi_sales": ZERO,
                "card_sales": ZERO,
                "average_order_value": amount,
            }
            row[column] = amount
            self.store.insert(DailyRevenue, [row])
            return

        total_sales = existing.total_sales + amount
        number_of_orders = existing.number_of_orders + 1
        self.store.update(
            DailyRevenue,
            {
                "total_sales": total_sales,
                "number_of_orders": number_of_orders,
                column: getattr(existing, column) + amount,
                "average_order_value": (total_sales / number_of_orders).quantize(CENTS, rounding=ROUND_HALF_UP),
            },
            DailyRevenue.id == existing.id,
        )

    def _park_deduction(self, order_id: str, order_number: str, items_payload: list, error: Exception) -> None:
        try:
            self.store.insert(InventoryDeductionOutbox, [{
                "order_id": order_id,
                "order_number": order_number,
                "items": items_payload,
                "status": OUTBOX_PENDING,
                "attempts": 1,
                "last_error": str(error),
            }])
        except RowStoreError as e:
            logger.error(f"Could not park inventory deduction for order {order_number}: {e}")
