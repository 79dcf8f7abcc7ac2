"""
Order Pydantic schemas for API request/response models.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

PaymentMethod = Literal["Cash", "UPI", "Card"]
OrderType = Literal["DineIn", "Takeaway", "Delivery"]
SizeOption = Literal["Regular", "Large", "Single"]


class CustomBowlSelection(BaseModel):
    """Build-your-own bowl choices. Items carrying these skip recipe deduction."""
    base: Optional[str] = None
    proteins: List[str] = Field(default_factory=list)
    veggies: List[str] = Field(default_factory=list)
    dressing: Optional[str] = None
    toppings: List[str] = Field(default_factory=list)
    add_on_total: Decimal = Decimal("0")


class OrderLineItem(BaseModel):
    """A cart line as submitted at checkout."""
    menu_item_id: str
    menu_item_name: str = ""
    size: SizeOption
    quantity: int = Field(ge=1)
    unit_price: Decimal = Field(ge=0)
    line_total: Decimal = Field(ge=0)
    customizations: Optional[CustomBowlSelection] = None
    excluded_ingredients: Optional[List[str]] = None
    special_instructions: Optional[str] = None


class PlaceOrderRequest(BaseModel):
    """Request model for placing an order."""
    items: List[OrderLineItem] = Field(min_length=1)
    payment_method: PaymentMethod
    order_type: OrderType = "DineIn"
    discount: Decimal = Field(default=Decimal("0"), ge=0)
    notes: Optional[str] = None
    order_date: Optional[date] = None  # backdated order
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    created_by: Optional[str] = None


class PlaceOrderResponse(BaseModel):
    id: str
    order_number: str


class OrderResponse(BaseModel):
    """Response model for a single order."""
    id: str
    order_number: str
    order_type: str
    date: date
    items: List[OrderLineItem]
    subtotal: Decimal
    discount: Decimal
    total_amount: Decimal
    payment_method: str
    notes: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderListResponse(BaseModel):
    orders: List[OrderResponse]
    total: int


class OutboxEntryResponse(BaseModel):
    """A pending inventory deduction."""
    id: str
    order_id: str
    order_number: str
    status: str
    attempts: int
    last_error: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RetryDeductionsResponse(BaseModel):
    applied: int
    still_pending: int
