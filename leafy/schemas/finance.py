"""
Finance schemas: expenses, daily revenue, revenue share and monthly P&L.
"""
import datetime as dt
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ExpenseCategory = Literal[
    "Rent",
    "RevenueShare",
    "Electricity",
    "Water",
    "Ingredients",
    "Equipment",
    "Salaries",
    "Marketing",
    "Maintenance",
    "Other",
]


class ExpenseCreate(BaseModel):
    date: date
    category: ExpenseCategory
    description: str
    amount: Decimal = Field(gt=0)
    is_recurring: bool = False
    recurring_day: Optional[int] = Field(default=None, ge=1, le=31)
    receipt_note: Optional[str] = None


class ExpenseUpdate(BaseModel):
    date: Optional[dt.date] = None
    category: Optional[ExpenseCategory] = None
    description: Optional[str] = None
    amount: Optional[Decimal] = Field(default=None, gt=0)
    is_recurring: Optional[bool] = None
    recurring_day: Optional[int] = Field(default=None, ge=1, le=31)
    receipt_note: Optional[str] = None


class ExpenseResponse(BaseModel):
    id: str
    date: date
    category: str
    description: str
    amount: Decimal
    is_recurring: bool
    recurring_day: Optional[int] = None
    receipt_note: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DailyRevenueResponse(BaseModel):
    date: date
    total_sales: Decimal
    number_of_orders: int
    payment_breakdown: Dict[str, Decimal]
    average_order_value: Decimal

    model_config = ConfigDict(from_attributes=True)


class RevenueShareResponse(BaseModel):
    month: str
    total_monthly_revenue: Decimal
    revenue_share_amount: Decimal
    minimum_guarantee: Decimal
    effective_rent: Decimal
    rent_type: Literal["Revenue Share", "Minimum Guarantee"]
    revenue_share_percent: Decimal
    break_even_revenue: Decimal

    model_config = ConfigDict(from_attributes=True)


class ExpenseBreakdownResponse(BaseModel):
    rent: Decimal
    electricity: Decimal
    water: Decimal
    ingredients: Decimal
    salaries: Decimal
    other: Decimal
    total: Decimal

    model_config = ConfigDict(from_attributes=True)


class DailySnapshotResponse(BaseModel):
    date: date
    revenue: Decimal
    orders: int
    expenses: Decimal

    model_config = ConfigDict(from_attributes=True)


class MonthlyPnLResponse(BaseModel):
    month: str
    total_revenue: Decimal
    total_orders: int
    average_order_value: Decimal
    expenses: ExpenseBreakdownResponse
    gross_profit: Decimal
    net_profit: Decimal
    profit_margin: Decimal
    daily_breakdown: List[DailySnapshotResponse]

    model_config = ConfigDict(from_attributes=True)
