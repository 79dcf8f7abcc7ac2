"""
Monthly profit & loss aggregation.
"""
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from leafy.core.clock import iter_month_days, month_bounds, month_label
from leafy.db.row_store import RowStore
from leafy.models.finance import DailyRevenue, Expense
from leafy.services.revenue_share import RevenueShareCalculator

ZERO = Decimal("0")

# Lowercased expense category -> P&L bucket. Anything else lands in "other".
EXPENSE_BUCKETS = {
    "rent": "rent",
    "revenueshare": "rent",
    "electricity": "electricity",
    "water": "water",
    "ingredients": "ingredients",
    "salaries": "salaries",
}


@dataclass
class ExpenseBreakdown:
    rent: Decimal = ZERO
    electricity: Decimal = ZERO
    water: Decimal = ZERO
    ingredients: Decimal = ZERO
    salaries: Decimal = ZERO
    other: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.rent + self.electricity + self.water + self.ingredients + self.salaries + self.other


@dataclass
class DailySnapshot:
    date: date
    revenue: Decimal
    orders: int
    expenses: Decimal


@dataclass
class MonthlyPnL:
    """Profit & loss for one calendar month."""
    month: str  # YYYY-MM
    total_revenue: Decimal
    total_orders: int
    average_order_value: Decimal
    expenses: ExpenseBreakdown
    gross_profit: Decimal  # revenue - ingredients
    net_profit: Decimal  # revenue - all expenses
    profit_margin: Decimal  # percent of revenue, 0 when there is no revenue
    daily_breakdown: list[DailySnapshot] = field(default_factory=list)


def bucket_for(category: str) -> str:
    return EXPENSE_BUCKETS.get(category.lower(), "other")


class MonthlyPnLAggregator:
    """
    Sums daily revenue and categorized expenses for a month.

    When no expense was categorized as rent, the revenue-share effective rent
    is used instead, so cafés that never log rent still see it in the P&L.
    """

    def __init__(self, store: RowStore, revenue_share: Optional[RevenueShareCalculator] = None):
        self.store = store
        self.revenue_share = revenue_share or RevenueShareCalculator(store)

    def calculate(self, year: int, month_index: int) -> MonthlyPnL:
        """
        Args:
            year: Calendar year
            month_index: Zero-based month (0 = January)
        """
        start, end = month_bounds(year, month_index)

        revenue_rows = self.store.select(
            DailyRevenue,
            DailyRevenue.date >= start,
            DailyRevenue.date <= end,
        )
        expense_rows = self.store.select(
            Expense,
            Expense.date >= start,
            Expense.date <= end,
        )

        total_revenue = sum((r.total_sales for r in revenue_rows), ZERO)
        total_orders = sum(r.number_of_orders for r in revenue_rows)

        breakdown = ExpenseBreakdown()
        for expense in expense_rows:
            bucket = bucket_for(expense.category)
            setattr(breakdown, bucket, getattr(breakdown, bucket) + expense.amount)

        if breakdown.rent == ZERO:
            breakdown.rent = self.revenue_share.calculate(year, month_index).effective_rent

        total_expenses = breakdown.total
        net_profit = total_revenue - total_expenses

        revenue_by_day = {r.date: r for r in revenue_rows}
        expenses_by_day: dict[date, Decimal] = defaultdict(lambda: ZERO)
        for expense in expense_rows:
            expenses_by_day[expense.date] += expense.amount

        daily_breakdown = []
        for day in iter_month_days(year, month_index):
            record = revenue_by_day.get(day)
            daily_breakdown.append(DailySnapshot(
                date=day,
                revenue=record.total_sales if record else ZERO,
                orders=record.number_of_orders if record else 0,
                expenses=expenses_by_day.get(day, ZERO),
            ))

        return MonthlyPnL(
            month=month_label(year, month_index),
            total_revenue=total_revenue,
            total_orders=total_orders,
            average_order_value=total_revenue / total_orders if total_orders > 0 else ZERO,
            expenses=breakdown,
            gross_profit=total_revenue - breakdown.ingredients,
            net_profit=net_profit,
            profit_margin=net_profit / total_revenue * 100 if total_revenue > 0 else ZERO,
            daily_breakdown=daily_breakdown,
        )
