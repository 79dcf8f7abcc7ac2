"""
Finance router: monthly P&L, revenue share rent, expenses and daily revenue.

Months are 1-12 here; the services take a zero-based month index.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from leafy.core.deps import get_store
from leafy.db.row_store import RowStore
from leafy.models.finance import DailyRevenue
from leafy.schemas.finance import (
    DailyRevenueResponse,
    ExpenseBreakdownResponse,
    ExpenseCreate,
    ExpenseResponse,
    ExpenseUpdate,
    MonthlyPnLResponse,
    RevenueShareResponse,
)
from leafy.services.expenses import ExpenseService
from leafy.services.finance import MonthlyPnLAggregator
from leafy.services.revenue_share import RevenueShareCalculator

router = APIRouter(prefix="/finance", tags=["finance"])


@router.get("/pnl", response_model=MonthlyPnLResponse)
def monthly_pnl(
    year: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    store: RowStore = Depends(get_store),
):
    """
    Profit & loss for a month.

    When no rent expense was logged, rent is the month's effective
    revenue-share rent.
    """
    pnl = MonthlyPnLAggregator(store).calculate(year, month - 1)
    return MonthlyPnLResponse(
        month=pnl.month,
        total_revenue=pnl.total_revenue,
        total_orders=pnl.total_orders,
        average_order_value=pnl.average_order_value,
        expenses=ExpenseBreakdownResponse.model_validate(pnl.expenses),
        gross_profit=pnl.gross_profit,
        net_profit=pnl.net_profit,
        profit_margin=pnl.profit_margin,
        daily_breakdown=pnl.daily_breakdown,
    )


@router.get("/revenue-share", response_model=RevenueShareResponse)
def revenue_share(
    year: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    store: RowStore = Depends(get_store),
):
    """Effective rent: the greater of the minimum guarantee and the revenue share."""
    return RevenueShareCalculator(store).calculate(year, month - 1)


@router.get("/daily-revenue", response_model=List[DailyRevenueResponse])
def daily_revenue(
    start: Optional[date] = None,
    end: Optional[date] = None,
    store: RowStore = Depends(get_store),
):
    criteria = []
    if start:
        criteria.append(DailyRevenue.date >= start)
    if end:
        criteria.append(DailyRevenue.date <= end)
    return store.select(DailyRevenue, *criteria, order_by=DailyRevenue.date)


@router.get("/expenses", response_model=List[ExpenseResponse])
def list_expenses(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    month: Optional[int] = Query(None, ge=1, le=12),
    store: RowStore = Depends(get_store),
):
    month_index = month - 1 if month is not None else None
    return ExpenseService(store).list_expenses(year, month_index)


@router.post("/expenses", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
def create_expense(data: ExpenseCreate, store: RowStore = Depends(get_store)):
    return ExpenseService(store).add_expense(data)


@router.patch("/expenses/{expense_id}", response_model=ExpenseResponse)
def update_expense(expense_id: str, data: ExpenseUpdate, store: RowStore = Depends(get_store)):
    return ExpenseService(store).update_expense(expense_id, data)


@router.delete("/expenses/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(expense_id: str, store: RowStore = Depends(get_store)):
    ExpenseService(store).delete_expense(expense_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
