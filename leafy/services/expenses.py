"""
Expense records.
"""
import logging
from typing import Optional

from leafy.core.clock import month_bounds
from leafy.core.errors import NotFoundError
from leafy.db.row_store import RowStore
from leafy.models.finance import Expense
from leafy.schemas.finance import ExpenseCreate, ExpenseUpdate

logger = logging.getLogger(__name__)


class ExpenseService:
    def __init__(self, store: RowStore):
        self.store = store

    def list_expenses(self, year: Optional[int] = None, month_index: Optional[int] = None) -> list[Expense]:
        """All expenses, newest first, or only those of one month when both year and month_index are given."""
        criteria = []
        if year is not None and month_index is not None:
            start, end = month_bounds(year, month_index)
            criteria = [Expense.date >= start, Expense.date <= end]
        return self.store.select(Expense, *criteria, order_by=(Expense.date.desc(), Expense.created_at.desc()))

    def add_expense(self, data: ExpenseCreate) -> Expense:
        expense = self.store.insert(Expense, [data.model_dump()])[0]
        logger.info(f"Recorded {data.category} expense of {data.amount} on {data.date}")
        return self.store.get(Expense, expense.id)

    def update_expense(self, expense_id: str, data: ExpenseUpdate) -> Expense:
        if self.store.get(Expense, expense_id) is None:
            raise NotFoundError("Expense", expense_id)
        patch = data.model_dump(exclude_unset=True)
        if patch:
            self.store.update(Expense, patch, Expense.id == expense_id)
        return self.store.get(Expense, expense_id)

    def delete_expense(self, expense_id: str) -> None:
        if not self.store.delete(Expense, Expense.id == expense_id):
            raise NotFoundError("Expense", expense_id)
