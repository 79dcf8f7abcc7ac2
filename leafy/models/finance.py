"""
Daily revenue rollup and expense models.
"""
from sqlalchemy import Column, String, Text, Date, Integer, Boolean, Numeric, DateTime

from leafy.db.base import Base, new_id, utcnow


class DailyRevenue(Base):
    """One row per calendar date, accumulated on every order of that date."""
    __tablename__ = "daily_revenue"

    id = Column(String(36), primary_key=True, default=new_id)
    date = Column(Date, nullable=False, unique=True)
    total_sales = Column(Numeric(12, 2), nullable=False, default=0)
    number_of_orders = Column(Integer, nullable=False, default=0)
    cash_sales = Column(Numeric(12, 2), nullable=False, default=0)
    upi_sales = Column(Numeric(12, 2), nullable=False, default=0)
    card_sales = Column(Numeric(12, 2), nullable=False, default=0)
    average_order_value = Column(Numeric(10, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    @property
    def payment_breakdown(self) -> dict:
        return {"cash": self.cash_sales, "upi": self.upi_sales, "card": self.card_sales}


class Expense(Base):
    """A manually entered expense."""
    __tablename__ = "expenses"

    id = Column(String(36), primary_key=True, default=new_id)
    date = Column(Date, nullable=False, index=True)
    category = Column(String(50), nullable=False)  # Rent, RevenueShare, Electricity, ...
    description = Column(Text, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurring_day = Column(Integer)
    receipt_note = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
