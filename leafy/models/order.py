"""
Order model and the inventory deduction outbox.
"""
from sqlalchemy import Column, String, Text, Date, Integer, Numeric, DateTime, Index

from leafy.db.base import Base, JSONType, new_id, utcnow


class Order(Base):
    """A checkout. Created once, never updated."""
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=new_id)
    order_number = Column(String(32), nullable=False, unique=True)  # LL-20240115-003
    order_type = Column(String(20), nullable=False)  # DineIn, Takeaway, Delivery
    date = Column(Date, nullable=False)
    items = Column(JSONType, nullable=False, default=list)  # serialized OrderLineItem list
    subtotal = Column(Numeric(10, 2), nullable=False)
    discount = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(String(20), nullable=False)  # Cash, UPI, Card
    notes = Column(Text)
    customer_name = Column(String(255))
    customer_phone = Column(String(50))
    created_by = Column(String(100))
    created_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        Index("idx_orders_date", "date"),
    )


class InventoryDeductionOutbox(Base):
    """
    Inventory deductions that failed after an order was placed.

    The order itself stands; these rows are retried until the stock
    deduction is applied.
    """
    __tablename__ = "inventory_deduction_outbox"

    id = Column(String(36), primary_key=True, default=new_id)
    order_id = Column(String(36), nullable=False, index=True)
    order_number = Column(String(32), nullable=False)
    items = Column(JSONType, nullable=False, default=list)
    status = Column(String(20), nullable=False, default="pending")  # pending, applied
    attempts = Column(Integer, nullable=False, default=1)
    last_error = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
