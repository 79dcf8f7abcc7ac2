"""
Ingredient stock model.
"""
from sqlalchemy import Column, String, Text, Date, Integer, Numeric, DateTime

from leafy.db.base import Base, new_id, utcnow


class Ingredient(Base):
    """A stocked ingredient. current_stock never goes below zero."""
    __tablename__ = "ingredients"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False)  # Greens, Vegetables, Dairy, ...
    unit = Column(String(20), nullable=False)  # kg, g, L, ml, pcs, dozen, bunch, pack
    current_stock = Column(Numeric(10, 3), nullable=False, default=0)
    minimum_threshold = Column(Numeric(10, 3), nullable=False, default=0)
    cost_per_unit = Column(Numeric(10, 2), nullable=False, default=0)
    last_restocked = Column(DateTime(timezone=True))
    expiry_date = Column(Date)
    storage_type = Column(String(50))  # Refrigerator, Room Temperature, Freezer
    shelf_life_days = Column(Integer)
    supplier = Column(String(255))
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
