"""
Menu item model.
"""
from sqlalchemy import Column, String, Text, Boolean, DateTime
from sqlalchemy.orm import relationship

from leafy.db.base import Base, JSONType, new_id, utcnow


class MenuItem(Base):
    """A dish or drink sold by the café, priced per size variant."""
    __tablename__ = "menu_items"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False)  # Salads, Soups, Juices, ...
    description = Column(Text)
    # [{"size": "Regular", "price": "250", "dine_in_price": "220", "takeaway_price": null}]
    sizes = Column(JSONType, nullable=False, default=list)
    is_customizable = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    recipes = relationship("Recipe", back_populates="menu_item", cascade="all, delete-orphan")
