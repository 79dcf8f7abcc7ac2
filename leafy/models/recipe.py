"""
Recipe models: which ingredients a menu item (size) consumes.
"""
from sqlalchemy import Column, String, Text, Integer, Boolean, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from leafy.db.base import Base, new_id, utcnow


class Recipe(Base):
    """Recipe for a menu item, optionally for one size variant."""
    __tablename__ = "recipes"

    id = Column(String(36), primary_key=True, default=new_id)
    menu_item_id = Column(String(36), ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    size_variant = Column(String(20))  # Regular, Large, Single; NULL = any size
    preparation_instructions = Column(Text)
    prep_time_minutes = Column(Integer)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    menu_item = relationship("MenuItem", back_populates="recipes")
    ingredients = relationship("RecipeIngredient", back_populates="recipe", cascade="all, delete-orphan")


class RecipeIngredient(Base):
    """Quantity of one ingredient used per unit of the recipe."""
    __tablename__ = "recipe_ingredients"

    id = Column(String(36), primary_key=True, default=new_id)
    recipe_id = Column(String(36), ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True)
    ingredient_id = Column(String(36), ForeignKey("ingredients.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Numeric(10, 3), nullable=False)
    unit = Column(String(20), nullable=False)
    is_optional = Column(Boolean, nullable=False, default=False)
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    recipe = relationship("Recipe", back_populates="ingredients")
