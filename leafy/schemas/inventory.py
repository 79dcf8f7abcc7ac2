"""
Ingredient, menu item and recipe schemas.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from leafy.schemas.order import SizeOption


# ============ Ingredients ============

class IngredientCreate(BaseModel):
    name: str = Field(min_length=1)
    category: str
    unit: str
    current_stock: Decimal = Field(default=Decimal("0"), ge=0)
    minimum_threshold: Decimal = Field(default=Decimal("0"), ge=0)
    cost_per_unit: Decimal = Field(default=Decimal("0"), ge=0)
    expiry_date: Optional[date] = None
    storage_type: Optional[str] = None
    shelf_life_days: Optional[int] = Field(default=None, ge=1)
    supplier: Optional[str] = None
    notes: Optional[str] = None


class IngredientUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    unit: Optional[str] = None
    minimum_threshold: Optional[Decimal] = Field(default=None, ge=0)
    cost_per_unit: Optional[Decimal] = Field(default=None, ge=0)
    expiry_date: Optional[date] = None
    storage_type: Optional[str] = None
    shelf_life_days: Optional[int] = Field(default=None, ge=1)
    supplier: Optional[str] = None
    notes: Optional[str] = None


class RestockRequest(BaseModel):
    quantity: Decimal = Field(gt=0)


class StockSetRequest(BaseModel):
    current_stock: Decimal = Field(ge=0)


class IngredientResponse(BaseModel):
    id: str
    name: str
    category: str
    unit: str
    current_stock: Decimal
    minimum_threshold: Decimal
    cost_per_unit: Decimal
    last_restocked: Optional[datetime] = None
    expiry_date: Optional[date] = None
    storage_type: Optional[str] = None
    shelf_life_days: Optional[int] = None
    supplier: Optional[str] = None
    notes: Optional[str] = None
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============ Menu ============

class MenuItemSize(BaseModel):
    size: SizeOption
    price: Decimal = Field(ge=0)  # delivery price
    dine_in_price: Optional[Decimal] = Field(default=None, ge=0)
    takeaway_price: Optional[Decimal] = Field(default=None, ge=0)


class MenuItemCreate(BaseModel):
    name: str = Field(min_length=1)
    category: str
    description: Optional[str] = None
    sizes: List[MenuItemSize] = Field(min_length=1)
    is_customizable: bool = False
    is_active: bool = True


class MenuItemUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    sizes: Optional[List[MenuItemSize]] = None
    is_customizable: Optional[bool] = None
    is_active: Optional[bool] = None


class MenuItemResponse(BaseModel):
    id: str
    name: str
    category: str
    description: Optional[str] = None
    sizes: List[MenuItemSize]
    is_customizable: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============ Recipes ============

class RecipeIngredientCreate(BaseModel):
    ingredient_id: str
    quantity: Decimal = Field(gt=0)
    unit: str
    is_optional: bool = False
    notes: Optional[str] = None


class RecipeIngredientUpdate(BaseModel):
    quantity: Optional[Decimal] = Field(default=None, gt=0)
    unit: Optional[str] = None
    is_optional: Optional[bool] = None
    notes: Optional[str] = None


class RecipeIngredientResponse(BaseModel):
    id: str
    recipe_id: str
    ingredient_id: str
    quantity: Decimal
    unit: str
    is_optional: bool
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class RecipeCreate(BaseModel):
    menu_item_id: str
    name: str = Field(min_length=1)
    size_variant: Optional[SizeOption] = None
    preparation_instructions: Optional[str] = None
    prep_time_minutes: Optional[int] = Field(default=None, ge=0)
    ingredients: List[RecipeIngredientCreate] = Field(default_factory=list)


class RecipeUpdate(BaseModel):
    name: Optional[str] = None
    size_variant: Optional[SizeOption] = None
    preparation_instructions: Optional[str] = None
    prep_time_minutes: Optional[int] = Field(default=None, ge=0)


class RecipeResponse(BaseModel):
    id: str
    menu_item_id: str
    name: str
    size_variant: Optional[str] = None
    preparation_instructions: Optional[str] = None
    prep_time_minutes: Optional[int] = None
    ingredients: List[RecipeIngredientResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class ExclusionOptionsResponse(BaseModel):
    menu_item_id: str
    size: str
    ingredient_names: List[str]
