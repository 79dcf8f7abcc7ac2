"""
SQLAlchemy models for Leafy Life.
"""
# Inventory
from leafy.models.ingredient import Ingredient

# Menu & Recipes
from leafy.models.menu import MenuItem
from leafy.models.recipe import Recipe, RecipeIngredient

# Sales
from leafy.models.order import Order, InventoryDeductionOutbox

# Finance
from leafy.models.finance import DailyRevenue, Expense

# Alerts
from leafy.models.alert import Alert, AlertRule

# Tasks
from leafy.models.task import Task

# Settings
from leafy.models.settings import AppSetting, AppliedMigration


__all__ = [
    # Inventory
    "Ingredient",
    # Menu & Recipes
    "MenuItem",
    "Recipe",
    "RecipeIngredient",
    # Sales
    "Order",
    "InventoryDeductionOutbox",
    # Finance
    "DailyRevenue",
    "Expense",
    # Alerts
    "Alert",
    "AlertRule",
    # Tasks
    "Task",
    # Settings
    "AppSetting",
    "AppliedMigration",
]
