"""
Seed script for the Leafy Life development database.

Creates a starter menu, ingredient stock and recipes, then runs the startup
data migrations (default settings and alert rules).

Usage:
    alembic upgrade head
    python scripts/seed.py
"""
from decimal import Decimal

from leafy.db.row_store import RowStore
from leafy.db.session import SessionLocal
from leafy.models.menu import MenuItem
from leafy.schemas.inventory import (
    IngredientCreate,
    MenuItemCreate,
    MenuItemSize,
    RecipeCreate,
    RecipeIngredientCreate,
)
from leafy.services.data_migrations import run_data_migrations
from leafy.services.inventory import InventoryService
from leafy.services.menu import MenuService
from leafy.services.recipes import RecipeService


def dual_price(size: str, price: int) -> MenuItemSize:
    """Delivery at the listed price, dine-in 30 cheaper."""
    return MenuItemSize(size=size, price=Decimal(price), dine_in_price=Decimal(max(0, price - 30)))


MENU = [
    ("Aloo Masti", "Salads", [dual_price("Regular", 80), dual_price("Large", 110)]),
    ("Mexican Loaded", "Salads", [dual_price("Regular", 100), dual_price("Large", 130)]),
    ("Paneer Tikka Salad", "Salads", [dual_price("Regular", 115), dual_price("Large", 145)]),
    ("Tomato Soup", "Soups", [dual_price("Single", 50)]),
]

# name, category, unit, stock, threshold, cost, storage, shelf life
INGREDIENTS = [
    ("Potato (Aloo)", "Vegetables", "kg", 10, 3, 30, "Room Temperature", 14),
    ("Onion", "Vegetables", "kg", 10, 3, 35, "Room Temperature", 21),
    ("Cucumber", "Vegetables", "kg", 8, 3, 30, "Refrigerator", 5),
    ("Tomato", "Vegetables", "kg", 8, 3, 40, "Room Temperature", 5),
    ("Corn", "Vegetables", "kg", 5, 2, 60, "Freezer", 30),
    ("Green Bell Pepper", "Vegetables", "kg", 4, 2, 80, "Refrigerator", 7),
    ("Lettuce", "Greens", "kg", 5, 2, 100, "Refrigerator", 3),
    ("Fresh Coriander", "Greens", "bunch", 10, 4, 10, "Refrigerator", 3),
    ("Paneer", "Proteins", "kg", 5, 2, 320, "Refrigerator", 5),
    ("Kidney Beans (Rajma)", "Proteins", "kg", 5, 2, 140, "Room Temperature", 180),
    ("Curd (Dahi)", "Dairy", "kg", 5, 2, 60, "Refrigerator", 5),
    ("White Sesame Seeds", "Toppings & Seeds", "kg", 2, 0.5, 250, "Room Temperature", 180),
]

RECIPES = {
    "Aloo Masti": [
        ("Potato (Aloo)", "0.15", "kg"),
        ("Onion", "0.05", "kg"),
        ("Cucumber", "0.08", "kg"),
        ("Fresh Coriander", "0.25", "bunch"),
        ("White Sesame Seeds", "0.005", "kg"),
        ("Curd (Dahi)", "0.03", "kg"),
    ],
    "Mexican Loaded": [
        ("Kidney Beans (Rajma)", "0.06", "kg"),
        ("Corn", "0.05", "kg"),
        ("Green Bell Pepper", "0.04", "kg"),
        ("Lettuce", "0.06", "kg"),
        ("White Sesame Seeds", "0.005", "kg"),
    ],
    "Paneer Tikka Salad": [
        ("Paneer", "0.08", "kg"),
        ("Onion", "0.04", "kg"),
        ("Green Bell Pepper", "0.04", "kg"),
        ("Lettuce", "0.05", "kg"),
    ],
    "Tomato Soup": [
        ("Tomato", "0.2", "kg"),
        ("Onion", "0.03", "kg"),
        ("Fresh Coriander", "0.1", "bunch"),
    ],
}


def seed_database():
    """Seed the database with a starter menu."""
    session = SessionLocal()
    store = RowStore(session)

    try:
        if store.count(MenuItem) > 0:
            print("Database already seeded. Skipping...")
            return

        print("Seeding database...")

        menu = MenuService(store)
        menu_ids = {}
        for name, category, sizes in MENU:
            item = menu.add_item(MenuItemCreate(name=name, category=category, sizes=sizes))
            menu_ids[name] = item.id
        print(f"  Created {len(menu_ids)} menu items")

        inventory = InventoryService(store)
        ingredient_ids = {}
        for name, category, unit, stock, threshold, cost, storage, shelf_life in INGREDIENTS:
            ingredient = inventory.add_ingredient(IngredientCreate(
                name=name,
                category=category,
                unit=unit,
                current_stock=Decimal(str(stock)),
                minimum_threshold=Decimal(str(threshold)),
                cost_per_unit=Decimal(str(cost)),
                storage_type=storage,
                shelf_life_days=shelf_life,
            ))
            ingredient_ids[name] = ingredient.id
        print(f"  Created {len(ingredient_ids)} ingredients")

        recipes = RecipeService(store)
        for menu_name, lines in RECIPES.items():
            recipes.add_recipe(RecipeCreate(
                menu_item_id=menu_ids[menu_name],
                name=menu_name,
                ingredients=[
                    RecipeIngredientCreate(
                        ingredient_id=ingredient_ids[ingredient_name],
                        quantity=Decimal(quantity),
                        unit=unit,
                    )
                    for ingredient_name, quantity, unit in lines
                ],
            ))
        print(f"  Created {len(RECIPES)} recipes")

        applied = run_data_migrations(store)
        print(f"  Applied data migrations: {', '.join(applied) or 'none'}")

        print("\nSeeding complete!")
    finally:
        session.close()


if __name__ == "__main__":
    seed_database()
