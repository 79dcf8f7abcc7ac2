"""
Startup data migrations.

Each migration is named and runs at most once per database: its name is
recorded in applied_migrations in the same transaction as its writes, so a
migration that fails leaves no record and is retried on the next startup.
"""
import json
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from leafy.db.row_store import RowStore
from leafy.models.alert import AlertRule
from leafy.models.ingredient import Ingredient
from leafy.models.settings import AppliedMigration, AppSetting
from leafy.services.app_settings import DEFAULT_SETTINGS

logger = logging.getLogger(__name__)


DEFAULT_ALERT_RULES = [
    {
        "name": "Low Stock Warning",
        "type": "LowStock",
        "condition": "stock_below_threshold",
        "parameters": {},
    },
    {
        "name": "Monthly Rent Reminder",
        "type": "RentDue",
        "condition": "monthly_rent_due",
        "parameters": {"dayOfMonth": 1, "reminderDaysBefore": 3},
    },
    {
        "name": "Low Daily Revenue Warning",
        "type": "RevenueThreshold",
        "condition": "daily_revenue_below",
        "parameters": {"amount": 3000},
    },
    {
        "name": "High Daily Revenue Alert",
        "type": "RevenueThreshold",
        "condition": "daily_revenue_above",
        "parameters": {"amount": 15000},
    },
    {
        "name": "Monthly Expense Budget Warning",
        "type": "HighExpense",
        "condition": "expense_exceeds_budget",
        "parameters": {"monthlyBudget": 50000},
    },
    {
        "name": "Expiry Warning",
        "type": "ExpiryWarning",
        "condition": "expiry_within_days",
        "parameters": {"days": 3},
    },
    {
        "name": "Overdue Task Warning",
        "type": "TaskDue",
        "condition": "task_overdue",
        "parameters": {},
    },
]

# Ingredient category -> (storage_type, shelf_life_days)
CATEGORY_STORAGE_DEFAULTS = {
    "Greens": ("Refrigerator", 3),
    "Vegetables": ("Refrigerator", 7),
    "Fruits": ("Room Temperature", 5),
    "Proteins": ("Refrigerator", 7),
    "Grains & Cereals": ("Room Temperature", 180),
    "Dairy": ("Refrigerator", 3),
    "Dressings & Sauces": ("Refrigerator", 30),
    "Toppings & Seeds": ("Room Temperature", 180),
    "Spices & Seasonings": ("Room Temperature", 180),
    "Oils": ("Room Temperature", 365),
    "Beverages & Powders": ("Room Temperature", 180),
    "Other": ("Room Temperature", 30),
}


@dataclass(frozen=True)
class DataMigration:
    name: str
    apply: Callable[[RowStore], None]


def seed_default_settings(store: RowStore) -> None:
    """Insert default app settings for keys not yet present."""
    existing = {row.key for row in store.select(AppSetting)}
    missing = [
        {"key": key, "value": json.dumps(value)}
        for key, value in DEFAULT_SETTINGS.items()
        if key not in existing
    ]
    if missing:
        store.insert(AppSetting, missing)


def seed_default_alert_rules(store: RowStore) -> None:
    """Insert the default rule set into an empty alert_rules table."""
    if store.count(AlertRule) > 0:
        return
    store.insert(AlertRule, [{**rule, "is_active": True} for rule in DEFAULT_ALERT_RULES])


def _ensure_rule(store: RowStore, condition: str) -> None:
    if store.first(AlertRule, AlertRule.condition == condition) is not None:
        return
    rule = next(r for r in DEFAULT_ALERT_RULES if r["condition"] == condition)
    store.insert(AlertRule, [{**rule, "is_active": True}])


def backfill_ingredient_storage(store: RowStore) -> None:
    """
    Fill storage_type and shelf_life_days from the ingredient's category,
    then make sure the expiry and overdue-task rules exist.
    """
    for ingredient in store.select(Ingredient):
        if ingredient.storage_type and ingredient.shelf_life_days:
            continue
        storage_type, shelf_life_days = CATEGORY_STORAGE_DEFAULTS.get(
            ingredient.category, CATEGORY_STORAGE_DEFAULTS["Other"]
        )
        store.update(
            Ingredient,
            {
                "storage_type": ingredient.storage_type or storage_type,
                "shelf_life_days": ingredient.shelf_life_days or shelf_life_days,
            },
            Ingredient.id == ingredient.id,
        )

    _ensure_rule(store, "task_overdue")
    _ensure_rule(store, "expiry_within_days")


BUILTIN_MIGRATIONS: Sequence[DataMigration] = (
    DataMigration("seed_default_settings", seed_default_settings),
    DataMigration("seed_default_alert_rules", seed_default_alert_rules),
    DataMigration("backfill_ingredient_storage", backfill_ingredient_storage),
)


def run_data_migrations(
    store: RowStore,
    migrations: Optional[Sequence[DataMigration]] = None,
) -> list[str]:
    """
    Apply every migration not yet recorded, in order.

    Returns:
        Names of the migrations applied by this call

    Raises:
        RowStoreError: a migration failed; later migrations were not attempted
    """
    migrations = BUILTIN_MIGRATIONS if migrations is None else migrations
    done = {row.name for row in store.select(AppliedMigration)}

    applied = []
    for migration in migrations:
        if migration.name in done:
            continue
        with store.transaction():
            migration.apply(store)
            store.insert(AppliedMigration, [{"name": migration.name}])
        applied.append(migration.name)
        logger.info(f"Applied data migration {migration.name}")

    return applied
