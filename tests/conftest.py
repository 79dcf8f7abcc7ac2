"""
Test configuration and fixtures.
"""
import os
from datetime import date
from decimal import Decimal
from typing import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

# Configure the app for tests before importing it
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ALERT_SWEEP_ENABLED"] = "false"
os.environ["RUN_STARTUP_MIGRATIONS"] = "false"

from leafy.main import app
from leafy.db.base import Base
from leafy.db.row_store import ChangeFeed, RowStore
from leafy.db.session import get_db
from leafy.models.ingredient import Ingredient
from leafy.models.menu import MenuItem
from leafy.models.recipe import Recipe, RecipeIngredient


@pytest.fixture(scope="function")
def engine():
    """Fresh in-memory SQLite database per test."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db(session_factory) -> Generator[Session, None, None]:
    """Create a database session for the test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def feed() -> ChangeFeed:
    """Change feed private to the test."""
    return ChangeFeed()


@pytest.fixture
def store(db: Session, feed: ChangeFeed) -> RowStore:
    return RowStore(db, feed)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create test client with database session override."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def order_date() -> date:
    return date(2024, 1, 15)


@pytest.fixture
def salad_setup(store: RowStore) -> dict:
    """
    A salad with Regular and Large recipes.

    Regular uses 0.15 kg potato, 0.05 kg onion and 0.25 bunch coriander;
    Large uses 0.2 kg potato and 0.08 kg onion.
    """
    potato, onion, coriander = store.insert(Ingredient, [
        {"name": "Potato (Aloo)", "category": "Vegetables", "unit": "kg",
         "current_stock": Decimal("10"), "minimum_threshold": Decimal("3")},
        {"name": "Onion", "category": "Vegetables", "unit": "kg",
         "current_stock": Decimal("10"), "minimum_threshold": Decimal("3")},
        {"name": "Fresh Coriander", "category": "Greens", "unit": "bunch",
         "current_stock": Decimal("8"), "minimum_threshold": Decimal("4")},
    ])
    ids = {"potato": potato.id, "onion": onion.id, "coriander": coriander.id}

    salad = store.insert(MenuItem, [{
        "name": "Aloo Masti",
        "category": "Salads",
        "sizes": [
            {"size": "Regular", "price": "80", "dine_in_price": "50", "takeaway_price": None},
            {"size": "Large", "price": "110", "dine_in_price": "80", "takeaway_price": None},
        ],
    }])[0]
    ids["salad"] = salad.id

    regular, large = store.insert(Recipe, [
        {"menu_item_id": salad.id, "name": "Aloo Masti", "size_variant": "Regular"},
        {"menu_item_id": salad.id, "name": "Aloo Masti (Large)", "size_variant": "Large"},
    ])
    ids["regular_recipe"] = regular.id
    ids["large_recipe"] = large.id

    store.insert(RecipeIngredient, [
        {"recipe_id": regular.id, "ingredient_id": potato.id, "quantity": Decimal("0.15"), "unit": "kg"},
        {"recipe_id": regular.id, "ingredient_id": onion.id, "quantity": Decimal("0.05"), "unit": "kg"},
        {"recipe_id": regular.id, "ingredient_id": coriander.id, "quantity": Decimal("0.25"), "unit": "bunch"},
        {"recipe_id": large.id, "ingredient_id": potato.id, "quantity": Decimal("0.2"), "unit": "kg"},
        {"recipe_id": large.id, "ingredient_id": onion.id, "quantity": Decimal("0.08"), "unit": "kg"},
    ])
    return ids
