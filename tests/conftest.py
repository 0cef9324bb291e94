"""
Pytest fixtures for the farm inventory test suite.

Tests run against a throwaway SQLite file. DATABASE_URL is set before any
project module is imported because the engine is built at import time.
"""
import os
import tempfile
from decimal import Decimal
from uuid import uuid4

_TEST_DB_DIR = tempfile.mkdtemp(prefix="farm-inventory-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DB_DIR, 'farm_inventory.db')}"

import pytest
from fastapi.testclient import TestClient

from shared.core.auth import validate_current_token
from shared.core.database import Base, FarmSessionLocal, farm_engine
from shared.core.schemas import UserToken
from farm_service.app.main import app
from farm_service.app.crud.inventory import inventory_items_crud, inventory_transactions_crud
from farm_service.app.schemas.inventory.inventory_items_schemas import InventoryItemCreate
from farm_service.app.schemas.inventory.inventory_transactions_schemas import InventoryTransactionCreate

TEST_USER = UserToken(user_id="test-user", name="Test Farmer")


@pytest.fixture(autouse=True)
def fresh_tables():
    Base.metadata.drop_all(bind=farm_engine)
    Base.metadata.create_all(bind=farm_engine)
    yield


@pytest.fixture
def db():
    session = FarmSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def farm_id():
    return uuid4()


@pytest.fixture
def client():
    app.dependency_overrides[validate_current_token] = lambda: TEST_USER
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_item(db, farm_id):
    """Create an item through the ledger store."""

    def _make(quantity="100", threshold=None, unit="kilograms", name="Layer feed",
              category="feed", **extra):
        return inventory_items_crud.create_item(db, farm_id, InventoryItemCreate(
            name=name,
            category=category,
            unit=unit,
            quantity=Decimal(quantity),
            low_stock_threshold=Decimal(threshold) if threshold is not None else None,
            **extra,
        ))

    return _make


@pytest.fixture
def apply(db, farm_id):
    """Apply a transaction through the processor."""

    def _apply(item, transaction_type, quantity, **extra):
        return inventory_transactions_crud.apply_transaction(
            db, farm_id, item.id,
            InventoryTransactionCreate(
                transaction_type=transaction_type,
                quantity=Decimal(str(quantity)),
                **extra,
            ),
            performed_by=TEST_USER.user_id,
        )

    return _apply
