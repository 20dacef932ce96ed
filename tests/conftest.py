import os

# must be set before coffee_pos.core.config is imported
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["APP_ENV"] = "test"
os.environ["ORDER_API_PROVIDER"] = "mock"

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from coffee_pos.db.init_db import create_tables, drop_tables, seed_catalog
from coffee_pos.db.session import SessionLocal, engine, get_db
from coffee_pos.schemas.cart import ExtraShotSelection, ItemCustomization, SizeSelection
from coffee_pos.schemas.catalog import ProductSnapshot
from coffee_pos.schemas.promotions import Promotion, PromotionType
from coffee_pos.services.cart.registry import CartRegistry
from coffee_pos.services.cart.store import CartStore
from coffee_pos.services.orders.mock import MockOrderGateway

FIXED_NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def clock():
    """Zero-arg clock pinned to FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def store(clock):
    """Empty cart on the fixed clock."""
    return CartStore(clock=clock)


@pytest.fixture
def latte():
    """$4.00 latte with a 10% product discount."""
    return ProductSnapshot(id=1, name="Iced Latte", price=Decimal("4.00"), discount=Decimal("10"))


@pytest.fixture
def americano():
    """$10.00 americano, no product discount."""
    return ProductSnapshot(id=2, name="Americano", price=Decimal("10.00"))


@pytest.fixture
def croissant():
    return ProductSnapshot(id=3, name="Butter Croissant", price=Decimal("3.00"))


@pytest.fixture
def medium():
    return SizeSelection(id=11, name="Medium", price_modifier=Decimal("0.50"))


@pytest.fixture
def large():
    return SizeSelection(id=12, name="Large", price_modifier=Decimal("1.00"))


@pytest.fixture
def extra_shot():
    return ExtraShotSelection(id=31, name="Extra Shot", price_modifier=Decimal("0.75"))


@pytest.fixture
def oat_shot():
    return ExtraShotSelection(id=32, name="Oat Shot", price_modifier=Decimal("0.60"))


@pytest.fixture
def make_customization():
    def _make(**kwargs):
        return ItemCustomization(**kwargs)
    return _make


@pytest.fixture
def make_promotion():
    """Build a promotion that is active around FIXED_NOW unless told otherwise."""
    counter = {"id": 0}

    def _make(
        type=PromotionType.PERCENT_DISCOUNT,
        discount=None,
        buy_quantity=None,
        free_quantity=None,
        name=None,
        is_active=True,
        start_date=None,
        end_date=None,
    ):
        counter["id"] += 1
        return Promotion(
            id=counter["id"],
            name=name or f"Promotion {counter['id']}",
            type=type,
            discount=discount,
            buy_quantity=buy_quantity,
            free_quantity=free_quantity,
            is_active=is_active,
            start_date=start_date or FIXED_NOW - timedelta(days=1),
            end_date=end_date or FIXED_NOW + timedelta(days=1),
        )
    return _make


@pytest.fixture
def db_session():
    """Fresh in-memory catalog per test."""
    create_tables(engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        drop_tables(engine)


@pytest.fixture
def seeded_db(db_session):
    seed_catalog(db_session)
    return db_session


@pytest.fixture
def order_gateway():
    return MockOrderGateway()


@pytest.fixture
def api_client(seeded_db, order_gateway):
    """TestClient on the seeded catalog with a fresh registry and mock order API."""
    from coffee_pos.main import app

    app.state.cart_registry = CartRegistry()
    app.state.order_gateway = order_gateway
    app.dependency_overrides[get_db] = lambda: seeded_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
