from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import storefront.persistence.db as db
from storefront.core.config import get_settings
from storefront.core.logging import configure_logging
from storefront.domain.cart.store import CartStore
from storefront.domain.catalog.models import Product, ProductCategory
from storefront.domain.catalog.store import CatalogStore
from storefront.domain.checkout.machine import CheckoutStateMachine
from storefront.domain.orders.numbers import OrderNumberGenerator
from storefront.domain.pricing.engine import PricingEngine
from storefront.faults import FaultPolicies
from storefront.persistence.models import Base
from storefront.persistence.slots import MemorySlotStore, SqlSlotStore
from storefront.session import StorefrontSession, build_session

FIXED_NOW = datetime(2026, 1, 10, 12, 0, tzinfo=timezone.utc)


def _product(
    product_id: str,
    price: int,
    name: str | None = None,
    brand: str = "Acme",
    category: ProductCategory = ProductCategory.LAPTOPS,
    description: str = "",
    rating: float = 4.0,
    is_featured: bool = False,
    original_price: int | None = None,
) -> Product:
    return Product(
        id=product_id,
        name=name or f"Product {product_id}",
        brand=brand,
        category=category,
        description=description,
        price=price,
        original_price=original_price,
        rating=rating,
        is_featured=is_featured,
        specifications={"sku": product_id},
    )


@pytest.fixture()
def make_product():
    return _product


@pytest.fixture()
def products() -> list[Product]:
    return [
        _product("lap-1", 129999, name="UltraBook Pro", brand="Northwind", rating=4.6, is_featured=True,
                 description="Light laptop", original_price=149999),
        _product("tv-1", 49999, name="Vivid 55", brand="Lumen", category=ProductCategory.TVS, rating=4.3,
                 description="4K television"),
        _product("ph-1", 79900, name="Pixelate 8", brand="Orbit", category=ProductCategory.PHONES, rating=4.7,
                 is_featured=True, description="Smartphone with great camera"),
        _product("gm-1", 29999, name="PlayBox S", brand="Arcadia", category=ProductCategory.GAMING, rating=4.5,
                 description="Compact console"),
        _product("sh-1", 2999, name="Echo Hub Mini", brand="Lumen", category=ProductCategory.SMART_HOME,
                 rating=4.1, description="Smart speaker"),
        _product("sh-2", 1999, name="Smart Plug Duo", brand="Northwind", category=ProductCategory.SMART_HOME,
                 rating=4.1, description="Two smart plugs"),
    ]


@pytest.fixture()
def catalog(products) -> CatalogStore:
    return CatalogStore(products)


@pytest.fixture()
def slots() -> MemorySlotStore:
    return MemorySlotStore()


@pytest.fixture()
def cart_store(slots) -> CartStore:
    return CartStore(slots)


@pytest.fixture()
def pricing() -> PricingEngine:
    return PricingEngine(free_shipping_threshold=5000, flat_shipping_fee=999)


@pytest.fixture()
def order_numbers() -> OrderNumberGenerator:
    return OrderNumberGenerator()


@pytest.fixture()
def checkout(cart_store, pricing, order_numbers) -> CheckoutStateMachine:
    return CheckoutStateMachine(cart_store, pricing, order_numbers, clock=lambda: FIXED_NOW)


@pytest.fixture(scope="session")
def test_db_path(tmp_path_factory: pytest.TempPathFactory) -> Path:
    return tmp_path_factory.mktemp("db") / "test.sqlite"


@pytest.fixture(scope="session", autouse=True)
def configure_test_engine(test_db_path: Path):
    configure_logging()
    settings = get_settings()
    settings.fault_price_surcharge_probability = 0.0
    settings.fault_order_id_collision_probability = 0.0
    settings.fault_newest_sort_probability = 0.0
    settings.fault_search_dropout_probability = 0.0

    engine = create_engine(
        f"sqlite+pysqlite:///{test_db_path}",
        future=True,
        connect_args={"check_same_thread": False},
    )
    TestSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

    db.engine = engine
    db.SessionLocal = TestSessionLocal

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def sql_slots(configure_test_engine) -> SqlSlotStore:
    store = SqlSlotStore()
    store.delete(get_settings().cart_storage_key)
    return store


@pytest.fixture()
def storefront(sql_slots, catalog) -> StorefrontSession:
    return build_session(get_settings(), slots=sql_slots, catalog=catalog, faults=FaultPolicies.disabled())


@pytest.fixture()
def client(storefront):
    from storefront.main import app

    app.state.storefront = storefront
    with TestClient(app) as c:
        yield c
    app.state.storefront = None
