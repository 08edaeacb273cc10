"""Test configuration and fixtures"""

from decimal import Decimal
from typing import Any, Dict, List, Tuple

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from robs.main import app
from robs.database import Base, get_db
from robs.models.menu import MenuItem
from robs.models.settings import RestaurantSettings
from robs.models.table import Table, TableStatus
from robs.services.events import get_event_publisher
from robs.services.lifecycle import LifecycleCoordinator


# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class RecordingPublisher:
    """Keeps published events in memory"""

    def __init__(self):
        self.events: List[Tuple[str, Dict[str, Any]]] = []

    async def publish(self, event: str, payload: Dict[str, Any]) -> None:
        self.events.append((event, payload))

    def names(self) -> List[str]:
        return [name for name, _ in self.events]

    def of(self, event: str) -> List[Dict[str, Any]]:
        return [payload for name, payload in self.events if name == event]

    def clear(self) -> None:
        self.events.clear()


async def seed_settings(db) -> RestaurantSettings:
    """Tax disabled so totals equal the line sum"""
    row = RestaurantSettings(
        restaurant_name="Test Restaurant",
        tax_rate=Decimal("5.00"),
        tax_enabled=False,
        currency="₹",
        discount_presets=[5, 10, 15, 20],
    )
    db.add(row)
    await db.commit()
    return row


async def seed_tables(db) -> List[int]:
    """Free tables 1-5"""
    for number in range(1, 6):
        db.add(Table(number=number, capacity=4, status=TableStatus.FREE, is_primary=False))
    await db.commit()
    return list(range(1, 6))


async def seed_menu(db) -> Dict[str, Any]:
    """Menu item ids by short name"""
    items = {
        "tikka": MenuItem(name="Paneer Tikka", price=Decimal("50.00"), category="Starters"),
        "chai": MenuItem(name="Masala Chai", price=Decimal("20.00"), category="Drinks"),
        "thali": MenuItem(name="Veg Thali", price=Decimal("100.00"), category="Mains"),
        "special": MenuItem(
            name="Seasonal Special",
            price=Decimal("80.00"),
            category="Mains",
            is_available=False,
        ),
    }
    for item in items.values():
        db.add(item)
    await db.commit()
    return {key: item.id for key, item in items.items()}


@pytest.fixture
async def test_db():
    """Create test database"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def shared_db(tmp_path):
    """File-backed database that several sessions can use at once.

    Yields the session factory and the seeded menu item ids.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'robs.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        await seed_settings(session)
        await seed_tables(session)
        menu = await seed_menu(session)

    yield session_factory, menu

    await engine.dispose()


@pytest.fixture
async def restaurant_settings(test_db):
    return await seed_settings(test_db)


@pytest.fixture
async def test_tables(test_db) -> List[int]:
    return await seed_tables(test_db)


@pytest.fixture
async def test_menu_items(test_db) -> Dict[str, Any]:
    return await seed_menu(test_db)


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
async def coordinator(test_db, restaurant_settings, test_tables, test_menu_items, publisher):
    return LifecycleCoordinator(test_db, publisher)


@pytest.fixture
async def client(test_db, restaurant_settings, test_tables, test_menu_items, publisher):
    """Create test client with overridden database and publisher"""
    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_event_publisher] = lambda: publisher

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
