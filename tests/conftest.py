import os

# The app module builds its engine at import time; keep it off Postgres in tests.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from datetime import date, timedelta  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from roastery.core.queries import utcnow  # noqa: E402
from roastery.db.catalog import CatalogItem  # noqa: E402
from roastery.db.database import Base, get_async_session  # noqa: E402
from roastery.db.inventory import InventoryLot  # noqa: E402
from roastery.main import app  # noqa: E402


class Seeder:
    """Writes and reads rows through a plain sync engine on the same SQLite file."""

    def __init__(self, engine):
        self.engine = engine

    def product(self, **overrides) -> int:
        defaults = {
            "product_code": "ETH-YIRG-LIGHT",
            "quantity": 10,
            "price": Decimal("16.50"),
            "time_roasted": utcnow() - timedelta(days=1),
            "roasting_notes": "Jasmine, bergamot",
            "img": None,
        }
        defaults.update(overrides)
        with Session(self.engine) as s:
            item = CatalogItem(**defaults)
            s.add(item)
            s.commit()
            return item.id

    def lot(self, **overrides) -> int:
        defaults = {
            "vendor_product_code": "ETH-YIRG-G1",
            "date_arrival": date.today() - timedelta(days=7),
            "quantity_kg": Decimal("60.0"),
        }
        defaults.update(overrides)
        with Session(self.engine) as s:
            lot = InventoryLot(**defaults)
            s.add(lot)
            s.commit()
            return lot.id

    def bags(self, product_id: int) -> int:
        with Session(self.engine) as s:
            return s.get(CatalogItem, product_id).quantity

    def set_bags(self, product_id: int, quantity: int) -> None:
        with Session(self.engine) as s:
            s.get(CatalogItem, product_id).quantity = quantity
            s.commit()

    def kilograms(self, lot_id: int) -> Decimal:
        with Session(self.engine) as s:
            return s.get(InventoryLot, lot_id).quantity_kg

    def product_count(self) -> int:
        with Session(self.engine) as s:
            return s.query(CatalogItem).count()


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def db_path(tmp_path):
    return tmp_path / "roastery.db"


@pytest.fixture()
def seed(db_path):
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)
    yield Seeder(engine)
    engine.dispose()


@pytest.fixture()
def session_maker(db_path, seed):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{db_path}",
        poolclass=NullPool,
        connect_args={"timeout": 30},
    )
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture()
def client(session_maker):
    async def _session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = _session
    yield TestClient(app)
    app.dependency_overrides.clear()
