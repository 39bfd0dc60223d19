"""
Seed a few catalog items and raw bean lots for local development.

Run locally:
  python scripts/seed_demo_data.py

It uses the same DATABASE_* env vars as the service (dotenv supported by roastery.core.config).
Rows are only inserted into empty tables, so running it twice is harmless.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select

from roastery.core.queries import utcnow
from roastery.db.catalog import CatalogItem
from roastery.db.database import async_session_maker, create_db_and_tables
from roastery.db.inventory import InventoryLot


@dataclass(frozen=True)
class SeedProduct:
    product_code: str
    quantity: int
    price: str
    roasted_days_ago: int
    roasting_notes: str
    img: Optional[str] = None


@dataclass(frozen=True)
class SeedLot:
    vendor_product_code: str
    arrived_days_ago: int
    quantity_kg: str


SEED_PRODUCTS: list[SeedProduct] = [
    SeedProduct("ETH-YIRG-LIGHT", 24, "16.50", 1, "Jasmine, bergamot, lemon curd"),
    SeedProduct("COL-HUILA-MED", 12, "14.00", 3, "Red apple, caramel, cocoa"),
    SeedProduct("BRA-CERR-DARK", 30, "12.00", 9, "Dark chocolate, toasted nuts"),
    SeedProduct("KEN-AA-LIGHT", 0, "18.00", 2, "Blackcurrant, grapefruit"),
]

SEED_LOTS: list[SeedLot] = [
    SeedLot("ETH-YIRG-G1", 20, "60.0"),
    SeedLot("ETH-YIRG-G1", 6, "30.0"),
    SeedLot("COL-HUILA-SUP", 14, "45.5"),
    SeedLot("BRA-CERR-NY2", 30, "69.0"),
]


async def main() -> None:
    await create_db_and_tables()
    now = utcnow()
    today = date.today()

    async with async_session_maker() as db:
        existing = (await db.execute(select(func.count()).select_from(CatalogItem))).scalar_one()
        if not existing:
            for p in SEED_PRODUCTS:
                db.add(
                    CatalogItem(
                        product_code=p.product_code,
                        quantity=p.quantity,
                        price=Decimal(p.price),
                        time_roasted=now - timedelta(days=p.roasted_days_ago),
                        roasting_notes=p.roasting_notes,
                        img=p.img,
                    )
                )

        existing = (await db.execute(select(func.count()).select_from(InventoryLot))).scalar_one()
        if not existing:
            for lot in SEED_LOTS:
                db.add(
                    InventoryLot(
                        vendor_product_code=lot.vendor_product_code,
                        date_arrival=today - timedelta(days=lot.arrived_days_ago),
                        quantity_kg=Decimal(lot.quantity_kg),
                    )
                )

        await db.commit()

        products = (await db.execute(select(CatalogItem).order_by(CatalogItem.id))).scalars().all()
        lots = (await db.execute(select(InventoryLot).order_by(InventoryLot.id))).scalars().all()
        for p in products:
            print("catalog:", p.to_schema)
        for lot in lots:
            print("inventory:", lot.to_schema)


if __name__ == "__main__":
    asyncio.run(main())
