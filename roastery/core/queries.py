"""
Read paths: catalog listings split by freshness and the grouped raw-bean listing.

Listings take no locks. A quantity may change right after it was read.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from roastery.core.config import settings
from roastery.core.outcomes import Outcome, OutcomeKind
from roastery.core.store import STORE_ERRORS, rollback_after_failure, round_trip
from roastery.db.catalog import CatalogItem
from roastery.db.inventory import InventoryLot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Listing:
    rows: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def rowcount(self) -> int:
        return len(self.rows)


def utcnow() -> datetime:
    """Current time as naive UTC, the form timestamps are stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def freshness_cutoff(now: datetime, max_age_days: int) -> datetime:
    return now - timedelta(days=max_age_days)


def catalog_listing_query(fresh_only: bool, cutoff: datetime) -> Select:
    """
    Catalog rows with stock on hand, on one side of the freshness cutoff.

    Fresh: roasted after the cutoff. Stale: roasted at or before it. A row sits
    on exactly one side, the boundary itself counts as stale.
    """
    stmt = select(
        CatalogItem.id.label("catalog_id"),
        CatalogItem.product_code,
        CatalogItem.quantity,
        CatalogItem.price,
        CatalogItem.time_roasted,
        CatalogItem.roasting_notes,
        CatalogItem.img,
    ).where(CatalogItem.quantity > 0)
    if fresh_only:
        return stmt.where(CatalogItem.time_roasted > cutoff)
    return stmt.where(CatalogItem.time_roasted <= cutoff)


def inventory_listing_query() -> Select:
    # One row per vendor code: total kg, earliest arrival, lowest lot id.
    earliest_arrival = func.min(InventoryLot.date_arrival)
    return (
        select(
            func.min(InventoryLot.id).label("id"),
            InventoryLot.vendor_product_code,
            earliest_arrival.label("date_arrival"),
            func.sum(InventoryLot.quantity_kg).label("quantity_kg"),
        )
        .group_by(InventoryLot.vendor_product_code)
        .order_by(earliest_arrival.asc(), InventoryLot.vendor_product_code.asc())
    )


async def _run_listing(db: AsyncSession, stmt: Select, intent: str, timeout: Optional[float]) -> Outcome[Listing]:
    try:
        res = await round_trip(db.execute(stmt), timeout)
        rows = [dict(r) for r in res.mappings().all()]
    except STORE_ERRORS:
        logger.exception("Query failed: %s", intent)
        await rollback_after_failure(db)
        return Outcome.failure(OutcomeKind.PERSISTENCE_FAILURE, f"Failed to {intent}")
    return Outcome.success(Listing(rows=rows))


async def list_catalog(
    db: AsyncSession,
    fresh_only: bool = True,
    *,
    now: Optional[datetime] = None,
    max_age_days: Optional[int] = None,
    timeout: Optional[float] = None,
) -> Outcome[Listing]:
    if max_age_days is None:
        max_age_days = settings.catalog_max_age_days
    cutoff = freshness_cutoff(now or utcnow(), max_age_days)
    intent = "list fresh catalog products" if fresh_only else "list stale catalog products"
    return await _run_listing(db, catalog_listing_query(fresh_only, cutoff), intent, timeout)


async def list_inventory(db: AsyncSession, *, timeout: Optional[float] = None) -> Outcome[Listing]:
    return await _run_listing(db, inventory_listing_query(), "list raw bean inventory", timeout)
