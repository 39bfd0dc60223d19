"""Catalog freshness listings and the grouped raw bean listing."""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from roastery.core.outcomes import OutcomeKind
from roastery.core.queries import freshness_cutoff, list_catalog, list_inventory

NOW = datetime(2026, 10, 18, 12, 0, 0)


def _codes(listing):
    return sorted(row["product_code"] for row in listing.rows)


class _BrokenSession:
    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT * FROM catalog", {}, Exception("server closed the connection"))

    async def rollback(self):
        pass


def test_cutoff_is_max_age_before_now():
    assert freshness_cutoff(NOW, 5) == datetime(2026, 10, 13, 12, 0, 0)


@pytest.mark.anyio
class TestListCatalog:
    async def test_fresh_and_stale_partition(self, session_maker, seed):
        for k in (0, 1, 4, 5, 6, 30):
            seed.product(product_code=f"AGE-{k}", time_roasted=NOW - timedelta(days=k))

        async with session_maker() as db:
            fresh = await list_catalog(db, True, now=NOW, max_age_days=5)
            stale = await list_catalog(db, False, now=NOW, max_age_days=5)

        assert fresh.ok and stale.ok
        assert _codes(fresh.value) == ["AGE-0", "AGE-1", "AGE-4"]
        assert _codes(stale.value) == ["AGE-30", "AGE-5", "AGE-6"]
        assert fresh.value.rowcount == 3
        assert stale.value.rowcount == 3

    async def test_boundary_just_inside_window_is_fresh(self, session_maker, seed):
        seed.product(product_code="EDGE", time_roasted=NOW - timedelta(days=5) + timedelta(seconds=1))
        async with session_maker() as db:
            fresh = await list_catalog(db, True, now=NOW, max_age_days=5)
            stale = await list_catalog(db, False, now=NOW, max_age_days=5)
        assert _codes(fresh.value) == ["EDGE"]
        assert stale.value.rowcount == 0

    async def test_sold_out_items_never_listed(self, session_maker, seed):
        seed.product(product_code="SOLD-OUT-FRESH", quantity=0, time_roasted=NOW - timedelta(days=1))
        seed.product(product_code="SOLD-OUT-STALE", quantity=0, time_roasted=NOW - timedelta(days=20))
        seed.product(product_code="IN-STOCK", quantity=1, time_roasted=NOW - timedelta(days=1))
        async with session_maker() as db:
            fresh = await list_catalog(db, True, now=NOW, max_age_days=5)
            stale = await list_catalog(db, False, now=NOW, max_age_days=5)
        assert _codes(fresh.value) == ["IN-STOCK"]
        assert stale.value.rowcount == 0

    async def test_rows_use_listing_schema(self, session_maker, seed):
        pid = seed.product(product_code="COL-HUILA-MED", price=Decimal("14.00"), img="huila.png")
        async with session_maker() as db:
            outcome = await list_catalog(db, True)
        row = outcome.value.rows[0]
        assert row["catalog_id"] == pid
        assert set(row) == {
            "catalog_id", "product_code", "quantity", "price", "time_roasted", "roasting_notes", "img",
        }
        assert row["img"] == "huila.png"

    async def test_store_failure_reports_intent(self):
        outcome = await list_catalog(_BrokenSession(), False, now=NOW)
        assert outcome.kind is OutcomeKind.PERSISTENCE_FAILURE
        assert outcome.message == "Failed to list stale catalog products"


@pytest.mark.anyio
class TestListInventory:
    async def test_groups_by_vendor_code(self, session_maker, seed):
        today = date(2026, 10, 18)
        first = seed.lot(vendor_product_code="ETH-YIRG-G1", date_arrival=today - timedelta(days=20), quantity_kg=Decimal("60.0"))
        seed.lot(vendor_product_code="ETH-YIRG-G1", date_arrival=today - timedelta(days=6), quantity_kg=Decimal("30.5"))
        bra = seed.lot(vendor_product_code="BRA-CERR-NY2", date_arrival=today - timedelta(days=30), quantity_kg=Decimal("69.0"))
        col = seed.lot(vendor_product_code="COL-HUILA-SUP", date_arrival=today - timedelta(days=14), quantity_kg=Decimal("45.5"))

        async with session_maker() as db:
            outcome = await list_inventory(db)

        assert outcome.ok
        rows = outcome.value.rows
        assert outcome.value.rowcount == 3
        assert [r["vendor_product_code"] for r in rows] == ["BRA-CERR-NY2", "ETH-YIRG-G1", "COL-HUILA-SUP"]
        assert rows[0]["id"] == bra
        assert rows[2]["id"] == col

        eth = rows[1]
        assert eth["id"] == first
        assert eth["date_arrival"] == today - timedelta(days=20)
        assert eth["quantity_kg"] == Decimal("90.5")

    async def test_empty_inventory(self, session_maker, seed):
        async with session_maker() as db:
            outcome = await list_inventory(db)
        assert outcome.ok
        assert outcome.value.rowcount == 0

    async def test_store_failure_reports_intent(self):
        outcome = await list_inventory(_BrokenSession())
        assert outcome.kind is OutcomeKind.PERSISTENCE_FAILURE
        assert outcome.message == "Failed to list raw bean inventory"
