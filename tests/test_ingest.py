"""Catalog ingest called directly, without the HTTP layer."""

from datetime import datetime

import pytest

from roastery.core.ingest import create_catalog_item
from roastery.core.outcomes import OutcomeKind


def _make_item(**overrides):
    item = {
        "product_code": "COL-HUILA-MED",
        "quantity": 12,
        "price": "14.00",
        "time_roasted": datetime(2026, 10, 16, 9, 30).isoformat(),
        "roasting_notes": "Red apple, caramel, cocoa",
    }
    item.update(overrides)
    return item


@pytest.mark.anyio
class TestCreateCatalogItem:
    async def test_created_record_is_returned(self, session_maker, seed):
        async with session_maker() as db:
            outcome = await create_catalog_item(db, _make_item())
        assert outcome.ok
        assert outcome.value["product_code"] == "COL-HUILA-MED"
        assert outcome.value["img"] is None
        assert seed.product_count() == 1

    async def test_missing_body(self, session_maker, seed):
        async with session_maker() as db:
            outcome = await create_catalog_item(db, None)
        assert outcome.kind is OutcomeKind.MALFORMED_REQUEST
        assert outcome.message == "No JSON body in request"

    async def test_body_must_be_object(self, session_maker, seed):
        async with session_maker() as db:
            outcome = await create_catalog_item(db, ["COL-HUILA-MED"])
        assert outcome.message == "JSON body must be an object"

    @pytest.mark.parametrize(
        "overrides,field",
        [
            ({"price": "1000000000"}, "price"),
            ({"price": "14.005"}, "price"),
            ({"quantity": 2**31}, "quantity"),
            ({"quantity": -1}, "quantity"),
        ],
    )
    async def test_out_of_range_values_are_client_errors(self, session_maker, seed, overrides, field):
        async with session_maker() as db:
            outcome = await create_catalog_item(db, _make_item(**overrides))
        assert outcome.kind is OutcomeKind.MALFORMED_REQUEST
        assert field in outcome.message
        assert seed.product_count() == 0
