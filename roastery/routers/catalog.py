from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from roastery.core.ingest import create_catalog_item
from roastery.core.ledger import EntityKind, get_record, sell_product
from roastery.core.outcomes import Outcome
from roastery.core.queries import list_catalog
from roastery.db.database import get_async_session
from roastery.routers.params import parse_bags, parse_fresh, parse_record_id
from roastery.routers.responses import error_response, outcome_response
from roastery.schemas.catalog import CatalogItemRead, CatalogListing, CreatedOut

router = APIRouter()

_ERRORS = {400: {"description": "Malformed request"}, 500: {"description": "Record store failure"}}


@router.post("/catalogproduct", response_model=CreatedOut, responses=_ERRORS)
async def create_catalog_product(
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_async_session),
):
    """Create a catalog item from a JSON body"""
    outcome = await create_catalog_item(db, payload)
    if not outcome.ok:
        return error_response(outcome)
    return JSONResponse(content=CreatedOut().model_dump())


@router.get("/getproducts", response_model=CatalogListing, responses=_ERRORS)
@router.get("/getproducts/{fresh}", response_model=CatalogListing, responses=_ERRORS)
async def get_products(fresh: str = "1", db: AsyncSession = Depends(get_async_session)):
    """List catalog items with stock, fresh (1, default) or stale (0)"""
    parsed = parse_fresh(fresh)
    if not parsed.ok:
        return error_response(parsed)

    outcome = await list_catalog(db, fresh_only=parsed.value)
    if not outcome.ok:
        return error_response(outcome)
    listing = outcome.value
    return outcome_response(
        Outcome.success({"rowcount": listing.rowcount, "products": listing.rows}),
        CatalogListing,
    )


@router.get("/product/{product_id}", response_model=CatalogItemRead, responses=_ERRORS)
async def get_product(product_id: str, db: AsyncSession = Depends(get_async_session)):
    """Get one catalog item by id"""
    parsed_id = parse_record_id(product_id)
    if not parsed_id.ok:
        return error_response(parsed_id)
    return outcome_response(await get_record(db, EntityKind.CATALOG, parsed_id.value), CatalogItemRead)


@router.post("/sellproduct/{product_id}/{quantity}", response_model=CatalogItemRead, responses=_ERRORS)
async def sell_catalog_product(product_id: str, quantity: str, db: AsyncSession = Depends(get_async_session)):
    """Sell bags of a catalog item; returns the updated record"""
    parsed_id = parse_record_id(product_id)
    if not parsed_id.ok:
        return error_response(parsed_id)
    parsed_qty = parse_bags(quantity)
    if not parsed_qty.ok:
        return error_response(parsed_qty)

    outcome = await sell_product(db, parsed_id.value, parsed_qty.value)
    return outcome_response(outcome, CatalogItemRead)
