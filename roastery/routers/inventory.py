from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from roastery.core.ledger import EntityKind, get_record, withdraw_beans
from roastery.core.outcomes import Outcome
from roastery.core.queries import list_inventory
from roastery.db.database import get_async_session
from roastery.routers.params import parse_kilograms, parse_record_id
from roastery.routers.responses import error_response, outcome_response
from roastery.schemas.inventory import BeanListing, InventoryLotRead

router = APIRouter()

_ERRORS = {400: {"description": "Malformed request"}, 500: {"description": "Record store failure"}}


@router.get("/listbeans", response_model=BeanListing, responses=_ERRORS)
async def list_beans(db: AsyncSession = Depends(get_async_session)):
    """
    List raw beans grouped by vendor code.

    Each group reports the summed kg, the earliest arrival date and the lowest
    lot id, ordered by arrival.
    """
    outcome = await list_inventory(db)
    if not outcome.ok:
        return error_response(outcome)
    listing = outcome.value
    return outcome_response(
        Outcome.success({"rowcount": listing.rowcount, "items": listing.rows}),
        BeanListing,
    )


@router.get("/lot/{lot_id}", response_model=InventoryLotRead, responses=_ERRORS)
async def get_lot(lot_id: str, db: AsyncSession = Depends(get_async_session)):
    parsed_id = parse_record_id(lot_id)
    if not parsed_id.ok:
        return error_response(parsed_id)
    return outcome_response(await get_record(db, EntityKind.INVENTORY, parsed_id.value), InventoryLotRead)


@router.post("/getbeans/{lot_id}/{quantity}", response_model=InventoryLotRead, responses=_ERRORS)
async def get_beans(lot_id: str, quantity: str, db: AsyncSession = Depends(get_async_session)):
    """Withdraw kg of raw beans from a lot for roasting; returns the updated lot"""
    parsed_id = parse_record_id(lot_id)
    if not parsed_id.ok:
        return error_response(parsed_id)
    parsed_qty = parse_kilograms(quantity)
    if not parsed_qty.ok:
        return error_response(parsed_qty)

    outcome = await withdraw_beans(db, parsed_id.value, parsed_qty.value)
    return outcome_response(outcome, InventoryLotRead)
