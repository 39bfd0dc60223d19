import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from roastery.core.outcomes import Outcome, OutcomeKind
from roastery.core.store import STORE_ERRORS, rollback_after_failure, round_trip
from roastery.db.catalog import CatalogItem
from roastery.schemas.catalog import CatalogItemCreate

logger = logging.getLogger(__name__)


def _describe(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "body"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


async def create_catalog_item(
    db: AsyncSession,
    data: Any,
    *,
    timeout: Optional[float] = None,
) -> Outcome[Dict[str, Any]]:
    """
    Insert one catalog item from a decoded JSON body.

    Only field presence and types are checked; duplicate product codes are allowed.
    """
    if data is None:
        return Outcome.failure(OutcomeKind.MALFORMED_REQUEST, "No JSON body in request")
    if not isinstance(data, dict):
        return Outcome.failure(OutcomeKind.MALFORMED_REQUEST, "JSON body must be an object")
    try:
        payload = CatalogItemCreate.model_validate(data)
    except ValidationError as e:
        return Outcome.failure(OutcomeKind.MALFORMED_REQUEST, f"Invalid catalog product: {_describe(e)}")

    model = CatalogItem(**payload.model_dump())
    db.add(model)
    try:
        await round_trip(db.commit(), timeout)
        await round_trip(db.refresh(model), timeout)
    except STORE_ERRORS:
        logger.exception("Creating catalog product %s failed", payload.product_code)
        await rollback_after_failure(db)
        return Outcome.failure(OutcomeKind.PERSISTENCE_FAILURE, "Failed to create catalog product")

    logger.info("Created catalog product %s (id=%s, %s bags)", model.product_code, model.id, model.quantity)
    return Outcome.success(model.to_schema)
