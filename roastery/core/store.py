import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from roastery.core.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Anything the record store can raise during a round trip, timeouts included
STORE_ERRORS = (SQLAlchemyError, asyncio.TimeoutError)


async def round_trip(awaitable: Awaitable[T], timeout: Optional[float] = None) -> T:
    """Await a single store call, giving up after ``timeout`` seconds (service default if None)."""
    if timeout is None:
        timeout = settings.store_timeout_seconds
    return await asyncio.wait_for(awaitable, timeout=timeout)


async def rollback_after_failure(db: AsyncSession) -> None:
    # The original failure is what gets reported; a failed rollback is only logged.
    try:
        await db.rollback()
    except SQLAlchemyError as e:
        logger.warning("Rollback after store failure also failed: %r", e)
