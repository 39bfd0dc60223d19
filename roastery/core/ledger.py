"""
Stock ledger: validated decrements of catalog bags and raw-bean kilograms.

Selling bags and withdrawing beans share one algorithm, parameterized by a
``StockField``:

1. read the record by id (missing -> NOT_FOUND)
2. compare the requested amount with what is on hand (too much -> INSUFFICIENT_STOCK)
3. conditionally decrement in the store:
   ``UPDATE ... SET q = q - :requested WHERE id = :id AND q >= :requested RETURNING *``

If the conditional update matches no row, another request got there first. The
transaction is rolled back and the cycle starts over, at most
``settings.withdraw_max_retries`` times before reporting CONFLICT. The guard lives
in the UPDATE itself, so concurrent withdrawals can never push a quantity below
zero and every accepted withdrawal is subtracted exactly once.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Optional, Union

from sqlalchemy import Table, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from roastery.core.config import settings
from roastery.core.outcomes import Outcome, OutcomeKind
from roastery.core.store import STORE_ERRORS, rollback_after_failure, round_trip
from roastery.db.catalog import CatalogItem
from roastery.db.inventory import InventoryLot

logger = logging.getLogger(__name__)

Quantity = Union[int, Decimal]

# Column limits: catalog.quantity is INTEGER, inventory.quantity_kg is NUMERIC(10, 3)
INT32_MAX = 2**31 - 1
KG_QUANTUM = Decimal("0.001")
KG_MAX = Decimal("9999999.999")


class EntityKind(str, Enum):
    CATALOG = "catalog"
    INVENTORY = "inventory"


def format_quantity(value: Any) -> str:
    """Render a quantity without trailing zeros (Decimal('7.000') -> '7')."""
    if isinstance(value, Decimal):
        return format(value.normalize(), "f")
    return str(value)


@dataclass(frozen=True)
class StockField:
    table: Table
    column: str
    unit: str
    noun: str
    action: str
    integral: bool
    not_found_template: str
    # Smallest step and largest amount the stock column can hold
    quantum: Decimal
    max_amount: Decimal

    def not_found_message(self, record_id: Any) -> str:
        return self.not_found_template.format(id=record_id)

    def insufficient_message(self, record_id: Any, requested: Quantity, available: Quantity) -> str:
        return (
            f"Requested {format_quantity(requested)} {self.unit} of {self.noun} {record_id} "
            f"but only have {format_quantity(available)} {self.unit} available"
        )

    def coerce(self, requested: Any) -> Optional[Quantity]:
        """
        Return the requested amount as int (bags) or Decimal (kg).

        None if it is not positive, finer than the column scale, or larger than
        the column can hold.
        """
        if isinstance(requested, bool) or requested is None:
            return None
        try:
            amount = Decimal(str(requested))
        except (InvalidOperation, ValueError):
            return None
        if not amount.is_finite() or amount <= 0 or amount > self.max_amount:
            return None
        if amount != amount.quantize(self.quantum):
            return None
        if self.integral:
            return int(amount)
        return amount


STOCK_FIELDS: Dict[EntityKind, StockField] = {
    EntityKind.CATALOG: StockField(
        table=CatalogItem.__table__,
        column="quantity",
        unit="bags",
        noun="product",
        action="sell",
        integral=True,
        not_found_template="Product {id} does NOT exist!",
        quantum=Decimal(1),
        max_amount=Decimal(INT32_MAX),
    ),
    EntityKind.INVENTORY: StockField(
        table=InventoryLot.__table__,
        column="quantity_kg",
        unit="kg",
        noun="lot",
        action="withdraw from",
        integral=False,
        not_found_template="{id} does NOT exist!",
        quantum=KG_QUANTUM,
        max_amount=KG_MAX,
    ),
}


async def get_record(
    db: AsyncSession,
    kind: EntityKind,
    record_id: int,
    *,
    timeout: Optional[float] = None,
) -> Outcome[Dict[str, Any]]:
    stock = STOCK_FIELDS[EntityKind(kind)]
    table = stock.table
    try:
        res = await round_trip(db.execute(select(table).where(table.c.id == record_id)), timeout)
        row = res.mappings().first()
    except STORE_ERRORS:
        logger.exception("Reading %s %s failed", stock.noun, record_id)
        await rollback_after_failure(db)
        return Outcome.failure(OutcomeKind.PERSISTENCE_FAILURE, f"Failed to read {stock.noun} {record_id}")
    if row is None:
        return Outcome.failure(OutcomeKind.NOT_FOUND, stock.not_found_message(record_id), id=record_id)
    return Outcome.success(dict(row))


async def withdraw(
    db: AsyncSession,
    kind: EntityKind,
    record_id: int,
    requested: Any,
    *,
    timeout: Optional[float] = None,
    max_retries: Optional[int] = None,
) -> Outcome[Dict[str, Any]]:
    """
    Remove ``requested`` units from one catalog item or inventory lot.

    On success the outcome carries the full updated record. Rejections
    (NOT_FOUND, INSUFFICIENT_STOCK, MALFORMED_REQUEST) never write to the store.
    """
    stock = STOCK_FIELDS[EntityKind(kind)]
    amount = stock.coerce(requested)
    if amount is None:
        what = "whole number of bags" if stock.integral else "number of kg with at most 3 decimal places"
        return Outcome.failure(
            OutcomeKind.MALFORMED_REQUEST,
            f"Quantity must be a positive {what}, at most {format_quantity(stock.max_amount)}, "
            f"got {requested!r}",
        )

    table = stock.table
    column = table.c[stock.column]
    attempts = max(1, settings.withdraw_max_retries if max_retries is None else max_retries)
    failed = f"Failed to {stock.action} {stock.noun} {record_id}"

    for attempt in range(1, attempts + 1):
        try:
            res = await round_trip(db.execute(select(table).where(table.c.id == record_id)), timeout)
            current = res.mappings().first()
        except STORE_ERRORS:
            logger.exception("Reading %s %s failed", stock.noun, record_id)
            await rollback_after_failure(db)
            return Outcome.failure(OutcomeKind.PERSISTENCE_FAILURE, failed)

        if current is None:
            logger.info("Rejected %s %s: does not exist", stock.noun, record_id)
            return Outcome.failure(OutcomeKind.NOT_FOUND, stock.not_found_message(record_id), id=record_id)

        available = current[stock.column]
        if amount > available:
            logger.info(
                "Rejected %s %s: requested %s %s, available %s",
                stock.noun, record_id, format_quantity(amount), stock.unit, format_quantity(available),
            )
            return Outcome.failure(
                OutcomeKind.INSUFFICIENT_STOCK,
                stock.insufficient_message(record_id, amount, available),
                id=record_id,
                requested=amount,
                available=available,
            )

        stmt = (
            update(table)
            .where(table.c.id == record_id, column >= amount)
            .values({stock.column: column - amount})
            .returning(*table.c)
        )
        try:
            res = await round_trip(db.execute(stmt), timeout)
            updated = res.mappings().first()
            if updated is None:
                await round_trip(db.rollback(), timeout)
                logger.info(
                    "%s %s changed concurrently (attempt %d/%d), retrying",
                    stock.noun, record_id, attempt, attempts,
                )
                continue
            await round_trip(db.commit(), timeout)
        except STORE_ERRORS:
            logger.exception("Updating %s %s failed", stock.noun, record_id)
            await rollback_after_failure(db)
            return Outcome.failure(OutcomeKind.PERSISTENCE_FAILURE, failed)

        logger.info(
            "%s %s: removed %s %s, %s left",
            stock.noun, record_id, format_quantity(amount), stock.unit, format_quantity(updated[stock.column]),
        )
        return Outcome.success(dict(updated))

    logger.warning("Gave up on %s %s after %d conflicting attempts", stock.noun, record_id, attempts)
    return Outcome.failure(
        OutcomeKind.CONFLICT,
        f"{stock.noun.capitalize()} {record_id} is being modified concurrently, please retry",
        id=record_id,
    )


async def sell_product(db: AsyncSession, product_id: int, bags: Any, **kwargs) -> Outcome[Dict[str, Any]]:
    return await withdraw(db, EntityKind.CATALOG, product_id, bags, **kwargs)


async def withdraw_beans(db: AsyncSession, lot_id: int, kilograms: Any, **kwargs) -> Outcome[Dict[str, Any]]:
    return await withdraw(db, EntityKind.INVENTORY, lot_id, kilograms, **kwargs)
