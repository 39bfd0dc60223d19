"""Parsing of string path parameters before they reach the ledger or the query engine."""

from decimal import Decimal

from roastery.core.ledger import STOCK_FIELDS, EntityKind
from roastery.core.outcomes import Outcome, OutcomeKind


def _malformed(message: str) -> Outcome:
    return Outcome.failure(OutcomeKind.MALFORMED_REQUEST, message)


def parse_record_id(raw: str) -> Outcome[int]:
    raw = (raw or "").strip()
    if not (raw.isascii() and raw.isdigit()) or int(raw) <= 0:
        return _malformed(f"Invalid id {raw!r}: must be a positive integer")
    return Outcome.success(int(raw))


def parse_bags(raw: str) -> Outcome[int]:
    raw = (raw or "").strip()
    if not (raw.isascii() and raw.isdigit()):
        return _malformed(f"Invalid quantity {raw!r}: must be a positive whole number of bags")
    value = STOCK_FIELDS[EntityKind.CATALOG].coerce(raw)
    if value is None:
        return _malformed(f"Invalid quantity {raw!r}: must be a positive whole number of bags")
    return Outcome.success(value)


def parse_kilograms(raw: str) -> Outcome[Decimal]:
    raw = (raw or "").strip()
    value = STOCK_FIELDS[EntityKind.INVENTORY].coerce(raw)
    if value is None:
        return _malformed(
            f"Invalid quantity {raw!r}: must be a positive number of kg "
            f"with at most 3 decimal places"
        )
    return Outcome.success(value)


def parse_fresh(raw: str) -> Outcome[bool]:
    raw = (raw or "").strip()
    if raw not in ("0", "1"):
        return _malformed(f"Invalid fresh flag {raw!r}: must be 0 or 1")
    return Outcome.success(raw == "1")
