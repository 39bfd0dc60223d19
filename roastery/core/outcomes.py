"""
Structured results returned by the stock ledger, the query engine and catalog ingest.

Nothing in the core raises for an expected failure: callers inspect ``Outcome.kind``
and the HTTP layer maps it to a status code and a JSON body.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


class OutcomeKind(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    INSUFFICIENT_STOCK = "insufficient_stock"
    MALFORMED_REQUEST = "malformed_request"
    PERSISTENCE_FAILURE = "persistence_failure"
    CONFLICT = "conflict"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]

    @property
    def is_server_error(self) -> bool:
        return self.status_code >= 500


_STATUS_CODES = {
    OutcomeKind.OK: 200,
    OutcomeKind.NOT_FOUND: 404,
    OutcomeKind.INSUFFICIENT_STOCK: 409,
    OutcomeKind.MALFORMED_REQUEST: 400,
    OutcomeKind.PERSISTENCE_FAILURE: 500,
    OutcomeKind.CONFLICT: 503,
}


@dataclass(frozen=True)
class Outcome(Generic[T]):
    kind: OutcomeKind
    value: Optional[T] = None
    message: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.OK

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(kind=OutcomeKind.OK, value=value)

    @classmethod
    def failure(cls, kind: OutcomeKind, message: str, **details: Any) -> "Outcome[T]":
        if kind is OutcomeKind.OK:
            raise ValueError("failure outcome needs a failure kind")
        return cls(kind=kind, message=message, details=details)
