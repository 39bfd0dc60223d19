import logging
from typing import Type

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from roastery.core.outcomes import Outcome, OutcomeKind
from roastery.schemas.errors import ErrorBody, ExceptionBody

logger = logging.getLogger(__name__)


def error_response(outcome: Outcome) -> JSONResponse:
    if outcome.kind.is_server_error:
        logger.warning("Responding %s: %s", outcome.kind.status_code, outcome.message)
    if outcome.kind is OutcomeKind.PERSISTENCE_FAILURE:
        body: BaseModel = ExceptionBody(exception=outcome.message)
    else:
        body = ErrorBody(error=outcome.message)
    return JSONResponse(status_code=outcome.kind.status_code, content=body.model_dump(mode="json"))


def outcome_response(outcome: Outcome, schema: Type[BaseModel]) -> JSONResponse:
    """Render a successful outcome through ``schema``; failures become error bodies."""
    if not outcome.ok:
        return error_response(outcome)
    body = schema.model_validate(outcome.value)
    return JSONResponse(status_code=outcome.kind.status_code, content=body.model_dump(mode="json"))
