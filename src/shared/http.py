"""HTTP mapping of the error taxonomy for the FastAPI application.

Protean's handlers cover plain ValidationError (400) and
ObjectNotFoundError (404); the more specific kinds registered here win
because Starlette resolves handlers along the exception's MRO.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from shared.errors import InsufficientFunds, InvalidState, InvalidTransition, NotFound, StorageError

logger = structlog.get_logger(__name__)

_STATUS_BY_ERROR = {
    NotFound: 404,
    InvalidState: 409,
    InvalidTransition: 409,
    InsufficientFunds: 402,
    StorageError: 503,
}


def _error_body(exc) -> dict:
    messages = getattr(exc, "messages", None) or {"error": [str(exc)]}
    return {"kind": exc.kind.value, "errors": messages, "context": exc.context}


def _handler(status_code: int):
    async def handle(request: Request, exc: Exception) -> JSONResponse:
        log = logger.error if status_code >= 500 else logger.info
        log("Request failed", path=request.url.path, kind=exc.kind.value, status_code=status_code, **exc.context)
        return JSONResponse(status_code=status_code, content=_error_body(exc))

    return handle


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    for error_cls, status_code in _STATUS_BY_ERROR.items():
        app.add_exception_handler(error_cls, _handler(status_code))
