"""HTTP error mapping for the ordering routes.

Protean's own handlers cover the framework exceptions; the ordering errors
are mapped on top of them so the most specific class wins:
NotFoundError → 404, InvalidTransitionError and ValidationError → 400,
PaymentError → 402.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ValidationError
from protean.integrations.fastapi import register_exception_handlers

from ordering.exceptions import InvalidTransitionError, NotFoundError, PaymentError

logger = structlog.get_logger(__name__)

_STATUS_BY_ERROR = {
    NotFoundError: 404,
    InvalidTransitionError: 400,
    ValidationError: 400,
    PaymentError: 402,
}


def _handler_for(status_code: int):
    async def handle(request: Request, exc) -> JSONResponse:
        logger.info(
            "Request rejected",
            path=request.url.path,
            status_code=status_code,
            error=exc.__class__.__name__,
        )
        return JSONResponse(status_code=status_code, content={"error": exc.messages})

    return handle


def register_ordering_exception_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    for error_class, status_code in _STATUS_BY_ERROR.items():
        app.add_exception_handler(error_class, _handler_for(status_code))
