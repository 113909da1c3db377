"""
Global exception handlers.

Request validation failures and stray ledger errors are rendered in the same shape
as failed mutations, so the dashboard handles a single error format.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from clinica.core.errors import LedgerError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register the global error handlers on the FastAPI app."""

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError):
        logger.warning(f"LedgerError on {request.url.path}: {exc.code} {exc.message}")
        return JSONResponse(status_code=exc.http_status, content=jsonable_encoder(exc.to_response()))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=422,
            content=jsonable_encoder({
                "success": False,
                "error": "Datos inválidos",
                "code": "VALIDATION_ERROR",
                "details": {
                    "fields": [
                        {
                            "field": ".".join(str(loc) for loc in e["loc"]),
                            "message": e["msg"],
                        }
                        for e in exc.errors()
                    ]
                },
            }),
        )
