from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from stockroom.services.errors import Internal, StockroomError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Toutes les erreurs sortent en {"error": <kind>, "detail": <message>}."""

    @app.exception_handler(StockroomError)
    async def domain_error(request: Request, exc: StockroomError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.kind, "detail": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "ValidationError", "detail": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=Internal.status_code,
            content={"error": Internal.kind, "detail": "Internal server error"},
        )
