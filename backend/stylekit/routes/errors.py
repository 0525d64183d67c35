"""
Mapping of domain errors onto HTTP responses.

ValidationError (including ImportBatchError) -> 400
NotFoundError -> 404
ImmutableResourceError -> 409
PersistenceError (storage unavailable) -> 503
"""

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from ..persistence.errors import PersistenceError
from ..presets.errors import (
    ImmutableResourceError,
    NotFoundError,
    PresetError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STORAGE_RETRY_AFTER_SECONDS = 1


def to_http_exception(error: PresetError) -> HTTPException:
    if isinstance(error, ValidationError):
        return HTTPException(
            status_code=400,
            detail={"message": str(error), "errors": error.errors, "warnings": error.warnings},
        )
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, ImmutableResourceError):
        return HTTPException(status_code=409, detail=str(error))
    logger.error(f"Unmapped preset error: {error}")
    return HTTPException(status_code=500, detail=str(error))


def register_exception_handlers(app: FastAPI) -> None:
    """Answer storage failures from any route with a retryable 503."""

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
        logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=503,
            content={"detail": f"Storage unavailable: {exc}", "retryable": True},
            headers={"Retry-After": str(STORAGE_RETRY_AFTER_SECONDS)},
        )
