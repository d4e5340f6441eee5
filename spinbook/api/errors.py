from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from spinbook.api.schemas import ErrorSchema
from spinbook.application.exceptions import (
    ConfigurationError,
    ConflictError,
    InternalError,
    SpinBookError,
    UpstreamPermissionError,
    ValidationError,
)
from spinbook.core.config import settings


logger = logging.getLogger(__name__)


def error_response(exc: SpinBookError) -> JSONResponse:
    body = ErrorSchema(message=exc.message, code=exc.code)
    if isinstance(exc, ValidationError):
        body.field = exc.field
    if isinstance(exc, ConflictError):
        body.conflicts = exc.slots
    if settings.is_dev:
        body.debug = {
            "originalError": exc.detail or exc.message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


async def handle_spinbook_error(request: Request, exc: SpinBookError) -> JSONResponse:
    if isinstance(exc, (ConfigurationError, UpstreamPermissionError, InternalError)):
        logger.error(
            "Request failed: %s %s",
            request.method,
            request.url.path,
            extra={"code": exc.code, "reason": exc.detail},
        )
    elif not isinstance(exc, (ValidationError, ConflictError)):
        logger.warning(
            "Upstream error: %s %s",
            request.method,
            request.url.path,
            extra={"code": exc.code, "reason": exc.detail},
        )
    return error_response(exc)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = "body"
    if first.get("type") != "json_invalid":
        field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "body"
    return error_response(ValidationError(field, "Request body must be valid JSON."))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error: %s %s", request.method, request.url.path)
    return error_response(InternalError(detail=str(exc)))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SpinBookError, handle_spinbook_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
