"""Global error handlers for the application.

Every failure leaves the API as `{success: false, message, ...}`.
"""
import logging

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

from app.core.config import settings
from app.schemas.common import ErrorResponse, FieldError
from app.utils.errors import ValidationFailed

logger = logging.getLogger(__name__)


async def http_exception_handler(request: Request, exc):
    body = ErrorResponse(message=str(exc.detail), data=getattr(exc, "data", None))
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(body, exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        FieldError(
            # drop the leading "body"/"query" segment
            field=".".join(str(part) for part in err.get("loc", ())[1:]) or "body",
            message=err.get("msg", "Invalid value"),
        )
        for err in exc.errors()
    ]
    body = ErrorResponse(message=ValidationFailed.default_detail, errors=errors)
    return JSONResponse(
        status_code=ValidationFailed.status_code,
        content=jsonable_encoder(body, exclude_none=True),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    body = ErrorResponse(message="Internal server error")
    if settings.diagnostics_enabled:
        body.error = f"{type(exc).__name__}: {exc}"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=jsonable_encoder(body, exclude_none=True),
    )
