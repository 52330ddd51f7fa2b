from http import HTTPStatus
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import traceback
import uuid

from utils.logging import get_logger

logger = get_logger(__name__)


def error_body(status_code: int, message: str, **extra) -> dict:
    """Single error envelope used by every handler."""
    try:
        reason = HTTPStatus(status_code).phrase
    except ValueError:
        reason = "Error"
    body = {
        "error": reason,
        "message": message,
        "status_code": status_code,
    }
    body.update({k: v for k, v in extra.items() if v is not None})
    return body


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions"""
    level = logging.INFO if exc.status_code == status.HTTP_404_NOT_FOUND else logging.WARNING
    if exc.status_code >= 500:
        level = logging.ERROR
    logger.log(
        level,
        f"HTTP exception: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(
            exc.status_code,
            str(exc.detail),
            details=getattr(exc, "details", None),
        ),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors like any other: 400"""
    logger.warning(
        "Validation error",
        extra={
            "errors": jsonable_encoder(exc.errors()),
            "path": request.url.path,
            "method": request.method,
        }
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            status.HTTP_400_BAD_REQUEST,
            "Invalid request data",
            details=jsonable_encoder(exc.errors()),
        ),
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions"""
    error_id = uuid.uuid4().hex

    logger.error(
        f"Unhandled exception: {str(exc)}",
        extra={
            "error_id": error_id,
            "exception_type": type(exc).__name__,
            "traceback": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
            "path": request.url.path,
            "method": request.method,
        }
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "An unexpected error occurred",
            error_id=error_id,
        ),
    )
