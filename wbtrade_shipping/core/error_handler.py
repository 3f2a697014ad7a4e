"""
Error handling and sanitization

- Shipping errors -> 400 (404 for unknown packages), safe to expose
- Catalog errors -> 503, message sanitized outside DEBUG
- Unhandled exceptions -> 500, logged with traceback, generic body
"""
import logging
import traceback
from typing import Union

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from wbtrade_shipping.core.config import settings
from wbtrade_shipping.core.exceptions import (
    CatalogError,
    ShippingError,
    UnknownPackageError,
    WBTradeBaseError,
)

logger = logging.getLogger(__name__)

# Patterns that indicate internal/sensitive error information
SENSITIVE_PATTERNS = [
    "password",
    "secret",
    "token",
    "credential",
    "sqlalchemy",
    "asyncpg",
    "psycopg",
    "postgresql",
    "sqlite",
    "traceback",
    "file \"",
    "/wbtrade_shipping/",
]

GENERIC_MESSAGE = "An internal error occurred. Please try again later."


def is_sensitive_error(message: str) -> bool:
    """Check if error message contains sensitive information."""
    message_lower = message.lower()
    return any(pattern in message_lower for pattern in SENSITIVE_PATTERNS)


def sanitize_error_message(error: Union[str, Exception]) -> str:
    """
    Sanitize an error message for safe client exposure.

    Returns the full message in DEBUG mode.
    """
    message = error if isinstance(error, str) else str(error)

    if settings.DEBUG:
        return message

    if is_sensitive_error(message):
        return GENERIC_MESSAGE

    # Truncate very long messages
    if len(message) > 200:
        return message[:200] + "..."

    return message


def error_body(exc: WBTradeBaseError, message: str) -> dict:
    body = {
        "error": exc.__class__.__name__,
        "code": exc.code,
        "message": message,
    }
    if settings.DEBUG:
        body["details"] = exc.details
    return body


async def shipping_error_handler(request: Request, exc: ShippingError) -> JSONResponse:
    status_code = 404 if isinstance(exc, UnknownPackageError) else 400
    logger.info(f"Shipping request rejected [{exc.code}] {request.url.path}: {exc.message}")
    content = error_body(exc, sanitize_error_message(exc.message))
    # Carrier/package context is customer-safe
    content["details"] = {k: v for k, v in exc.details.items() if v is not None}
    return JSONResponse(status_code=status_code, content=content)


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    logger.error(f"Catalog failure [{exc.code}] {request.url.path}: {exc.to_dict()}")
    message = exc.message if settings.DEBUG else "Shipping is temporarily unavailable. Please try again later."
    return JSONResponse(status_code=503, content=error_body(exc, message))


class ErrorSanitizationMiddleware(BaseHTTPMiddleware):
    """
    Catch unhandled exceptions and sanitize error responses.

    - In production: Returns generic error, logs full details
    - In development: Returns full error for debugging
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except HTTPException:
            raise
        except Exception as e:
            error_id = f"{request.client.host if request.client else 'unknown'}-{id(e)}"
            logger.error(
                f"Unhandled exception [{error_id}]: {type(e).__name__}: {str(e)}\n"
                f"Path: {request.url.path}\n"
                f"Method: {request.method}\n"
                f"Traceback:\n{traceback.format_exc()}"
            )

            content = {
                "error": "internal_error",
                "message": str(e) if settings.DEBUG else "An unexpected error occurred. Please try again later.",
                "error_id": error_id,
            }
            if settings.DEBUG:
                content["type"] = type(e).__name__
            return JSONResponse(status_code=500, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ShippingError, shipping_error_handler)
    app.add_exception_handler(CatalogError, catalog_error_handler)
