"""
Error response handling.

This module registers the exception handlers that give every error response
the same envelope: ``{"success": false, "message": "..."}``.

Author: Matthew Picone (mail@matthewpicone.com)
Date: 2026-01-05
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def error_response(message: str, status_code: int = 400, headers=None) -> JSONResponse:
    """Build an error response in the shared envelope.

    Args:
        message: Human-readable error message.
        status_code: HTTP status code.
        headers: Optional extra response headers.

    Returns:
        JSONResponse with success set to false.
    """
    return JSONResponse(
        {"success": False, "message": message},
        status_code=status_code,
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(str(exc.detail), exc.status_code, getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query"))
        message = f"Invalid {field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return error_response(message, 400)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response("Server error", 500)


def register_error_handlers(app: FastAPI):
    """Install the error envelope handlers on an application."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
