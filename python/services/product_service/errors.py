"""Error kinds raised by the product service and their HTTP translation.

Handlers and dependencies raise ``ProductServiceError`` subclasses; the
exception handlers registered by ``install_error_handlers`` turn every
failure into ``{"error": <kind>, "message": <text>}`` with a matching status.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from common.models import ErrorResponse

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Something went wrong!"


class ProductServiceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__


class NotFoundError(ProductServiceError):
    status_code = 404


class ValidationError(ProductServiceError):
    """Malformed payload, or a missing/wrong API key."""

    status_code = 400


def error_response(status_code: int, kind: str, message: str) -> JSONResponse:
    body = ErrorResponse(error=kind, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def service_error_handler(request: Request, exc: ProductServiceError) -> JSONResponse:
    return error_response(exc.status_code, exc.kind, exc.message)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    kind = "NotFoundError" if exc.status_code == 404 else "HTTPError"
    response = error_response(exc.status_code, kind, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(400, ValidationError.__name__, "Invalid request parameters")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, "InternalServerError", str(exc) or DEFAULT_ERROR_MESSAGE)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ProductServiceError, service_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
