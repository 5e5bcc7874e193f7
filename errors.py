"""
Error kinds raised by the route handlers and their JSON rendering.

Every failure leaves the API as ``{"message": ..., "error": ...}`` with
the status code of its kind.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None, error=None):
        self.message = message or self.default_message
        self.error = error
        super().__init__(self.message)


class Unauthorized(AppError):
    status_code = 401
    default_message = "Unauthorized access"


class Forbidden(AppError):
    status_code = 403
    default_message = "Forbidden access"


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class UpstreamFailure(AppError):
    status_code = 500
    default_message = "Upstream service failure"


def _body(message: str, error) -> dict:
    return {"message": message, "error": error}


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=_body(exc.message, exc.error))


async def database_error_handler(request: Request, exc: PyMongoError):
    logger.error("Database call failed on %s %s: %s", request.method, request.url.path, exc)
    failure = UpstreamFailure("Database operation failed", str(exc))
    return JSONResponse(status_code=failure.status_code, content=_body(failure.message, failure.error))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Pydantic error entries can carry non-JSON values under "ctx"
    errors = [{k: v for k, v in e.items() if k in ("loc", "msg", "type")} for e in exc.errors()]
    return JSONResponse(status_code=400, content=_body("Invalid request body", errors))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(PyMongoError, database_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
