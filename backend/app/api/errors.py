"""Exception handlers translating errors into the JSON error envelope.

Every handled error leaves the API as
``{"success": false, "status": <code>, "message": str, "errors"?: {...}}``.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.services.errors import (
    ConflictError,
    NotFoundError,
    ServiceError,
    UnauthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: list[tuple[type[ServiceError], int]] = [
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED),
    (ConflictError, status.HTTP_409_CONFLICT),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
]


def error_response(
    status_code: int,
    message: str,
    errors: dict[str, list[str]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the error envelope."""
    body: dict[str, Any] = {"success": False, "status": status_code, "message": message}
    if errors:
        body["errors"] = errors
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def status_for(exc: ServiceError) -> int:
    """HTTP status for a service error. Unmapped errors are server faults."""
    for error_cls, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"Unmapped service error on {request.url.path}: {exc.message}")
        return error_response(status_code, "Internal server error")

    headers = None
    if isinstance(exc, UnauthorizedError):
        headers = {"WWW-Authenticate": "Bearer"}
    return error_response(status_code, exc.message, exc.errors, headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        # Drop the "body"/"query" prefix so clients see plain field names
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "request"
        errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation failed", errors)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    # Unique violations that slipped past service-level checks (e.g. a register race)
    logger.warning(f"Integrity error on {request.url.path}: {exc.__class__.__name__}")
    return error_response(status.HTTP_409_CONFLICT, "Resource already exists")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope handlers on an application."""
    app.add_exception_handler(ServiceError, service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
