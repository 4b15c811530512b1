"""Global exception handlers that map domain exceptions to HTTP responses."""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import Settings
from app.errors import (
    DELIVERY_FAILED,
    DUPLICATE_RESOURCE,
    HTTP_ERROR,
    INSUFFICIENT_PRIVILEGES,
    INTERNAL_ERROR,
    NOT_FOUND,
    VALIDATION_ERROR,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DeliveryError,
    NotFoundError,
    ValidationError,
)
from app.schemas.response import ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(
    status_code: int,
    message: str,
    code: str,
    errors: list[dict[str, Any]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Return a standardized error envelope with message and machine-readable code."""
    body = ErrorResponse(message=message, code=code, errors=errors)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body.model_dump(exclude_none=True)),
        headers=headers,
    )


def validation_error_handler(_request: Request, exc: ValidationError) -> JSONResponse:
    return _error_response(status.HTTP_400_BAD_REQUEST, str(exc), VALIDATION_ERROR)


def conflict_error_handler(_request: Request, exc: ConflictError) -> JSONResponse:
    return _error_response(status.HTTP_400_BAD_REQUEST, str(exc), DUPLICATE_RESOURCE)


def not_found_error_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
    return _error_response(status.HTTP_404_NOT_FOUND, str(exc), NOT_FOUND)


def authentication_error_handler(
    request: Request, exc: AuthenticationError
) -> JSONResponse:
    logger.info(
        "Authentication rejected (%s) for %s %s",
        exc.reason.value,
        request.method,
        request.url.path,
    )
    return _error_response(
        status.HTTP_401_UNAUTHORIZED,
        str(exc),
        exc.reason.value,
        headers={"WWW-Authenticate": "Bearer"},
    )


def authorization_error_handler(
    request: Request, exc: AuthorizationError
) -> JSONResponse:
    logger.info("Authorization rejected for %s %s", request.method, request.url.path)
    return _error_response(status.HTTP_403_FORBIDDEN, str(exc), INSUFFICIENT_PRIVILEGES)


def delivery_error_handler(_request: Request, exc: DeliveryError) -> JSONResponse:
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc), DELIVERY_FAILED
    )


def request_validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return _error_response(
        status.HTTP_400_BAD_REQUEST, "Validation failed", VALIDATION_ERROR, errors=errors
    )


def http_exception_handler(
    _request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = "Route not found"
    return _error_response(
        exc.status_code, message, HTTP_ERROR, headers=getattr(exc, "headers", None)
    )


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Register domain exception handlers on the FastAPI app."""

    def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled error on %s %s: %s", request.method, request.url.path, exc
        )
        message = "Something went wrong!" if settings.is_production else str(exc)
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, message, INTERNAL_ERROR
        )

    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ConflictError, conflict_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(AuthorizationError, authorization_error_handler)
    app.add_exception_handler(DeliveryError, delivery_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
