"""Typed service errors and their HTTP mappings."""
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, OperationalError

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base class for errors raised by the service layer."""

    def __init__(self, message: str, detail: Optional[str] = None):
        self.message = message
        self.detail = detail or message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return status.HTTP_500_INTERNAL_SERVER_ERROR


class NotFoundError(AppException):
    """Unknown event, registration or user (404)."""

    @property
    def status_code(self) -> int:
        return status.HTTP_404_NOT_FOUND


class PermissionDeniedError(AppException):
    """Actor lacks rights for the operation (403)."""

    @property
    def status_code(self) -> int:
        return status.HTTP_403_FORBIDDEN


class ConflictError(AppException):
    """Duplicate registration or unique identity (409)."""

    @property
    def status_code(self) -> int:
        return status.HTTP_409_CONFLICT


class ValidationFailedError(AppException):
    """Input rejected by a business rule (400)."""

    @property
    def status_code(self) -> int:
        return status.HTTP_400_BAD_REQUEST


class UnavailableError(AppException):
    """The data store could not be reached (503)."""

    @property
    def status_code(self) -> int:
        return status.HTTP_503_SERVICE_UNAVAILABLE


class AuthenticationRequiredError(AppException):
    """No resolvable actor on the request (401)."""

    @property
    def status_code(self) -> int:
        return status.HTTP_401_UNAUTHORIZED


def _error_response(exc: AppException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.__class__.__name__,
            "message": exc.message,
            "detail": exc.detail,
        },
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return _error_response(exc)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Unique/foreign key violations that escaped a service."""
    detail = str(exc.orig) if exc.orig is not None else str(exc)
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, detail)
    return _error_response(ConflictError("Resource conflict", detail=detail))


async def operational_error_handler(request: Request, exc: OperationalError) -> JSONResponse:
    logger.error("Database operation failed on %s %s: %s", request.method, request.url.path, exc)
    return _error_response(UnavailableError("Data store unavailable"))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(OperationalError, operational_error_handler)
