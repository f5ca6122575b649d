"""
Domain errors and their HTTP translation.

Services raise these; the handlers registered in ``register_exception_handlers``
turn them into ``{"detail": ...}`` responses. Internal details of unexpected
errors are logged, never returned.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class PharmacyError(Exception):
    """Base class for errors raised by the service layer."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFound(PharmacyError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str, identifier=None):
        self.resource = resource
        self.identifier = identifier
        if identifier is None:
            super().__init__(f"{resource} not found")
        else:
            super().__init__(f"{resource} {identifier} not found")


class ValidationError(PharmacyError):
    """Malformed or out-of-enum input."""

    status_code = status.HTTP_400_BAD_REQUEST


class DuplicateKey(PharmacyError):
    status_code = status.HTTP_400_BAD_REQUEST


class ConsistencyError(PharmacyError):
    """The operation would break a stock or lifecycle invariant."""

    status_code = status.HTTP_409_CONFLICT


class InvalidTransition(ConsistencyError):
    def __init__(self, entity: str, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot transition {entity} from {current} to {requested}")


class AuthenticationError(PharmacyError):
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDenied(PharmacyError):
    status_code = status.HTTP_403_FORBIDDEN


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PharmacyError)
    async def pharmacy_error_handler(request: Request, exc: PharmacyError):
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.detail}")
        else:
            logger.info(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.detail}")
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(err.get("loc", [])), "msg": err.get("msg"), "type": err.get("type")}
            for err in exc.errors()
        ]
        logger.info(f"Bad request on {request.method} {request.url.path}: {errors}")
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": errors})

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}: {type(exc).__name__}: {exc}",
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )
