"""Domain error taxonomy and its mapping onto HTTP responses."""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

GENERIC_SERVER_MESSAGE = "Internal server error"


class PortalError(Exception):
    """Base class for every error raised by the portal services."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "PORTAL_ERROR"

    def __init__(self, message: str | None = None, **details):
        self.message = message or self.__class__.__doc__ or self.error_code
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        response = {"error": True, "error_code": self.error_code, "message": self.message}
        if self.details:
            response["details"] = self.details
        return response


# ============ Authorization ============

class AuthError(PortalError):
    """Authentication failed."""
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "AUTH_ERROR"


class InvalidCredential(AuthError):
    """Invalid credentials."""
    error_code = "INVALID_CREDENTIAL"


class TokenExpired(AuthError):
    """Token has expired."""
    error_code = "TOKEN_EXPIRED"


class PrincipalNotFound(AuthError):
    """Account no longer exists."""
    error_code = "PRINCIPAL_NOT_FOUND"


class AccountInactive(AuthError):
    """Account is not active."""
    error_code = "ACCOUNT_INACTIVE"


class Forbidden(AuthError):
    """Insufficient permissions."""
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "FORBIDDEN"


# ============ Validation ============

class ValidationError(PortalError):
    """Invalid request."""
    error_code = "VALIDATION_ERROR"


class UnsupportedMediaType(ValidationError):
    """Unsupported file type."""
    error_code = "UNSUPPORTED_MEDIA_TYPE"


class PayloadTooLarge(ValidationError):
    """File is too large."""
    error_code = "PAYLOAD_TOO_LARGE"


class DuplicateAccount(ValidationError):
    """Username or email already in use."""
    error_code = "DUPLICATE_ACCOUNT"


# ============ Lookup / limits ============

class NotFoundError(PortalError):
    """Resource not found."""
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"


class LimitExceeded(PortalError):
    """Subscription limit reached."""
    error_code = "LIMIT_EXCEEDED"


class HasDependentDocuments(PortalError):
    """Account still owns documents."""
    error_code = "HAS_DEPENDENT_DOCUMENTS"


# ============ Storage ============

class StorageError(PortalError):
    """File storage failure."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "STORAGE_ERROR"


class StorageWriteError(StorageError):
    """Could not write file."""
    error_code = "STORAGE_WRITE_ERROR"


class StorageReadError(StorageError):
    """Could not read file."""
    error_code = "STORAGE_READ_ERROR"


# ============ Handlers ============

async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    if isinstance(exc, StorageError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": True, "error_code": exc.error_code, "message": GENERIC_SERVER_MESSAGE},
        )

    if isinstance(exc, AuthError):
        logger.warning(f"{request.method} {request.url.path} denied: {exc.error_code}")
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} database error", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": True, "error_code": "DATABASE_ERROR", "message": GENERIC_SERVER_MESSAGE},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": True,
            "error_code": ValidationError.error_code,
            "message": "Invalid request",
            "details": {"errors": jsonable_encoder(exc.errors())},
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the domain error handlers to the application."""
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
