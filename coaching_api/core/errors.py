import traceback
from typing import Any, Dict, Optional, Union
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError
from starlette.exceptions import HTTPException

from coaching_api.core.config import settings
from coaching_api.core.logging import logger


class BaseAPIError(Exception):
    """Base exception class for API errors"""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"
    default_message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message or self.default_message
        if error_code:
            self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationError(BaseAPIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "AUTH_ERROR"
    default_message = "Authentication failed"


class InvalidCredentialsException(AuthenticationError):
    error_code = "INVALID_CREDENTIALS"
    default_message = "Invalid email or password"


class TokenError(AuthenticationError):
    error_code = "TOKEN_ERROR"
    default_message = "Invalid or expired token"


class TokenExpiredError(TokenError):
    error_code = "TOKEN_EXPIRED"
    default_message = "Token has expired"


class MalformedTokenError(TokenError):
    error_code = "TOKEN_MALFORMED"
    default_message = "Malformed token"


class PermissionDenied(BaseAPIError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "PERMISSION_DENIED"
    default_message = "Permission denied"


class ValidationError(BaseAPIError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"
    default_message = "Validation error"


class NotFoundError(BaseAPIError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"
    default_message = "Resource not found"


class ConflictError(BaseAPIError):
    """A uniqueness rule or a concurrent write was violated"""
    status_code = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"
    default_message = "Resource already exists"


class DatabaseError(BaseAPIError):
    error_code = "DB_ERROR"
    default_message = "Database error occurred"


# Checked in order; StaleDataError and IntegrityError both subclass SQLAlchemyError
_DATABASE_ERRORS = (
    (StaleDataError, status.HTTP_409_CONFLICT, "CONFLICT",
     "The batch was modified by another request; reload and retry"),
    (IntegrityError, status.HTTP_409_CONFLICT, "CONFLICT", "Conflicting record already exists"),
    (SQLAlchemyError, DatabaseError.status_code, DatabaseError.error_code, DatabaseError.default_message),
)


def get_error_message(error: Union[Exception, str], include_details: bool = True) -> Dict[str, Any]:
    """
    Build the error envelope for anything raised while serving a request.

    API errors and HTTP errors keep their own status; database errors are
    mapped through `_DATABASE_ERRORS`; anything else becomes a 500 and,
    outside production, carries the traceback.
    """
    if isinstance(error, str):
        return {"success": False, "error_code": "GENERAL_ERROR", "message": error, "status_code": 500}

    if isinstance(error, BaseAPIError):
        body = {
            "success": False,
            "error_code": error.error_code,
            "message": error.message,
            "status_code": error.status_code
        }
        if include_details and error.details:
            body["details"] = error.details
        return body

    if isinstance(error, HTTPException):
        return {
            "success": False,
            "error_code": "HTTP_ERROR",
            "message": str(error.detail),
            "status_code": error.status_code
        }

    for error_type, status_code, error_code, message in _DATABASE_ERRORS:
        if isinstance(error, error_type):
            body = {"success": False, "error_code": error_code, "message": message, "status_code": status_code}
            # Conflicts stay generic; other driver failures keep their message
            if include_details and status_code >= 500:
                body["details"] = {"error": str(error), "error_type": error.__class__.__name__}
            return body

    body = {
        "success": False,
        "error_code": "INTERNAL_ERROR",
        "message": BaseAPIError.default_message,
        "status_code": 500
    }
    if include_details:
        body["details"] = {"error": str(error), "error_type": error.__class__.__name__}
        if not settings.PRODUCTION:
            body["traceback"] = traceback.format_exception(type(error), error, error.__traceback__)
    return body


def _envelope_response(error: Exception) -> JSONResponse:
    body = get_error_message(error)
    return JSONResponse(status_code=body["status_code"], content=jsonable_encoder(body))


def register_exception_handlers(app: FastAPI) -> None:
    """Map every failure onto the error envelope"""

    @app.exception_handler(BaseAPIError)
    async def api_error_handler(request: Request, exc: BaseAPIError):
        if exc.status_code >= 500:
            logger.error(f"{exc.error_code} on {request.url.path}: {exc.message}")
        return _envelope_response(exc)

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException):
        response = _envelope_response(exc)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        fields = {}
        for err in exc.errors():
            location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
            fields[location or "body"] = err.get("msg")
        return _envelope_response(
            ValidationError("Invalid request data", details={"fields": fields})
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        if isinstance(exc, (StaleDataError, IntegrityError)):
            logger.warning(f"Write conflict on {request.url.path}: {exc.__class__.__name__}")
        else:
            logger.error(f"Database error on {request.url.path}", exc_info=exc)
        return _envelope_response(exc)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.url.path}", exc_info=exc)
        return _envelope_response(exc)
