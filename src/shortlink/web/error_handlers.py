import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from shortlink.errors import (
    AccessDeniedError,
    AuthenticationError,
    ConflictError,
    NotFoundError,
    UserError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

# First match wins, so subclasses come before their bases
USER_ERROR_STATUS: list[tuple[type[UserError], int, str]] = [
    (AuthenticationError, 401, "authentication_error"),
    (AccessDeniedError, 403, "access_denied"),
    (NotFoundError, 404, "not_found"),
    (ConflictError, 409, "conflict"),
    (ValidationError, 400, "validation_error"),
]


def error_response(status_code: int, message: str, error_type: str) -> JSONResponse:
    """Error body shared by every endpoint: ``{"message": ..., "type": ...}``."""
    return JSONResponse(status_code=status_code, content={"message": message, "type": error_type})


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Map a UserError to its status code; the message is safe to show."""
    for error_class, status_code, error_type in USER_ERROR_STATUS:
        if isinstance(exc, error_class):
            return error_response(status_code, str(exc), error_type)
    return error_response(400, str(exc), "bad_request")


async def request_validation_handler(_: Request, exc: Exception) -> Response:
    """Malformed request bodies get the same shape as other validation errors."""
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    fields = ", ".join(".".join(str(part) for part in error["loc"][1:]) for error in errors)
    return error_response(400, f"Invalid request: {fields}" if fields else "Invalid request", "validation_error")


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Anything unexpected, including store failures and id space exhaustion, is a 500."""
    logger.exception("unhandled_error", error_class=type(exc).__name__)
    return error_response(500, "An unexpected error occurred.", "internal_server_error")
