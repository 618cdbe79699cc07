import logging

from fastapi import Request
from fastapi.responses import JSONResponse, Response

from passentry.errors import AccessDeniedError, AuthenticationError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# (error class, status code, machine-readable type), first match wins
ERROR_RESPONSES: list[tuple[type[Exception], int, str]] = [
    (AuthenticationError, 401, "authentication_error"),
    (AccessDeniedError, 403, "access_denied"),
    (NotFoundError, 404, "not_found"),
    (ValidationError, 400, "validation_error"),
]


def create_json_error_response(
    status_code: int, message: str, error_type: str | None = None, headers: dict[str, str] | None = None
) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content = {"message": message}
    if error_type:
        content["type"] = error_type
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    status_code, error_type = next(
        ((status, kind) for error_class, status, kind in ERROR_RESPONSES if isinstance(exc, error_class)),
        (400, "bad_request"),
    )
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return create_json_error_response(status_code=status_code, message=str(exc), error_type=error_type, headers=headers)


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("Unexpected error: %s", exc)
    return create_json_error_response(
        status_code=500, message="An unexpected error occurred.", error_type="internal_server_error"
    )
