# kosync/core/errors.py
"""
Domain error types and their HTTP rendering.

Services raise the typed errors below; the handlers registered in
install_exception_handlers() turn them into a problem payload with a stable
status code. Anything else is logged and answered with a generic 500.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from kosync.core.client_ip import log_request

logger = logging.getLogger("uvicorn.error")


class KosyncError(Exception):
    """Base class of all domain failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    title: str = "Bad Request"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthenticated(KosyncError):
    status_code = status.HTTP_401_UNAUTHORIZED
    title = "Unauthorized"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class Forbidden(KosyncError):
    status_code = status.HTTP_403_FORBIDDEN
    title = "Forbidden"


class UserNotFound(KosyncError):
    status_code = status.HTTP_404_NOT_FOUND
    title = "Not Found"

    def __init__(self, username: str):
        super().__init__(f"User '{username}' does not exist")
        self.username = username


class DocumentNotFound(KosyncError):
    status_code = status.HTTP_404_NOT_FOUND
    title = "Not Found"

    def __init__(self, username: str, document_hash: str):
        super().__init__(f"Document '{document_hash}' not found for user '{username}'")
        self.username = username
        self.document_hash = document_hash


class UserAlreadyExists(KosyncError):
    status_code = status.HTTP_409_CONFLICT
    title = "Conflict"

    def __init__(self, username: str):
        super().__init__(f"User '{username}' already exists")
        self.username = username


class RegistrationDisabled(KosyncError):
    status_code = status.HTTP_403_FORBIDDEN
    title = "Forbidden"

    def __init__(self):
        super().__init__("User registration is currently disabled")


class InvalidInput(KosyncError):
    status_code = status.HTTP_400_BAD_REQUEST
    title = "Bad Request"


def problem_response(exc: KosyncError, status_code: int | None = None) -> JSONResponse:
    """
    Render a domain error as a problem payload.

    Args:
        exc: The domain error
        status_code: Override of the error's own status (used by the
            KOReader-facing /users/create, which answers 402)

    Returns:
        JSONResponse with type/title/status/detail; "message" repeats the
        detail because KOReader displays that field.
    """
    code = status_code or exc.status_code
    return JSONResponse(
        status_code=code,
        content={
            "type": type(exc).__name__,
            "title": exc.title,
            "status": code,
            "detail": exc.message,
            "message": exc.message,
        },
        headers={"WWW-Authenticate": "x-auth-user"} if code == 401 else None,
    )


async def _handle_domain_error(request: Request, exc: KosyncError) -> JSONResponse:
    log_request(request, logging.WARNING, "%s %s -> %s: %s",
                request.method, request.url.path, type(exc).__name__, exc.message)
    return problem_response(exc)


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "type": "InternalServerError",
            "title": "Internal Server Error",
            "status": status.HTTP_500_INTERNAL_SERVER_ERROR,
            "detail": "An unexpected error occurred while processing your request.",
            "message": "An unexpected error occurred while processing your request.",
        },
    )


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(KosyncError, _handle_domain_error)
    app.add_exception_handler(Exception, _handle_unexpected_error)
