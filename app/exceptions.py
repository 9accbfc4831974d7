import logging

from fastapi import Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class InboxError(Exception):
    """Base error for inbox operations, carrying the HTTP status it maps to."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadInput(InboxError):
    status_code = 400
    default_message = "Bad Request"


class NotFound(InboxError):
    status_code = 404
    default_message = "Not Found"


class StorageFailure(InboxError):
    # The client only ever sees the generic message; the engine error is chained.
    status_code = 500
    default_message = "Internal Server Error"

    def public_message(self) -> str:
        return self.default_message


def create_error_response(error_message: str, status_code: int = 400) -> PlainTextResponse:
    """Create a plain-text error response"""
    return PlainTextResponse(error_message, status_code=status_code)


async def inbox_exception_handler(request: Request, exc: InboxError) -> PlainTextResponse:
    """Translate inbox errors into plain-text responses"""
    if isinstance(exc, StorageFailure):
        logger.error(f"Storage failure on {request.method} {request.url.path}: {exc.message}")
        return create_error_response(exc.public_message(), exc.status_code)
    return create_error_response(exc.message, exc.status_code)


def format_validation_errors(errors) -> str:
    """Flatten pydantic error dicts into one line of `loc: msg` pairs"""
    return "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', 'invalid')}"
        for error in errors
    ) or BadInput.default_message


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    """Routing errors as plain text; an unsupported method is reported as a missing resource"""
    if exc.status_code in (404, 405):
        return create_error_response(NotFound.default_message, NotFound.status_code)
    return create_error_response(str(exc.detail), exc.status_code)
