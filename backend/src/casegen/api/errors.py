"""API error types and the handlers that render them.

Every error body has the shape ``{"error": <message>, "code": <ErrorCode>}``.
"""

import logging
from enum import Enum

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Semantic error codes for client-side handling."""

    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ApiError(Exception):
    """Base class for errors that map directly to an HTTP response."""

    status_code: int = 500
    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnauthorizedError(ApiError):
    """Missing, unknown or expired session."""

    status_code = 401
    code = ErrorCode.UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ValidationFailure(ApiError):
    status_code = 400
    code = ErrorCode.BAD_REQUEST


class UpstreamFailure(ApiError):
    """GitHub or the LLM provider failed while serving a request."""

    status_code = 500
    code = ErrorCode.INTERNAL_ERROR


class BranchConflict(ApiError):
    status_code = 409
    code = ErrorCode.CONFLICT


def error_body(message: str, code: ErrorCode) -> dict[str, str]:
    return {"error": message, "code": code.value}


async def _handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.code))


def register_exception_handlers(app: FastAPI) -> None:
    """Render ``ApiError`` subclasses as JSON error bodies."""
    app.add_exception_handler(ApiError, _handle_api_error)
