"""
Todo API - Errors

Domain exceptions and the handlers that render them as JSON error bodies.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class TodoAPIError(Exception):
    """Base exception for the Todo API"""

    status_code: int = status.HTTP_400_BAD_REQUEST
    message: str = "Bad request"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


class InvalidInput(TodoAPIError):
    """A required field is missing or empty"""

    message = "Invalid input"


class DuplicateUsername(TodoAPIError):
    """Username is already registered"""

    message = "Username already taken"


class InvalidCredentials(TodoAPIError):
    """Unknown username or wrong password; the two are never distinguished"""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"


class MissingToken(TodoAPIError):
    """No bearer token on a protected request"""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Missing token"


class InvalidToken(TodoAPIError):
    """Bearer token is malformed, badly signed or expired"""

    status_code = status.HTTP_403_FORBIDDEN
    message = "Invalid token"


class NotFound(TodoAPIError):
    """Todo does not exist or belongs to another user"""

    status_code = status.HTTP_404_NOT_FOUND
    message = "Todo not found"


class PersistenceError(TodoAPIError):
    """The database rejected a write; details are not exposed to the client"""

    message = "Database error"


async def todo_api_error_handler(request: Request, exc: TodoAPIError) -> JSONResponse:
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug(f"Rejected request body on {request.url.path}: {exc.errors()}")
    return JSONResponse({"error": "Invalid request body"}, status_code=status.HTTP_400_BAD_REQUEST)


async def database_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse({"error": "Internal server error"}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


async def server_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse({"error": "Internal server error"}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error the API raises as {"error": ...}."""
    app.add_exception_handler(TodoAPIError, todo_api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(PyMongoError, database_error_handler)
    app.add_exception_handler(Exception, server_error_handler)
