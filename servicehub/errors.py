"""Typed errors raised by the storage and route layers, plus the FastAPI
handlers that turn them into JSON responses.

Every error knows its HTTP status; ``to_response()`` never includes internal
details (those are only logged).
"""
from typing import List, Optional, Sequence, Tuple, Union
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from servicehub.logger import get_logger

logger = get_logger(__name__)

FieldPath = Sequence[Union[str, int]]


class ServiceHubError(Exception):
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"detail": self.message}


class ValidationError(ServiceHubError):
    """Malformed or inconsistent input, reported per field"""

    http_status = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: List[Tuple[FieldPath, str]], message: str = "Validation failed"):
        super().__init__(message)
        self.errors = [(list(path), msg) for path, msg in errors]

    def to_response(self) -> dict:
        return {
            "detail": self.message,
            "errors": [{"path": path, "message": msg} for path, msg in self.errors],
        }


class NotFoundError(ServiceHubError):
    http_status = status.HTTP_404_NOT_FOUND


class AuthenticationError(ServiceHubError):
    http_status = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class ConflictError(ServiceHubError):
    http_status = status.HTTP_409_CONFLICT


class StorageError(ServiceHubError):
    """Constraint violation or connectivity fault in the database"""

    def __init__(self, message: str = "Database operation failed", operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation

    def to_response(self) -> dict:
        return {"detail": "Internal server error"}


def validation_error_from_pydantic(exc: RequestValidationError) -> ValidationError:
    errors = []
    for err in exc.errors():
        loc = list(err.get("loc", ()))
        # Drop the request section ("body", "path", "query")
        if loc and loc[0] in ("body", "path", "query"):
            loc = loc[1:]
        errors.append((loc, err.get("msg", "Invalid value")))
    return ValidationError(errors)


def register_error_handlers(app: FastAPI) -> None:
    """Register the global error handlers on the FastAPI app."""

    @app.exception_handler(ServiceHubError)
    async def servicehub_error_handler(request: Request, exc: ServiceHubError):
        if exc.http_status >= 500:
            logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        else:
            logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        error = validation_error_from_pydantic(exc)
        logger.warning(f"Validation error on {request.url.path}: {error.errors}")
        return JSONResponse(status_code=error.http_status, content=error.to_response())
