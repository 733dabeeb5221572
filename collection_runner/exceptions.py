"""
Exception classes and error handling for the Collection Runner.

Core errors (RunnerError and subclasses) describe failures inside a batch run.
The handlers below turn them into consistent error responses across the
HTTP endpoints.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""
    detail: str
    error_code: str | None = None


# Core errors

class RunnerError(Exception):
    """Base class for errors raised while preparing or running a batch."""


class ConfigurationError(RunnerError):
    """Raised when runner settings cannot be loaded."""


class CollectionFormatError(RunnerError):
    """Raised when a collection file is structurally invalid."""


class AuthResolutionError(RunnerError):
    """Raised when an auth descriptor lacks a field required to apply it."""


class TransportError(RunnerError):
    """
    Raised by a transport when a request does not produce a usable response.

    Attributes:
        message: Human-readable description of the failure
        status_code: HTTP status code, when the server answered at all
        body: Response body, when the server answered at all
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None
    ):
        self.message = message
        self.status_code = status_code
        self.body = body
        super().__init__(message)


async def collection_format_exception_handler(
    request: Request, exc: CollectionFormatError
) -> JSONResponse:
    """Handler for collections that cannot be parsed."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": str(exc), "error_code": "INVALID_COLLECTION"}
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handler for Pydantic validation errors."""
    errors = exc.errors()
    # Format validation errors into a readable message
    error_messages = []
    for error in errors:
        loc = " -> ".join(str(l) for l in error["loc"])
        msg = error["msg"]
        error_messages.append(f"{loc}: {msg}")

    detail = "; ".join(error_messages) if error_messages else "Validation error"

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": detail, "error_code": "VALIDATION_ERROR"}
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application."""
    app.add_exception_handler(CollectionFormatError, collection_format_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
