from fastapi import Request, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
import logging

from proconnect.core.error_codes import (
    NOT_FOUND_ERROR,
    NOT_AUTHORIZED,
    INVALID_OPERATION,
    CONFLICT_ERROR,
)

logger = logging.getLogger("uvicorn.error")


class CustomHTTPException(Exception):
    """A custom HTTPException that we can use for additional context."""
    def __init__(self, status_code: int, detail: str, error_code: str = None, headers: dict = None):
        self.status_code = status_code
        self.detail = detail
        self.error_code = error_code
        self.headers = headers
        super().__init__(detail)  # Initialize the base Exception with the detail message


class NotFoundError(CustomHTTPException):
    """Referenced entity does not exist."""
    def __init__(self, detail: str = "Resource not found", error_code: str = NOT_FOUND_ERROR):
        super().__init__(status.HTTP_404_NOT_FOUND, detail, error_code)


class UnauthorizedError(CustomHTTPException):
    """Caller is authenticated but has no rights over the entity."""
    def __init__(self, detail: str = "Not authorized", error_code: str = NOT_AUTHORIZED):
        super().__init__(status.HTTP_403_FORBIDDEN, detail, error_code)


class InvalidOperationError(CustomHTTPException):
    """Self-reference, wrong state for the requested transition, duplicates."""
    def __init__(self, detail: str = "Invalid operation", error_code: str = INVALID_OPERATION):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail, error_code)


class ConflictError(CustomHTTPException):
    """A record already exists for a key that must be unique."""
    def __init__(self, detail: str = "Conflict", error_code: str = CONFLICT_ERROR):
        super().__init__(status.HTTP_409_CONFLICT, detail, error_code)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle validation errors and return a structured JSON response."""
    logger.error(f"Validation error on {request.url}: {exc.errors()}")

    errors = exc.errors()
    # Sanitize un-serializable objects in ctx
    for error in errors:
        ctx = error.get("ctx")
        if ctx and isinstance(ctx.get("error"), Exception):
            ctx["error"] = str(ctx["error"])

    return JSONResponse(
        status_code=422,
        content={
            "detail": errors,
            "message": "Validation failed. Please check your request data.",
        },
    )


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Custom HTTP exception handler for better error responses."""
    if isinstance(exc, CustomHTTPException):
        logger.error(f"Custom HTTP error on {request.url}: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "error_code": exc.error_code
            },
            headers=exc.headers or {},
        )
    elif isinstance(exc, HTTPException):
        logger.error(f"HTTP error on {request.url}: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=exc.headers or {},
        )

    logger.error(f"Unexpected error on {request.url}: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"detail": "An unexpected error occurred"},
    )
