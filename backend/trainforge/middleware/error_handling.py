"""
Error Handling Middleware

Provides consistent, informative error responses across the API.

Features:
- Standardized error response format
- Correlation IDs for log tracking
- Retryable flag so clients know whether repeating a request can help
- Sanitized responses (hides internal details in production)
- Custom exception classes for each failure kind of the module pipeline

Usage:
    from trainforge.middleware.error_handling import setup_error_handling, LLMError

    # Add middleware to app
    setup_error_handling(app, debug=settings.DEBUG)

    # Raise custom exceptions anywhere below a route
    raise LLMError("Analysis call failed")

Exception handling hierarchy:
    - HTTPException: Re-raised for FastAPI's built-in handler
    - ServiceError: Custom exceptions → structured JSON response
    - Exception: Catch-all for unexpected errors → sanitized response

Failure kinds:
    UnsupportedFileTypeError  415  upload MIME type not on the allow-list
    FileTooLargeError         413  upload exceeds MAX_UPLOAD_SIZE_MB
    LLMTransientError         503  timeout/rate limit/5xx after retries (retryable)
    LLMError                  502  non-retryable model provider failure
    PersistenceError          503  storage failure, transaction rolled back (retryable)
    ValidationError           422  input rejected before any side effect
    NotFoundError             404  referenced module/document does not exist
"""

import logging
import traceback
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


# =============================================================================
# Custom Exceptions
# =============================================================================


class ServiceError(Exception):
    """
    Base exception for service errors.

    Provides consistent error handling with:
    - HTTP status code
    - Error code for categorization
    - Retryable flag
    - Optional details for debugging

    Example:
        raise ServiceError("Database connection failed", status_code=503)
    """

    status_code: int = 500
    error_code: str = "service_error"
    retryable: bool = False

    def __init__(
        self,
        message: str,
        status_code: int = None,
        error_code: str = None,
        details: dict = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code:
            self.status_code = status_code
        if error_code:
            self.error_code = error_code
        self.details = details


class LLMError(ServiceError):
    """
    LLM provider error.

    Raised when an LLM call fails in a way that retrying will not fix
    (authentication, bad request, unknown model).
    """

    status_code = 502
    error_code = "llm_error"


class LLMTransientError(LLMError):
    """
    Transient LLM provider error.

    Raised for timeouts, connection failures, rate limits and 5xx responses.
    LLMClient retries these with backoff; one that escapes the client has
    exhausted its attempts.
    """

    status_code = 503
    error_code = "llm_unavailable"
    retryable = True


class PersistenceError(ServiceError):
    """
    Storage error.

    Raised when a database write fails. The transaction has been rolled
    back, so nothing was partially written.
    """

    status_code = 503
    error_code = "persistence_error"
    retryable = True


class ValidationError(ServiceError):
    """
    Data validation error.

    Raised when input data fails validation.
    """

    status_code = 422
    error_code = "validation_error"


class NotFoundError(ServiceError):
    """
    Resource not found error.

    Raised when a requested resource doesn't exist.
    """

    status_code = 404
    error_code = "not_found"


class UnsupportedFileTypeError(ServiceError):
    """Raised when an upload's MIME type is not on the allow-list."""

    status_code = 415
    error_code = "unsupported_file_type"


class FileTooLargeError(ServiceError):
    """Raised when an upload exceeds the configured size limit."""

    status_code = 413
    error_code = "file_too_large"


# =============================================================================
# Error Handling Middleware
# =============================================================================


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    - Catches unhandled exceptions
    - Logs with correlation ID
    - Returns consistent error format
    - Hides internal details in production
    """

    def __init__(self, app, debug: bool = False):
        """
        Initialize middleware.

        Args:
            app: FastAPI/Starlette application
            debug: Whether to include details and stack traces in responses
        """
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next):
        """Process request and handle any errors."""
        error_id = str(uuid4())[:8]

        try:
            response = await call_next(request)
            return response

        except HTTPException:
            # Let FastAPI handle HTTP exceptions
            raise

        except ServiceError as e:
            log = logger.warning if e.status_code < 500 else logger.error
            log(
                f"[{error_id}] {e.error_code}: {e.message}",
                extra={
                    "error_id": error_id,
                    "error_code": e.error_code,
                    "path": request.url.path,
                    "method": request.method,
                    "details": e.details,
                },
            )

            return JSONResponse(
                status_code=e.status_code,
                content={
                    "error": e.error_code,
                    "message": e.message,
                    "error_id": error_id,
                    "retryable": e.retryable,
                    "details": e.details if self.debug else None,
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                },
            )

        except Exception as e:
            # Log full traceback for unexpected errors
            logger.error(
                f"[{error_id}] Unhandled error: {type(e).__name__}: {e}",
                extra={
                    "error_id": error_id,
                    "path": request.url.path,
                    "method": request.method,
                    "traceback": traceback.format_exc(),
                },
            )

            # Return sanitized response
            content = {
                "error": "internal_server_error",
                "message": "An unexpected error occurred",
                "error_id": error_id,
                "retryable": False,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }

            if self.debug:
                content["details"] = {
                    "exception": type(e).__name__,
                    "message": str(e),
                    "traceback": traceback.format_exc(),
                }

            return JSONResponse(status_code=500, content=content)


# =============================================================================
# Setup Function
# =============================================================================


def setup_error_handling(app: FastAPI, debug: bool = False) -> None:
    """
    Configure error handling on the FastAPI app.

    Args:
        app: FastAPI application instance
        debug: Whether to include details and stack traces in responses
    """
    app.add_middleware(ErrorHandlingMiddleware, debug=debug)
    logger.info(f"Error handling middleware enabled (debug={debug})")
