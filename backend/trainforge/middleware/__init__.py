"""
Middleware Package

Contains FastAPI middleware and the service exception hierarchy.
"""

from trainforge.middleware.error_handling import (
    ErrorHandlingMiddleware,
    FileTooLargeError,
    LLMError,
    LLMTransientError,
    NotFoundError,
    PersistenceError,
    ServiceError,
    UnsupportedFileTypeError,
    ValidationError,
    setup_error_handling,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "FileTooLargeError",
    "LLMError",
    "LLMTransientError",
    "NotFoundError",
    "PersistenceError",
    "ServiceError",
    "UnsupportedFileTypeError",
    "ValidationError",
    "setup_error_handling",
]
