"""
Exception types and error classification for fetchbridge.

Provides:
- ErrorCategory enum for failure classification
- Typed exception hierarchy for fetch errors
- Error classification utilities
"""

import asyncio
import builtins
import socket
from enum import Enum
from typing import Optional

import aiohttp


class ErrorCategory(Enum):
    """
    Classification of error types.

    Categories:
        TRANSIENT: Temporary failures that may succeed on a later call
                   (e.g., network timeouts, 429/503 errors)
        PERMANENT: Failures that won't succeed on retry
                   (e.g., 404, too many redirects, disk errors)
        UNKNOWN: Unclassified errors
    """

    TRANSIENT = "transient"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"


class FetchError(Exception):
    """
    Base exception for all fetch errors.

    Attributes:
        message: Human-readable error description
        category: Error classification
        cause: Original exception if wrapping
        context: Additional context dict for debugging
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        context: Optional[dict] = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        """Whether a later attempt could succeed."""
        return self.category in (ErrorCategory.TRANSIENT, ErrorCategory.UNKNOWN)

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


# =============================================================================
# Network/Connection Errors (Transient)
# =============================================================================


class TransientError(FetchError):
    """Base class for transient errors."""

    category = ErrorCategory.TRANSIENT


class ConnectionError(TransientError):
    """Network connection failed (DNS, refused, reset)."""

    pass


class TimeoutError(TransientError):
    """Request timed out."""

    pass


# =============================================================================
# Permanent Errors
# =============================================================================


class PermanentError(FetchError):
    """Base class for permanent errors."""

    category = ErrorCategory.PERMANENT


class ValidationError(PermanentError):
    """Input validation failed (malformed URL, unsupported scheme)."""

    pass


class ConfigurationError(PermanentError):
    """Invalid configuration."""

    pass


class RedirectError(PermanentError):
    """Redirect response could not be followed."""

    pass


class TooManyRedirectsError(RedirectError):
    """Redirect chain exceeded the configured cap."""

    def __init__(
        self,
        max_redirects: int,
        url: str,
        cause: Optional[Exception] = None,
    ):
        message = f"Too many redirects (limit {max_redirects})"
        super().__init__(message, cause, {"max_redirects": max_redirects, "url": url})
        self.max_redirects = max_redirects


class FileWriteError(PermanentError):
    """Destination could not be created or written."""

    pass


# =============================================================================
# HTTP Status Errors
# =============================================================================


class HttpStatusError(FetchError):
    """Server answered with an unexpected status code."""

    def __init__(
        self,
        status_code: int,
        message: Optional[str] = None,
        context: Optional[dict] = None,
    ):
        super().__init__(message or f"HTTP error: {status_code}", context=context)
        self.status_code = status_code
        self.category = classify_http_status(status_code)


# =============================================================================
# Error Classification Utilities
# =============================================================================

# Socket-level OSError subclasses (the rest are filesystem errors)
_NETWORK_OS_ERRORS = (
    builtins.ConnectionError,
    builtins.TimeoutError,
    socket.gaierror,
    socket.herror,
)


def classify_http_status(status_code: int) -> ErrorCategory:
    """
    Classify HTTP status code into error category.

    Args:
        status_code: HTTP response status

    Returns:
        Appropriate ErrorCategory
    """
    if 200 <= status_code < 300:
        return ErrorCategory.UNKNOWN  # Not an error

    if status_code in (408, 429):
        return ErrorCategory.TRANSIENT

    if 300 <= status_code < 500:
        return ErrorCategory.PERMANENT

    if status_code >= 500:
        return ErrorCategory.TRANSIENT

    return ErrorCategory.UNKNOWN


def classify_exception(exc: Exception) -> ErrorCategory:
    """
    Classify an exception into error category.

    Args:
        exc: Exception to classify

    Returns:
        Appropriate ErrorCategory
    """
    # Already classified
    if isinstance(exc, FetchError):
        return exc.category

    if isinstance(exc, asyncio.TimeoutError):
        return ErrorCategory.TRANSIENT

    # Malformed input never succeeds on retry
    if isinstance(exc, aiohttp.InvalidURL):
        return ErrorCategory.PERMANENT

    # aiohttp connection errors also subclass OSError, check them first
    if isinstance(exc, (aiohttp.ClientConnectionError, aiohttp.ClientPayloadError)):
        return ErrorCategory.TRANSIENT

    # Remaining OSErrors are classified by type, never by message text
    if isinstance(exc, OSError):
        if isinstance(exc, _NETWORK_OS_ERRORS):
            return ErrorCategory.TRANSIENT
        return ErrorCategory.PERMANENT

    exc_type = type(exc).__name__.lower()
    exc_str = str(exc).lower()

    if "nonhttpurl" in exc_type:
        return ErrorCategory.PERMANENT

    connection_markers = (
        "connectionerror",
        "connection refused",
        "connection reset",
        "connection aborted",
        "serverdisconnected",
        "no route to host",
        "network unreachable",
        "name resolution",
        "dns",
        "socket",
        "broken pipe",
    )
    if any(m in exc_type or m in exc_str for m in connection_markers):
        return ErrorCategory.TRANSIENT

    if "timeout" in exc_type or "timeout" in exc_str:
        return ErrorCategory.TRANSIENT

    return ErrorCategory.UNKNOWN


def wrap_exception(
    exc: Exception,
    default_class: type = FetchError,
    context: Optional[dict] = None,
) -> FetchError:
    """
    Wrap a generic exception in appropriate FetchError subclass.

    Args:
        exc: Exception to wrap
        default_class: Class to use if can't classify
        context: Additional context to include

    Returns:
        Appropriate FetchError subclass instance
    """
    if isinstance(exc, FetchError):
        if context:
            exc.context.update(context)
        return exc

    category = classify_exception(exc)
    exc_type = type(exc).__name__.lower()
    exc_str = str(exc).lower()
    message = str(exc) or type(exc).__name__

    if category == ErrorCategory.TRANSIENT:
        if isinstance(exc, asyncio.TimeoutError) or "timeout" in exc_type or "timeout" in exc_str:
            return TimeoutError(message, cause=exc, context=context)
        return ConnectionError(message, cause=exc, context=context)

    if category == ErrorCategory.PERMANENT:
        if isinstance(exc, aiohttp.InvalidURL) or "nonhttpurl" in exc_type:
            return ValidationError(message, cause=exc, context=context)
        if isinstance(exc, OSError):
            return FileWriteError(message, cause=exc, context=context)
        return PermanentError(message, cause=exc, context=context)

    return default_class(message, cause=exc, context=context)
