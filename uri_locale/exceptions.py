"""
Custom Exception Classes for the locale prefix negotiator

Every error carries an HTTP status code and a machine-readable
``ErrorCode`` so the exception handlers can render a consistent
error envelope.
"""

from enum import Enum
from typing import Any

from fastapi import status


class ErrorCode(str, Enum):
    """Machine-readable error codes surfaced in error responses."""

    CONFIGURATION_INVALID = "CONFIGURATION_INVALID"
    LOCALE_RESOLVER_UNAVAILABLE = "LOCALE_RESOLVER_UNAVAILABLE"
    URI_CONSTRUCTION_FAILED = "URI_CONSTRUCTION_FAILED"
    LOCALE_INTERCEPTOR_FAILED = "LOCALE_INTERCEPTOR_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class LocaleNegotiationError(Exception):
    """Base exception class for all locale negotiation errors"""

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# ============================================================================
# Build-time Exceptions
# ============================================================================


class ConfigurationError(LocaleNegotiationError):
    """Raised when the interceptor configuration cannot be built"""

    error_code = ErrorCode.CONFIGURATION_INVALID

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message=message, details=details)


# ============================================================================
# Per-request Exceptions
# ============================================================================


class LocaleResolverUnavailable(LocaleNegotiationError):
    """Raised when no locale resolver can be obtained for the request"""

    error_code = ErrorCode.LOCALE_RESOLVER_UNAVAILABLE

    def __init__(self, message: str = "LocaleResolver not found"):
        super().__init__(message=message)


class UriConstructionError(LocaleNegotiationError):
    """Raised when the redirect target cannot be assembled from the request"""

    error_code = ErrorCode.URI_CONSTRUCTION_FAILED

    def __init__(self, message: str, component: str | None = None, value: Any = None):
        details: dict[str, Any] = {}
        if component:
            details["component"] = component
            details["value"] = value
        super().__init__(message=message, details=details)


class LocaleInterceptorError(LocaleNegotiationError):
    """The single failure reported by the interceptor, wrapping the original cause"""

    error_code = ErrorCode.LOCALE_INTERCEPTOR_FAILED

    def __init__(self, cause: BaseException, kind: ErrorCode | None = None):
        self.cause = cause
        self.kind = kind or getattr(cause, "error_code", ErrorCode.INTERNAL_ERROR)
        super().__init__(
            message=f"Locale negotiation failed: {cause}",
            details={"kind": self.kind.value, "cause": type(cause).__name__},
        )
