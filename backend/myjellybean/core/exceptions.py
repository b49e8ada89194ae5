"""
Centralized Exception Handling Module
=====================================

Defines custom exception classes for the application.

Every failure of an analysis unwinds as one of these, so the session can
return to the input view and the HTTP layer can turn it into a single
JSON error body.

Usage:
    raise ConfigurationError()
    raise MalformedResponseError("risk_score out of range")
"""

from typing import Any, Dict, Optional
from fastapi import HTTPException, status


GENERIC_FAILURE_MESSAGE = "Something went wrong. Please try again."


class JellyBeanException(Exception):
    """
    Base exception class for MyJellyBean.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    @property
    def user_message(self) -> str:
        """Text shown to the user in the failure notification."""
        return self.message


# ==========================
# Analysis Exceptions
# ==========================

class AnalysisError(JellyBeanException):
    """Base for failures raised while analyzing a message."""


class ConfigurationError(AnalysisError):
    """Raised when the provider credential is missing. No network call is made."""

    def __init__(
        self,
        message: str = "Gemini API key is missing. Set GEMINI_API_KEY to enable analysis.",
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details={"setting": "GEMINI_API_KEY"},
        )


class ProviderError(AnalysisError):
    """Raised on network, transport or provider-side failures."""

    def __init__(
        self,
        message: str = "Analysis provider request failed",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details,
        )

    @property
    def user_message(self) -> str:
        return GENERIC_FAILURE_MESSAGE


class MalformedResponseError(ProviderError):
    """
    Raised when the provider answers with something that is not a valid
    analysis result.

    Shown to the user like any provider failure, but logged under its own
    type since it means the client and provider disagree on the contract.
    """

    def __init__(
        self,
        message: str = "Analysis provider returned a malformed response",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, details=details)


# ==========================
# Persistence Exceptions
# ==========================

class PersistenceCorruptionError(JellyBeanException):
    """Raised internally when the stored history blob cannot be read."""

    def __init__(self, reason: str = "Stored history is unreadable"):
        super().__init__(message=reason, details={"reason": reason})


# ==========================
# Validation Exceptions
# ==========================

class ValidationError(JellyBeanException):
    """Raised when validation fails."""

    def __init__(
        self,
        message: str = "Validation error",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
        )


class EmptyMessageError(ValidationError):
    """Raised when a submission has no message text."""

    def __init__(self):
        super().__init__(
            message="Please paste a message to analyze.",
            details={"field": "message"},
        )


# ==========================
# Navigation Exceptions
# ==========================

class InvalidTransitionError(JellyBeanException):
    """Raised when a view transition is not allowed from the current view."""

    def __init__(self, current: str, event: str, message: Optional[str] = None):
        super().__init__(
            message=message or f"Cannot {event} from {current}",
            status_code=status.HTTP_409_CONFLICT,
            details={"current": current, "event": event},
        )


class AnalysisInProgressError(InvalidTransitionError):
    """Raised when a submission arrives while another analysis is pending."""

    def __init__(self):
        super().__init__(
            current="analyzing",
            event="submit",
            message="An analysis is already in progress.",
        )


# ==========================
# Resource Exceptions
# ==========================

class NotFoundError(JellyBeanException):
    """Raised when a resource is not found."""

    def __init__(
        self,
        resource: str = "Resource",
        identifier: Optional[str] = None,
        message: Optional[str] = None,
    ):
        message = message or f"{resource} not found"
        details = {"resource": resource}
        if identifier:
            details["identifier"] = identifier
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
        )


class NoCurrentResultError(NotFoundError):
    """Raised when the result or report is requested before any analysis."""

    def __init__(self):
        super().__init__(
            resource="Analysis result",
            message="No analysis result is available yet.",
        )


class SampleNotFoundError(NotFoundError):
    """Raised when a demo sample id is unknown."""

    def __init__(self, identifier: Optional[str] = None):
        super().__init__(resource="Sample", identifier=identifier)


# ==========================
# Helper Functions
# ==========================

def exception_to_http_exception(exc: JellyBeanException) -> HTTPException:
    """
    Convert a JellyBeanException to FastAPI HTTPException.

    Args:
        exc: JellyBeanException instance

    Returns:
        HTTPException with appropriate status code and detail
    """
    return HTTPException(
        status_code=exc.status_code,
        detail={
            "message": exc.user_message,
            "details": exc.details,
        }
    )
