"""
Core exception hierarchy for CityGuide.

Every error carries a message and optional details. The API layer maps each
family to one user-visible behaviour:

- ValidationFailure: inline notice (400), never retried
- BackendError: generic "try again" notice (502)
- AuthenticationRequired / AdminRequired: redirect to another page
- NotFoundError: 404
"""

from typing import Any, Optional

from src.models.schemas import Notice


# =============================================================================
# Base Exceptions
# =============================================================================


class GuideError(Exception):
    """Base exception for all CityGuide errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationFailure(GuideError):
    """
    Raised when user input fails a product rule.

    Carries the notice the caller should show inline.
    """

    def __init__(self, notice: Notice, details: Optional[dict[str, Any]] = None):
        self.notice = notice
        super().__init__(f"{notice.title}: {notice.description}", details)


class SelectionError(ValidationFailure):
    """Raised when a selection transition is attempted out of order."""

    pass


# =============================================================================
# Backend Errors
# =============================================================================


class BackendError(GuideError):
    """
    Raised when a call to the Supabase backend fails.

    No distinction is made between transient and permanent failures.
    """

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ):
        self.operation = operation
        super().__init__(f"[{operation}] {message}", details)


class NotFoundError(GuideError):
    """Raised when a requested row does not exist (or is not visible to the caller)."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(
            f"{resource} {identifier} not found",
            {"resource": resource, "id": identifier},
        )


# =============================================================================
# Authorization Errors
# =============================================================================


class AuthenticationRequired(GuideError):
    """Raised when an action needs a signed-in user. Handled as a redirect."""

    def __init__(self, redirect_to: str, message: str = "Please sign in to continue."):
        self.redirect_to = redirect_to
        super().__init__(message, {"redirect_to": redirect_to})


class AdminRequired(GuideError):
    """Raised when a signed-in user without admin rights opens an admin surface."""

    def __init__(self, redirect_to: str = "/"):
        self.redirect_to = redirect_to
        super().__init__("Admin privileges required.", {"redirect_to": redirect_to})


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(GuideError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        self.config_key = config_key
        details = {"config_key": config_key} if config_key else None
        super().__init__(message, details)
