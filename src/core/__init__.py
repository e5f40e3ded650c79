"""
Core infrastructure modules for CityGuide.

Provides common utilities used across the application:
- exceptions: Standardized exception hierarchy
- sequencing: Request tokens that let late async results be discarded

The dependency container lives in src.core.container and is imported from
there directly.
"""

from src.core.exceptions import (
    AdminRequired,
    AuthenticationRequired,
    BackendError,
    ConfigurationError,
    GuideError,
    NotFoundError,
    SelectionError,
    ValidationFailure,
)
from src.core.sequencing import RequestSequencer

__all__ = [
    # Exceptions
    "GuideError",
    "ValidationFailure",
    "SelectionError",
    "BackendError",
    "NotFoundError",
    "AuthenticationRequired",
    "AdminRequired",
    "ConfigurationError",
    # Sequencing
    "RequestSequencer",
]
