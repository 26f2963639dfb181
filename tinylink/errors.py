"""
Registry error classes.

Every failure the registry reports is a RegistryError subclass carrying the
HTTP status code the presentation layer should answer with.
"""

from typing import Optional, Dict, Any


class RegistryError(Exception):
    """
    Base registry error class.

    Attributes:
        status_code: HTTP status code (default: 500)
        message: Error message (default: "Internal server error")
        details: Optional additional error details
    """
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """
        Initialize registry error.

        Args:
            message: Error message (overrides default)
            details: Optional additional error details
        """
        self.message = message or self.message
        self.details = details or {}
        super().__init__(self.message)


class InvalidTargetError(RegistryError):
    """400 Target is not an absolute http(s) URL."""
    status_code = 400
    message = "Invalid URL"


class InvalidCodeError(RegistryError):
    """400 Code does not match the 6-8 alphanumeric pattern."""
    status_code = 400
    message = "Custom code must be 6-8 alphanumeric characters"


class CodeAlreadyExistsError(RegistryError):
    """409 Code is already taken."""
    status_code = 409
    message = "Short code already exists"


class NotFoundError(RegistryError):
    """404 No link with this code."""
    status_code = 404
    message = "Short code not found"


class StoreUnavailableError(RegistryError):
    """503 Link store call failed or timed out."""
    status_code = 503
    message = "Link store unavailable"
