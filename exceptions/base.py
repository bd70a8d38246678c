"""
Base exception classes for the storefront client.
"""


class StorefrontException(Exception):
    """
    Base exception for all storefront errors.

    All custom exceptions should inherit from this class so callers can catch
    every storefront-specific error with a single handler.

    Attributes:
        message: Human-readable error message
        details: Optional dict with additional context (record ids, statuses, etc.)
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation with context."""
        if self.details:
            details_str = ', '.join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.__class__.__name__}('{self.message}', {details_str})"
        return f"{self.__class__.__name__}('{self.message}')"
