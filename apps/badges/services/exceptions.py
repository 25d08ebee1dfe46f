"""
Domain-specific exceptions for badges app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class BadgesServiceError(Exception):
    """Base exception for all badges service errors."""
    pass


class BadgeNotFoundError(BadgesServiceError):
    """Raised when a badge does not exist or is inactive."""
    pass
