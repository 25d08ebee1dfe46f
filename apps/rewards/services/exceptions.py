"""
Domain-specific exceptions for rewards app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class RewardsServiceError(Exception):
    """Base exception for all rewards service errors."""
    pass


class UserNotFoundError(RewardsServiceError):
    """Raised when the ledger owner does not exist."""
    pass


class InvalidAmountError(RewardsServiceError):
    """Raised when a ledger amount is not a positive integer."""
    pass


class RewardNotFoundError(RewardsServiceError):
    """Raised when a reward does not exist or is no longer offered."""
    pass


class InsufficientPointsError(RewardsServiceError):
    """Raised when a redemption costs more than the current balance."""
    pass


class LedgerError(RewardsServiceError):
    """Raised on any attempt to update or delete a ledger transaction."""
    pass
