"""Services for badge evaluation and the badge-assignment cache."""

from .exceptions import (
    BadgesServiceError,
    BadgeNotFoundError,
)
from .evaluation import (
    is_badge_earned,
    evaluate_badges,
    get_active_badges,
    recompute_user_badges,
    get_badge_statuses,
    get_badge,
)

__all__ = [
    # Exceptions
    'BadgesServiceError',
    'BadgeNotFoundError',
    # Evaluation
    'is_badge_earned',
    'evaluate_badges',
    'get_active_badges',
    'recompute_user_badges',
    'get_badge_statuses',
    'get_badge',
]
