"""
Badge evaluation service.

Eligibility is always computed from ledger-derived stats. BadgeAssignment
rows are a cache of the last evaluation and are rebuilt after every
balance-affecting event.
"""

import logging
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from django.db import transaction

from apps.accounts.models import User
from apps.badges.models import Badge, BadgeAssignment
from apps.rewards.services import UserStats, get_user_stats

from .exceptions import BadgeNotFoundError

logger = logging.getLogger(__name__)


def is_badge_earned(badge: Badge, stats: UserStats) -> bool:
    """Every threshold that is set must be met; unset thresholds always pass."""
    if badge.min_points is not None and stats.points < badge.min_points:
        return False
    if badge.min_installations is not None and stats.installations < badge.min_installations:
        return False
    return True


def evaluate_badges(stats: UserStats, badges: Iterable[Badge]) -> List[Badge]:
    """Return the active badges among ``badges`` that ``stats`` earns."""
    return [
        badge for badge in badges
        if badge.is_active and is_badge_earned(badge, stats)
    ]


def get_active_badges():
    return Badge.objects.filter(is_active=True).order_by('name')


@transaction.atomic
def recompute_user_badges(*, user: User, stats: Optional[UserStats] = None) -> List[Badge]:
    """
    Rebuild the user's badge assignments from current ledger stats.

    Assignments no longer earned are removed, newly earned ones are
    created. Runs inside the caller's transaction when there is one.

    Returns:
        Badges currently earned, ordered by name
    """
    if stats is None:
        stats = get_user_stats(user=user)

    earned = evaluate_badges(stats, get_active_badges())
    earned_ids = {badge.id for badge in earned}

    current = set(
        BadgeAssignment.objects
        .filter(user=user)
        .values_list('badge_id', flat=True)
    )

    revoked = current - earned_ids
    revoked_names = []
    if revoked:
        revoked_names = list(
            Badge.objects.filter(id__in=revoked).values_list('name', flat=True)
        )
        BadgeAssignment.objects.filter(user=user, badge_id__in=revoked).delete()

    granted = [badge for badge in earned if badge.id not in current]
    if granted:
        BadgeAssignment.objects.bulk_create(
            [BadgeAssignment(user=user, badge=badge) for badge in granted],
            ignore_conflicts=True,
        )

    if granted or revoked:
        logger.info(
            "Badges for user %s: granted %s, revoked %s",
            user.pk, [badge.name for badge in granted], revoked_names,
        )

    return earned


def get_badge_statuses(*, user: User) -> List[Tuple[Badge, bool]]:
    """Every active badge with a live earned flag for the user."""
    stats = get_user_stats(user=user)
    return [(badge, is_badge_earned(badge, stats)) for badge in get_active_badges()]


def get_badge(*, badge_id: UUID) -> Badge:
    """
    Raises:
        BadgeNotFoundError: If the badge does not exist or is inactive
    """
    try:
        return Badge.objects.get(id=badge_id, is_active=True)
    except Badge.DoesNotExist:
        raise BadgeNotFoundError(f"Badge with ID {badge_id} not found")
