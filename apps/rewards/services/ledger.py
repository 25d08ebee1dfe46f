"""
Points ledger service.

The ledger is an append-only log of Transaction rows. A user's balance is
always the sum of earnings minus the sum of redemptions; the ``points`` and
``level`` columns on User are a cached copy written only by
``recompute_balance``.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from django.conf import settings
from django.db import transaction
from django.db.models import Count, Q, QuerySet, Sum

from apps.accounts.models import User
from apps.rewards.models import Transaction, TransactionKind

from .exceptions import InvalidAmountError, UserNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserStats:
    """Ledger-derived aggregates used for badges and reporting."""

    points: int
    installations: int


@dataclass(frozen=True)
class LevelProgress:
    level: int
    progress: int
    next_level_points: Optional[int]


@dataclass(frozen=True)
class LedgerAppendResult:
    """Outcome of a ledger append: the new row and the refreshed projections."""

    transaction: Transaction
    balance: int
    level: int
    badges: List = field(default_factory=list)


def _thresholds(thresholds: Optional[Sequence[int]]) -> Sequence[int]:
    if thresholds is None:
        thresholds = settings.REWARDS['LEVEL_THRESHOLDS']
    return thresholds


def level_for_points(points: int, thresholds: Optional[Sequence[int]] = None) -> int:
    """Level n starts at the n-th threshold; level 1 is the floor."""
    thresholds = _thresholds(thresholds)
    level = sum(1 for threshold in thresholds if points >= threshold)
    return max(1, level)


def level_progress(points: int, thresholds: Optional[Sequence[int]] = None) -> LevelProgress:
    """
    Position of a balance within its level.

    ``progress`` is the whole percentage of the way from the current level's
    threshold to the next one; at the top level it is 100 and
    ``next_level_points`` is None.
    """
    thresholds = _thresholds(thresholds)
    level = level_for_points(points, thresholds)

    if level >= len(thresholds):
        return LevelProgress(level=level, progress=100, next_level_points=None)

    floor = thresholds[level - 1]
    ceiling = thresholds[level]
    progress = int((max(points, floor) - floor) * 100 / (ceiling - floor))
    return LevelProgress(level=level, progress=progress, next_level_points=ceiling)


def get_user_stats(*, user: User) -> UserStats:
    """
    Aggregate the user's full transaction history.

    Installations are counted as EARNING transactions.
    """
    totals = Transaction.objects.filter(user_id=user.pk).aggregate(
        earned=Sum('amount', filter=Q(kind=TransactionKind.EARNING)),
        redeemed=Sum('amount', filter=Q(kind=TransactionKind.REDEMPTION)),
        installations=Count('id', filter=Q(kind=TransactionKind.EARNING)),
    )
    points = (totals['earned'] or 0) - (totals['redeemed'] or 0)
    return UserStats(points=points, installations=totals['installations'])


@transaction.atomic
def recompute_balance(*, user: User) -> int:
    """
    Recompute the balance from the ledger and refresh the cached projection.

    This is the only writer of ``User.points`` and ``User.level``; both are
    written together. The passed instance is updated in place.

    Returns:
        The ledger-derived balance
    """
    stats = get_user_stats(user=user)
    level = level_for_points(stats.points)

    User.objects.filter(pk=user.pk).update(points=stats.points, level=level)
    user.points = stats.points
    user.level = level

    return stats.points


def lock_user(*, user: User) -> User:
    """
    Take the row lock that serializes ledger writes for one user.

    Must be called inside a transaction.

    Raises:
        UserNotFoundError: If the user no longer exists
    """
    try:
        return User.objects.select_for_update().get(pk=user.pk)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User with ID {user.pk} not found")


@transaction.atomic
def append_transaction(
    *,
    user: User,
    kind: str,
    amount: int,
    description: str = "",
    metadata: Optional[dict] = None
) -> LedgerAppendResult:
    """
    Append a ledger entry, then refresh the cached balance and badges.

    The insert, the balance recomputation and the badge recomputation run
    in one database transaction: either all of them persist or none does.
    The user row is locked first, so the recomputed sum includes every
    committed transaction of that user.

    Args:
        user: Ledger owner
        kind: TransactionKind value
        amount: Positive magnitude; the sign is implied by kind
        description: Free-text description
        metadata: Arbitrary JSON-serializable metadata

    Returns:
        LedgerAppendResult with the new balance, level and earned badges

    Raises:
        InvalidAmountError: If amount is not a positive integer or kind is unknown
        UserNotFoundError: If the user does not exist
    """
    # Local import: badge evaluation reads ledger stats from this module
    from apps.badges.services import recompute_user_badges

    if kind not in TransactionKind.values:
        raise InvalidAmountError(f"Unknown transaction kind: {kind!r}")
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 1:
        raise InvalidAmountError("Amount must be a positive integer")

    locked = lock_user(user=user)

    entry = Transaction.objects.create(
        user=locked,
        kind=kind,
        amount=amount,
        description=description,
        metadata=metadata or {},
    )

    balance = recompute_balance(user=locked)
    badges = recompute_user_badges(user=locked)

    user.points = locked.points
    user.level = locked.level

    logger.info(
        "Ledger append for user %s: %s %d, new balance %d",
        user.pk, kind, amount, balance,
    )

    return LedgerAppendResult(
        transaction=entry,
        balance=balance,
        level=locked.level,
        badges=badges,
    )


def get_user_transactions(*, user: User) -> QuerySet[Transaction]:
    """Return the user's ledger, newest first."""
    return Transaction.objects.filter(user=user).order_by('-created_at')
