"""Manual point allocation by program admins."""

from django.db import transaction

from apps.accounts.models import User
from apps.rewards.models import ActivityType, TransactionKind

from .exceptions import InvalidAmountError
from .ledger import LedgerAppendResult, append_transaction


@transaction.atomic
def allocate_points(
    *,
    user: User,
    amount: int,
    activity_type: str,
    allocated_by: User,
    description: str = ""
) -> LedgerAppendResult:
    """
    Grant points for work recorded outside the scan flow.

    Args:
        user: Receiving user
        amount: Points to grant (at least 1)
        activity_type: ActivityType value
        allocated_by: Admin granting the points
        description: Optional description; defaults to the activity label

    Returns:
        LedgerAppendResult for the EARNING transaction

    Raises:
        InvalidAmountError: If amount or activity type is invalid
    """
    if activity_type not in ActivityType.values:
        raise InvalidAmountError(f"Unknown activity type: {activity_type!r}")

    return append_transaction(
        user=user,
        kind=TransactionKind.EARNING,
        amount=amount,
        description=description or f"{ActivityType(activity_type).label} points",
        metadata={
            'activity_type': activity_type,
            'allocated_by': str(allocated_by.pk),
        },
    )
