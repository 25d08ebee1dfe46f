"""Reward redemption service."""

import logging
from uuid import UUID

from django.db import transaction

from apps.accounts.models import User
from apps.rewards.models import Reward, TransactionKind

from .exceptions import InsufficientPointsError, RewardNotFoundError
from .ledger import LedgerAppendResult, append_transaction, get_user_stats, lock_user

logger = logging.getLogger(__name__)


@transaction.atomic
def redeem_reward(*, user: User, reward_id: UUID) -> LedgerAppendResult:
    """
    Spend points on a reward.

    The user row is locked before the balance check, so two concurrent
    redemptions cannot both spend the same points.

    Args:
        user: Redeeming user
        reward_id: UUID of an active reward

    Returns:
        LedgerAppendResult for the REDEMPTION transaction

    Raises:
        RewardNotFoundError: If the reward does not exist or is inactive
        InsufficientPointsError: If the ledger balance is below the cost
        UserNotFoundError: If the user does not exist
    """
    try:
        reward = Reward.objects.get(id=reward_id, is_active=True)
    except Reward.DoesNotExist:
        raise RewardNotFoundError(f"Reward with ID {reward_id} not found")

    locked = lock_user(user=user)
    balance = get_user_stats(user=locked).points

    if balance < reward.points_cost:
        logger.info(
            "Redemption of reward %s by user %s refused: balance %d < cost %d",
            reward.id, user.pk, balance, reward.points_cost,
        )
        raise InsufficientPointsError(
            f"Reward costs {reward.points_cost} points, balance is {balance}"
        )

    result = append_transaction(
        user=locked,
        kind=TransactionKind.REDEMPTION,
        amount=reward.points_cost,
        description=f"Redeemed: {reward.name}",
        metadata={'reward_id': str(reward.id), 'reward_kind': reward.kind},
    )
    user.points = locked.points
    user.level = locked.level
    return result
