"""Services for the points ledger, catalogues and redemption."""

from .exceptions import (
    RewardsServiceError,
    UserNotFoundError,
    InvalidAmountError,
    RewardNotFoundError,
    InsufficientPointsError,
    LedgerError,
)
from .ledger import (
    UserStats,
    LevelProgress,
    LedgerAppendResult,
    level_for_points,
    level_progress,
    get_user_stats,
    recompute_balance,
    lock_user,
    append_transaction,
    get_user_transactions,
)
from .catalogue import (
    find_catalogue_product,
    points_for_product,
    get_active_rewards,
)
from .redemption import redeem_reward
from .allocation import allocate_points

__all__ = [
    # Exceptions
    'RewardsServiceError',
    'UserNotFoundError',
    'InvalidAmountError',
    'RewardNotFoundError',
    'InsufficientPointsError',
    'LedgerError',
    # Ledger
    'UserStats',
    'LevelProgress',
    'LedgerAppendResult',
    'level_for_points',
    'level_progress',
    'get_user_stats',
    'recompute_balance',
    'lock_user',
    'append_transaction',
    'get_user_transactions',
    # Catalogue
    'find_catalogue_product',
    'points_for_product',
    'get_active_rewards',
    # Redemption and allocation
    'redeem_reward',
    'allocate_points',
]
