import pytest
from apps.rewards.models import Product, Reward, RewardKind


@pytest.fixture
def catalogue(db):
    """The BAREEQ product point values."""
    return [
        Product.objects.create(name='BQ520 BAREEQ 50W', reward_points=20),
        Product.objects.create(name='BQ360 BAREEQ 30W', reward_points=15),
        Product.objects.create(name='BQ250 BAREEQ 25W', reward_points=10),
    ]


@pytest.fixture
def voucher(db):
    """An active 500-point reward."""
    return Reward.objects.create(
        name='Fuel voucher',
        kind=RewardKind.VOUCHER,
        points_cost=500,
    )


@pytest.fixture
def retired_reward(db):
    return Reward.objects.create(
        name='Old mug',
        kind=RewardKind.PRODUCT,
        points_cost=10,
        is_active=False,
    )

