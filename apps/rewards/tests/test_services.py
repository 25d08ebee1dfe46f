"""
Service layer tests for rewards app.

Tests cover:
- Ledger append and balance recomputation
- Immutability of ledger rows
- Level projection
- Product point resolution
- Redemption and admin allocation
"""

import pytest
from django.db import DatabaseError
from django.test import override_settings
from unittest.mock import patch

from apps.accounts.models import User
from apps.badges.models import Badge, BadgeAssignment
from apps.rewards.models import Product, Transaction, TransactionKind, ActivityType
from apps.rewards.services import (
    append_transaction,
    recompute_balance,
    get_user_stats,
    get_user_transactions,
    level_for_points,
    level_progress,
    find_catalogue_product,
    points_for_product,
    get_active_rewards,
    redeem_reward,
    allocate_points,
)
from apps.rewards.services.exceptions import (
    InvalidAmountError,
    UserNotFoundError,
    RewardNotFoundError,
    InsufficientPointsError,
    LedgerError,
)


def earn(user, amount, description='Test earning'):
    return append_transaction(
        user=user,
        kind=TransactionKind.EARNING,
        amount=amount,
        description=description,
    )


# =============================================================================
# Ledger Tests
# =============================================================================

@pytest.mark.django_db
class TestLedger:
    """Tests for append_transaction() and recompute_balance()."""

    def test_append_earning_updates_cached_balance(self, installer):
        """Append and cached balance refresh happen together."""
        result = earn(installer, 20)

        assert result.balance == 20
        assert result.transaction.amount == 20
        assert result.transaction.kind == TransactionKind.EARNING

        installer.refresh_from_db()
        assert installer.points == 20

    def test_updates_passed_instance(self, installer):
        earn(installer, 15)

        assert installer.points == 15

    def test_redemption_subtracts(self, installer):
        earn(installer, 100)
        result = append_transaction(
            user=installer,
            kind=TransactionKind.REDEMPTION,
            amount=30,
        )

        assert result.balance == 70

    def test_balance_equals_ledger_sum(self, installer, ledger_sum):
        """Cached points always match an independent ledger sum."""
        for amount in (20, 15, 10):
            earn(installer, amount)
        append_transaction(user=installer, kind=TransactionKind.REDEMPTION, amount=25)
        earn(installer, 5)

        installer.refresh_from_db()
        assert installer.points == ledger_sum(installer) == 25

    def test_recompute_repairs_drifted_cache(self, installer):
        """A cached value written elsewhere is overwritten by the ledger sum."""
        earn(installer, 40)
        User.objects.filter(pk=installer.pk).update(points=9999, level=5)

        assert recompute_balance(user=installer) == 40

        installer.refresh_from_db()
        assert installer.points == 40
        assert installer.level == 1

    def test_empty_ledger_balance_is_zero(self, installer):
        assert recompute_balance(user=installer) == 0

    def test_balances_are_per_user(self, installer, other_installer):
        earn(installer, 20)
        earn(other_installer, 10)

        assert get_user_stats(user=installer).points == 20
        assert get_user_stats(user=other_installer).points == 10

    def test_installations_count_earnings_only(self, installer):
        earn(installer, 20)
        earn(installer, 15)
        append_transaction(user=installer, kind=TransactionKind.REDEMPTION, amount=5)

        stats = get_user_stats(user=installer)
        assert stats.installations == 2
        assert stats.points == 30

    @pytest.mark.parametrize('amount', [0, -5, 2.5, '10', True])
    def test_invalid_amount(self, installer, amount):
        with pytest.raises(InvalidAmountError):
            append_transaction(user=installer, kind=TransactionKind.EARNING, amount=amount)

        assert Transaction.objects.count() == 0

    def test_invalid_kind(self, installer):
        with pytest.raises(InvalidAmountError):
            append_transaction(user=installer, kind='bonus', amount=10)

    def test_missing_user(self, installer):
        ghost = User(email='ghost@example.com')

        with pytest.raises(UserNotFoundError):
            earn(ghost, 10)

    def test_failed_recompute_rolls_back_append(self, installer):
        """No transaction survives without its balance refresh."""
        with patch(
            'apps.rewards.services.ledger.recompute_balance',
            side_effect=DatabaseError('disk full'),
        ):
            with pytest.raises(DatabaseError):
                earn(installer, 20)

        assert Transaction.objects.filter(user=installer).count() == 0
        installer.refresh_from_db()
        assert installer.points == 0

    def test_metadata_stored(self, installer):
        result = append_transaction(
            user=installer,
            kind=TransactionKind.EARNING,
            amount=5,
            metadata={'unit_id': 'abc'},
        )

        assert Transaction.objects.get(pk=result.transaction.pk).metadata == {'unit_id': 'abc'}

    def test_history_newest_first(self, installer):
        earn(installer, 1)
        earn(installer, 2)

        history = list(get_user_transactions(user=installer))
        assert len(history) == 2
        assert history[0].created_at >= history[1].created_at

    def test_append_recomputes_badges(self, installer):
        Badge.objects.create(name='Starter', min_points=10)

        result = earn(installer, 10)

        assert [b.name for b in result.badges] == ['Starter']
        assert BadgeAssignment.objects.filter(user=installer).count() == 1


@pytest.mark.django_db
class TestLedgerImmutability:
    """Ledger rows can be created but never changed or removed."""

    def test_update_raises(self, installer):
        entry = earn(installer, 10).transaction
        entry.amount = 1000

        with pytest.raises(LedgerError):
            entry.save()

        assert Transaction.objects.get(pk=entry.pk).amount == 10

    def test_delete_raises(self, installer):
        entry = earn(installer, 10).transaction

        with pytest.raises(LedgerError):
            entry.delete()

        assert Transaction.objects.filter(pk=entry.pk).exists()

    def test_signed_amount(self, installer):
        earning = earn(installer, 10).transaction
        redemption = append_transaction(
            user=installer, kind=TransactionKind.REDEMPTION, amount=4
        ).transaction

        assert earning.signed_amount == 10
        assert redemption.signed_amount == -4


# =============================================================================
# Level Tests
# =============================================================================

class TestLevels:
    """Tests for level_for_points() and level_progress()."""

    @pytest.mark.parametrize('points,level', [
        (0, 1),
        (999, 1),
        (1000, 2),
        (2499, 2),
        (2500, 3),
        (5000, 4),
        (9999, 4),
        (10000, 5),
        (250000, 5),
    ])
    def test_level_for_points(self, points, level):
        assert level_for_points(points) == level

    def test_negative_balance_is_level_one(self):
        assert level_for_points(-10) == 1

    def test_progress_within_level(self):
        progress = level_progress(1750)

        assert progress.level == 2
        assert progress.progress == 50
        assert progress.next_level_points == 2500

    def test_progress_at_top_level(self):
        progress = level_progress(12000)

        assert progress.level == 5
        assert progress.progress == 100
        assert progress.next_level_points is None

    def test_custom_thresholds(self):
        assert level_for_points(50, thresholds=[0, 10, 100]) == 2
        assert level_progress(55, thresholds=[0, 10, 100]).progress == 50

    @pytest.mark.django_db
    def test_level_written_with_points(self, installer):
        earn(installer, 1200)

        installer.refresh_from_db()
        assert installer.level == 2


# =============================================================================
# Catalogue Tests
# =============================================================================

@pytest.mark.django_db
class TestCatalogue:
    """Tests for product point resolution."""

    def test_exact_match(self, catalogue):
        assert points_for_product('BQ360 BAREEQ 30W') == 15

    def test_exact_match_ignores_case(self, catalogue):
        assert points_for_product('bq250 bareeq 25w') == 10

    def test_registry_name_inside_catalogue_name(self, catalogue):
        """Short registry names match the longer catalogue entry."""
        assert points_for_product('BQ520') == 20

    def test_catalogue_name_inside_registry_name(self, catalogue):
        assert points_for_product('Lamp BQ360 BAREEQ 30W (warm white)') == 15

    def test_longest_partial_match_wins(self, catalogue):
        Product.objects.create(name='BQ520', reward_points=5)
        Product.objects.create(name='BQ520 BAREEQ 50W PRO', reward_points=40)

        assert find_catalogue_product('Fixture BQ520 BAREEQ 50W PRO v2').reward_points == 40

    @override_settings(REWARDS={'DEFAULT_SCAN_POINTS': 7, 'LEVEL_THRESHOLDS': [0]})
    def test_unknown_product_gets_default(self, catalogue):
        assert points_for_product('Something else') == 7

    @override_settings(REWARDS={'DEFAULT_SCAN_POINTS': 7, 'LEVEL_THRESHOLDS': [0]})
    def test_unresolved_name_gets_default(self, catalogue):
        assert points_for_product(None) == 7
        assert points_for_product('   ') == 7

    def test_inactive_product_ignored(self, catalogue):
        Product.objects.filter(name='BQ360 BAREEQ 30W').update(is_active=False)

        assert points_for_product('BQ360 BAREEQ 30W') == 10

    def test_default_scan_points_is_ten(self, db):
        assert points_for_product('Uncatalogued') == 10

    def test_active_rewards_only(self, voucher, retired_reward):
        assert list(get_active_rewards()) == [voucher]


# =============================================================================
# Redemption Tests
# =============================================================================

@pytest.mark.django_db
class TestRedemption:
    """Tests for redeem_reward()."""

    def test_redeem_success(self, installer, voucher, ledger_sum):
        earn(installer, 600)

        result = redeem_reward(user=installer, reward_id=voucher.id)

        assert result.balance == 100
        assert result.transaction.kind == TransactionKind.REDEMPTION
        assert result.transaction.amount == 500
        assert result.transaction.metadata['reward_id'] == str(voucher.id)
        assert installer.points == 100 == ledger_sum(installer)

    def test_redeem_exact_balance(self, installer, voucher):
        earn(installer, 500)

        assert redeem_reward(user=installer, reward_id=voucher.id).balance == 0

    def test_insufficient_points(self, installer, voucher):
        earn(installer, 499)

        with pytest.raises(InsufficientPointsError):
            redeem_reward(user=installer, reward_id=voucher.id)

        assert get_user_stats(user=installer).points == 499
        assert not Transaction.objects.filter(kind=TransactionKind.REDEMPTION).exists()

    def test_balance_checked_against_ledger_not_cache(self, installer, voucher):
        """A stale cached balance cannot authorize a redemption."""
        User.objects.filter(pk=installer.pk).update(points=10000)

        with pytest.raises(InsufficientPointsError):
            redeem_reward(user=installer, reward_id=voucher.id)

    def test_inactive_reward(self, installer, retired_reward):
        earn(installer, 100)

        with pytest.raises(RewardNotFoundError):
            redeem_reward(user=installer, reward_id=retired_reward.id)

    def test_unknown_reward(self, installer):
        from uuid import uuid4

        with pytest.raises(RewardNotFoundError):
            redeem_reward(user=installer, reward_id=uuid4())

    def test_redemption_can_revoke_badge(self, installer, voucher):
        Badge.objects.create(name='Saver', min_points=600)
        earn(installer, 600)
        assert BadgeAssignment.objects.filter(user=installer).exists()

        result = redeem_reward(user=installer, reward_id=voucher.id)

        assert result.badges == []
        assert not BadgeAssignment.objects.filter(user=installer).exists()


# =============================================================================
# Allocation Tests
# =============================================================================

@pytest.mark.django_db
class TestAllocation:
    """Tests for allocate_points()."""

    def test_allocate_success(self, installer, program_admin):
        result = allocate_points(
            user=installer,
            amount=50,
            activity_type=ActivityType.TRAINING,
            allocated_by=program_admin,
        )

        assert result.balance == 50
        entry = result.transaction
        assert entry.kind == TransactionKind.EARNING
        assert entry.metadata == {
            'activity_type': 'training',
            'allocated_by': str(program_admin.pk),
        }
        assert entry.description == 'Training points'

    def test_allocation_counts_as_installation(self, installer, program_admin):
        allocate_points(
            user=installer,
            amount=5,
            activity_type=ActivityType.INSTALLATION,
            allocated_by=program_admin,
        )

        assert get_user_stats(user=installer).installations == 1

    def test_custom_description(self, installer, program_admin):
        result = allocate_points(
            user=installer,
            amount=5,
            activity_type=ActivityType.OTHER,
            allocated_by=program_admin,
            description='Referral bonus',
        )

        assert result.transaction.description == 'Referral bonus'

    def test_unknown_activity_type(self, installer, program_admin):
        with pytest.raises(InvalidAmountError):
            allocate_points(
                user=installer,
                amount=5,
                activity_type='party',
                allocated_by=program_admin,
            )

    def test_zero_amount(self, installer, program_admin):
        with pytest.raises(InvalidAmountError):
            allocate_points(
                user=installer,
                amount=0,
                activity_type=ActivityType.OTHER,
                allocated_by=program_admin,
            )
