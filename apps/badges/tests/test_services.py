"""
Service layer tests for badges app.

Tests cover:
- Pure threshold evaluation
- Badge cache recomputation after ledger changes
- Monotonicity under earnings
"""

import pytest

from apps.badges.models import Badge, BadgeAssignment
from apps.badges.services import (
    is_badge_earned,
    evaluate_badges,
    recompute_user_badges,
    get_badge_statuses,
    get_badge,
    BadgeNotFoundError,
)
from apps.rewards.models import TransactionKind
from apps.rewards.services import UserStats, append_transaction


def earn(user, amount):
    return append_transaction(user=user, kind=TransactionKind.EARNING, amount=amount)


def redeem(user, amount):
    return append_transaction(user=user, kind=TransactionKind.REDEMPTION, amount=amount)


def assigned_names(user):
    return sorted(
        BadgeAssignment.objects.filter(user=user).values_list('badge__name', flat=True)
    )


# =============================================================================
# Evaluation Tests
# =============================================================================

class TestIsBadgeEarned:
    """Pure evaluation against stats; no database needed."""

    def test_no_thresholds_always_earned(self):
        badge = Badge(name='Welcome')

        assert is_badge_earned(badge, UserStats(points=0, installations=0))

    def test_points_threshold(self):
        badge = Badge(name='Hundred', min_points=100)

        assert not is_badge_earned(badge, UserStats(points=99, installations=50))
        assert is_badge_earned(badge, UserStats(points=100, installations=0))

    def test_installations_threshold(self):
        badge = Badge(name='Five', min_installations=5)

        assert not is_badge_earned(badge, UserStats(points=10000, installations=4))
        assert is_badge_earned(badge, UserStats(points=0, installations=5))

    def test_all_present_thresholds_required(self):
        badge = Badge(name='Pro', min_points=200, min_installations=3)

        assert not is_badge_earned(badge, UserStats(points=200, installations=2))
        assert not is_badge_earned(badge, UserStats(points=199, installations=3))
        assert is_badge_earned(badge, UserStats(points=200, installations=3))

    def test_zero_threshold_is_present(self):
        """A threshold of 0 is set, not absent, and is always met."""
        badge = Badge(name='Zero', min_points=0)

        assert is_badge_earned(badge, UserStats(points=0, installations=0))

    def test_inactive_badges_never_evaluated_as_earned(self):
        badges = [Badge(name='Old', is_active=False), Badge(name='New')]

        earned = evaluate_badges(UserStats(points=0, installations=0), badges)

        assert [b.name for b in earned] == ['New']


# =============================================================================
# Cache Recomputation Tests
# =============================================================================

@pytest.mark.django_db
class TestRecomputeUserBadges:
    """Tests for recompute_user_badges() and its use by the ledger."""

    def test_welcome_badge_before_any_activity(self, installer, badges):
        earned = recompute_user_badges(user=installer)

        assert [b.name for b in earned] == ['Welcome']
        assert assigned_names(installer) == ['Welcome']

    def test_grants_after_earning(self, installer, badges):
        earn(installer, 100)

        assert assigned_names(installer) == ['Hundred Club', 'Welcome']

    def test_installations_counted_from_earnings(self, installer, badges):
        for _ in range(5):
            earn(installer, 10)

        assert 'Five Installs' in assigned_names(installer)

    def test_combined_thresholds(self, installer, badges):
        earn(installer, 150)
        earn(installer, 30)
        earn(installer, 20)

        assert 'Pro' in assigned_names(installer)

    def test_revokes_after_redemption(self, installer, badges):
        earn(installer, 120)
        assert 'Hundred Club' in assigned_names(installer)

        redeem(installer, 50)

        assert assigned_names(installer) == ['Welcome']

    def test_inactive_badge_not_assigned(self, installer, badges):
        earn(installer, 1000)

        assert 'Retired' not in assigned_names(installer)

    def test_deactivating_badge_revokes_on_next_recompute(self, installer, badges):
        earn(installer, 100)
        Badge.objects.filter(name='Hundred Club').update(is_active=False)

        recompute_user_badges(user=installer)

        assert assigned_names(installer) == ['Welcome']

    def test_recompute_is_idempotent(self, installer, badges):
        earn(installer, 100)
        recompute_user_badges(user=installer)
        recompute_user_badges(user=installer)

        assert BadgeAssignment.objects.filter(user=installer).count() == 2

    def test_users_are_independent(self, installer, other_installer, badges):
        earn(installer, 100)
        earn(other_installer, 10)

        assert 'Hundred Club' not in assigned_names(other_installer)


@pytest.mark.django_db
class TestBadgeMonotonicity:
    """Earning never loses a badge; redeeming may."""

    def test_earnings_never_revoke(self, installer, badges):
        previous = set()
        for amount in (10, 50, 40, 100, 5, 300):
            result = earn(installer, amount)
            current = {b.name for b in result.badges}

            assert previous <= current
            previous = current

    def test_redemption_may_revoke(self, installer, badges):
        before = {b.name for b in earn(installer, 150).badges}
        after = {b.name for b in redeem(installer, 100).badges}

        assert 'Hundred Club' in before
        assert 'Hundred Club' not in after


@pytest.mark.django_db
class TestBadgeQueries:
    def test_statuses_are_live(self, installer, badges):
        earn(installer, 100)
        # Cache deliberately cleared: statuses come from the ledger
        BadgeAssignment.objects.all().delete()

        statuses = {badge.name: earned for badge, earned in get_badge_statuses(user=installer)}

        assert statuses == {
            'Five Installs': False,
            'Hundred Club': True,
            'Pro': False,
            'Welcome': True,
        }

    def test_get_badge_inactive(self, badges):
        with pytest.raises(BadgeNotFoundError):
            get_badge(badge_id=badges['retired'].id)
