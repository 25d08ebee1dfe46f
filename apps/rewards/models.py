from django.db import models
from django.core.validators import MinValueValidator
import uuid


class TransactionKind(models.TextChoices):
    EARNING = 'earning', 'Earning'
    REDEMPTION = 'redemption', 'Redemption'


class ActivityType(models.TextChoices):
    INSTALLATION = 'installation', 'Installation'
    MAINTENANCE = 'maintenance', 'Maintenance'
    TRAINING = 'training', 'Training'
    OTHER = 'other', 'Other'


class RewardKind(models.TextChoices):
    VOUCHER = 'voucher', 'Voucher'
    PRODUCT = 'product', 'Product'
    TRAVEL = 'travel', 'Travel'
    OTHER = 'other', 'Other'


class Transaction(models.Model):
    """
    Immutable points ledger entry.

    ``amount`` is always positive; the sign is implied by ``kind``. A user's
    balance is the sum of earnings minus the sum of redemptions, recomputed
    by ``apps.rewards.services.recompute_balance``.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='transactions'
    )
    kind = models.CharField(max_length=20, choices=TransactionKind.choices)
    amount = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    description = models.CharField(max_length=255, blank=True)
    metadata = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'transactions'
        indexes = [
            models.Index(fields=['user', 'kind'], name='transaction_user_kind_idx'),
            models.Index(fields=['user', 'created_at'], name='transaction_user_created_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gte=1),
                name='transaction_amount_positive',
            ),
        ]
        ordering = ['-created_at']

    def __str__(self):
        sign = '+' if self.kind == TransactionKind.EARNING else '-'
        return f"{self.user} {sign}{self.amount} ({self.kind})"

    def save(self, *args, **kwargs):
        """Insert only: ledger entries are never updated."""
        from apps.rewards.services.exceptions import LedgerError

        if not self._state.adding:
            raise LedgerError("Ledger transactions are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        from apps.rewards.services.exceptions import LedgerError

        raise LedgerError("Ledger transactions cannot be deleted")

    @property
    def signed_amount(self):
        return self.amount if self.kind == TransactionKind.EARNING else -self.amount


class Product(models.Model):
    """Catalogue point value for a registry product name."""

    name = models.CharField(max_length=200, unique=True)
    reward_points = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'products_catalogue'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.reward_points} pts)"


class Reward(models.Model):
    """A reward installers can redeem points for."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    kind = models.CharField(
        max_length=20,
        choices=RewardKind.choices,
        default=RewardKind.OTHER
    )
    points_cost = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'rewards'
        indexes = [
            models.Index(fields=['is_active', 'points_cost'], name='reward_active_cost_idx'),
        ]
        ordering = ['points_cost', 'name']

    def __str__(self):
        return f"{self.name} ({self.points_cost} pts)"
