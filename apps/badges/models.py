from django.db import models
import uuid


class Badge(models.Model):
    """
    A named achievement unlocked by ledger-derived thresholds.

    Null thresholds impose no constraint; a badge without any threshold
    is earned by every user.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    icon = models.CharField(max_length=50, blank=True)

    min_points = models.PositiveIntegerField(null=True, blank=True)
    min_installations = models.PositiveIntegerField(null=True, blank=True)

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'badges'
        ordering = ['name']

    def __str__(self):
        return self.name


class BadgeAssignment(models.Model):
    """
    Cached record that a user currently holds a badge.

    Rebuilt by ``apps.badges.services.recompute_user_badges`` after every
    ledger append; never the source of truth for eligibility.
    """

    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='badge_assignments'
    )
    badge = models.ForeignKey(
        Badge,
        on_delete=models.CASCADE,
        related_name='assignments'
    )
    assigned_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'badge_assignments'
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'badge'],
                name='unique_badge_per_user',
            ),
        ]
        ordering = ['assigned_at']

    def __str__(self):
        return f"{self.user} - {self.badge.name}"
