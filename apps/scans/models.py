from django.db import models


class ScannedUnit(models.Model):
    """
    The claim record of one physical unit.

    ``unit_id`` is unique across all users: the constraint, not an
    application check, is what guarantees a unit is rewarded once.
    Created in the same database transaction as its EARNING ledger entry,
    whose metadata carries the same ``unit_id``; never updated.
    """

    unit_id = models.UUIDField(unique=True)

    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='scanned_units'
    )
    product_name = models.CharField(max_length=255, null=True, blank=True)
    points_awarded = models.PositiveIntegerField()
    matched_by = models.CharField(max_length=50, blank=True)

    scanned_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'scanned_units'
        indexes = [
            models.Index(fields=['user', 'scanned_at'], name='scanned_user_time_idx'),
        ]
        ordering = ['-scanned_at']

    def __str__(self):
        return f"{self.unit_id} ({self.product_name or 'unknown product'})"
