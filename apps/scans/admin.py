from django.contrib import admin
from .models import ScannedUnit


@admin.register(ScannedUnit)
class ScannedUnitAdmin(admin.ModelAdmin):
    """
    Read-only admin for claimed units.

    Claims are created only by the scan service; removing one would make
    the unit claimable again without reversing its ledger entry.
    """

    list_display = [
        'unit_id',
        'product_name',
        'user',
        'points_awarded',
        'matched_by',
        'scanned_at',
    ]
    list_filter = ['matched_by', 'scanned_at']
    search_fields = ['unit_id', 'product_name', 'user__email']
    readonly_fields = list_display
    date_hierarchy = 'scanned_at'
    ordering = ['-scanned_at']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('user')
