from django.contrib import admin
from .models import Badge, BadgeAssignment


@admin.register(Badge)
class BadgeAdmin(admin.ModelAdmin):
    list_display = [
        'name',
        'icon',
        'min_points',
        'min_installations',
        'is_active',
        'get_holder_count',
    ]
    list_filter = ['is_active']
    search_fields = ['name', 'description']

    fieldsets = (
        (None, {
            'fields': ('name', 'description', 'icon', 'is_active')
        }),
        ('Thresholds', {
            'fields': ('min_points', 'min_installations'),
            'description': 'Leave a threshold empty to ignore it.',
        }),
    )

    def get_holder_count(self, obj):
        return obj.assignments.count()
    get_holder_count.short_description = 'Holders'


@admin.register(BadgeAssignment)
class BadgeAssignmentAdmin(admin.ModelAdmin):
    """Read-only view of the badge cache; rebuilt from the ledger."""

    list_display = ['user', 'badge', 'assigned_at']
    list_filter = ['badge']
    search_fields = ['user__email', 'badge__name']
    readonly_fields = ['user', 'badge', 'assigned_at']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('user', 'badge')
