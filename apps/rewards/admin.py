# ==========================================
# apps/rewards/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from .models import Transaction, TransactionKind, Product, Reward
from .services import recompute_balance


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """
    Read-only admin for the points ledger.

    Transactions are append-only: they are created by the ledger service
    and can be neither edited nor deleted here.
    """

    list_display = [
        'user',
        'kind_badge',
        'amount',
        'description',
        'created_at',
    ]
    list_filter = ['kind', 'created_at']
    search_fields = ['user__email', 'user__display_name', 'description']
    readonly_fields = [
        'id',
        'user',
        'kind',
        'amount',
        'description',
        'metadata',
        'created_at',
    ]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    actions = ['recompute_user_balances']

    def kind_badge(self, obj):
        """Display transaction kind as colored badge."""
        colors = {
            TransactionKind.EARNING: ('#6B8E5E', 'white'),
            TransactionKind.REDEMPTION: ('#A47449', 'white'),
        }
        bg, fg = colors.get(obj.kind, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_kind_display()
        )
    kind_badge.short_description = 'Kind'
    kind_badge.admin_order_field = 'kind'

    @admin.action(description='Recompute balances of the selected users')
    def recompute_user_balances(self, request, queryset):
        """Refresh cached points and level from the ledger."""
        users = {t.user for t in queryset.select_related('user')}
        for user in users:
            recompute_balance(user=user)
        self.message_user(request, f'Recomputed balance for {len(users)} user(s).')

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('user')


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'reward_points', 'is_active', 'updated_at']
    list_filter = ['is_active']
    search_fields = ['name']
    list_editable = ['reward_points', 'is_active']


@admin.register(Reward)
class RewardAdmin(admin.ModelAdmin):
    list_display = ['name', 'kind', 'points_cost', 'is_active', 'created_at']
    list_filter = ['kind', 'is_active']
    search_fields = ['name', 'description']
    ordering = ['points_cost', 'name']
