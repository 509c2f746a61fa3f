# ==========================================
# apps/ledger/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from .models import FailureEvent, Transaction, TransactionStatus


class TransactionInline(admin.TabularInline):
    """Inline admin for the transactions a failure created."""
    model = Transaction
    extra = 0
    fields = ['from_user', 'to_user', 'amount', 'status_badge', 'settled_at']
    readonly_fields = fields

    def status_badge(self, obj):
        return _status_badge(obj)
    status_badge.short_description = 'Status'

    def has_add_permission(self, request, obj=None):
        """Disable adding transactions manually - they're created by log_failure."""
        return False

    def has_delete_permission(self, request, obj=None):
        return False


def _status_badge(obj):
    colors = {
        TransactionStatus.PENDING: ('#E5C49A', '#2C1810'),
        TransactionStatus.PAID: ('#6B8E5E', 'white'),
    }
    bg, fg = colors.get(obj.status, ('#ccc', '#666'))
    return format_html(
        '<span style="background: {}; color: {}; padding: 3px 8px; '
        'border-radius: 10px; font-size: 11px;">{}</span>',
        bg, fg, obj.get_status_display()
    )


@admin.register(FailureEvent)
class FailureEventAdmin(admin.ModelAdmin):
    """
    Admin interface for logged failures.

    Failures and their transactions are read-only here; balances only
    change through the ledger services.
    """

    list_display = [
        'user',
        'group',
        'penalty_amount',
        'transactions_created',
        'total_debt',
        'created_at',
    ]
    list_filter = ['group', 'created_at']
    search_fields = ['user__email', 'user__display_name', 'group__name', 'description']
    readonly_fields = [
        'group',
        'user',
        'description',
        'proof_photo_url',
        'penalty_amount',
        'transactions_created',
        'total_debt',
        'idempotency_key',
        'created_at',
    ]
    inlines = [TransactionInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        """Deleting a failure would drop debts that balances still count."""
        return False

    def get_queryset(self, request):
        """Optimize query with select_related."""
        qs = super().get_queryset(request)
        return qs.select_related('user', 'group')


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """Admin interface for ledger transactions."""

    list_display = [
        'from_user',
        'to_user',
        'group',
        'amount',
        'status_badge',
        'created_at',
        'settled_at',
    ]
    list_filter = ['status', 'group', 'created_at']
    search_fields = [
        'from_user__email',
        'to_user__email',
        'group__name',
        'description',
    ]
    readonly_fields = [
        'group',
        'failure',
        'from_user',
        'to_user',
        'amount',
        'status',
        'description',
        'proof_photo_url',
        'created_at',
        'settled_at',
        'settled_by',
    ]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    def status_badge(self, obj):
        """Display transaction status as colored badge."""
        return _status_badge(obj)
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    def has_add_permission(self, request):
        """Disable manual creation - transactions are created by log_failure."""
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def get_queryset(self, request):
        """Optimize query with select_related."""
        qs = super().get_queryset(request)
        return qs.select_related('from_user', 'to_user', 'group', 'settled_by')
