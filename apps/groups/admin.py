# ==========================================
# apps/groups/admin.py
# ==========================================

from django.contrib import admin
from apps.groups.models import Group, GroupMembership


class GroupMembershipInline(admin.TabularInline):
    """Inline admin for group memberships."""
    model = GroupMembership
    extra = 0
    fields = ['user', 'role', 'current_balance', 'failure_count', 'joined_at']
    readonly_fields = ['current_balance', 'failure_count', 'joined_at']
    # Members leave through leave_group, which requires a settled balance
    can_delete = False


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    """Admin interface for Groups."""
    
    list_display = [
        'name',
        'created_by',
        'member_count',
        'default_penalty_amount',
        'balance_total',
        'invite_code',
        'created_at'
    ]
    list_filter = ['created_at']
    search_fields = ['name', 'description', 'created_by__email', 'invite_code']
    readonly_fields = ['invite_code', 'created_at', 'updated_at']
    inlines = [GroupMembershipInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']
    
    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'description', 'created_by', 'default_penalty_amount')
        }),
        ('Invitation', {
            'fields': ('invite_code',)
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
    
    def member_count(self, obj):
        """Show number of members."""
        return obj.memberships.count()
    member_count.short_description = 'Members'
    
    def balance_total(self, obj):
        """Sum of member balances; anything but zero means ledger drift."""
        return obj.balance_total()
    balance_total.short_description = 'Balance sum'


@admin.register(GroupMembership)
class GroupMembershipAdmin(admin.ModelAdmin):
    """Admin interface for Group Memberships."""
    
    list_display = ['user', 'group', 'role', 'current_balance', 'failure_count', 'joined_at']
    list_filter = ['role', 'joined_at']
    search_fields = ['user__email', 'group__name']
    # Balances change only through the ledger services
    readonly_fields = ['current_balance', 'failure_count', 'joined_at']
    date_hierarchy = 'joined_at'
    ordering = ['-joined_at']
    
    def has_delete_permission(self, request, obj=None):
        """Removing a member with a balance would unbalance the group."""
        return False
    
    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('user', 'group')
