# ==========================================
# apps/goals/admin.py
# ==========================================

from django.contrib import admin
from apps.goals.models import Goal, GoalCompletion


class GoalCompletionInline(admin.TabularInline):
    """Inline admin for goal completions."""
    model = GoalCompletion
    extra = 0
    fields = ['user', 'completed_at', 'notes', 'proof_photo_url']


@admin.register(Goal)
class GoalAdmin(admin.ModelAdmin):
    """Admin interface for Goals."""
    
    list_display = [
        'name',
        'emoji',
        'group',
        'goal_type',
        'frequency_days',
        'penalty_amount',
        'is_active',
        'created_by',
        'created_at',
    ]
    list_filter = ['goal_type', 'is_active', 'created_at']
    search_fields = ['name', 'description', 'group__name', 'created_by__email']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [GoalCompletionInline]
    ordering = ['-created_at']
    
    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('group', 'created_by')


@admin.register(GoalCompletion)
class GoalCompletionAdmin(admin.ModelAdmin):
    """Admin interface for Goal Completions."""
    
    list_display = ['user', 'goal', 'completed_at', 'created_at']
    list_filter = ['completed_at']
    search_fields = ['user__email', 'goal__name', 'notes']
    readonly_fields = ['created_at']
    date_hierarchy = 'completed_at'
    ordering = ['-completed_at']
    
    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('user', 'goal')
