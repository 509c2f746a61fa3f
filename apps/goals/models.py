# ==========================================
# apps/goals/models.py
# ==========================================

from decimal import Decimal
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
import uuid


class GoalType(models.TextChoices):
    FREQUENCY = 'frequency', 'Every N days'
    DAILY = 'daily', 'Daily'
    WEEKLY = 'weekly', 'Weekly'


# Fixed periods of the named goal types
GOAL_TYPE_DAYS = {
    GoalType.DAILY: 1,
    GoalType.WEEKLY: 7,
}


class Goal(models.Model):
    """A recurring goal every member of a group is held to."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    group = models.ForeignKey('groups.Group', on_delete=models.CASCADE, related_name='goals')
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    emoji = models.CharField(max_length=16, default='🎯')
    goal_type = models.CharField(max_length=20, choices=GoalType.choices, default=GoalType.FREQUENCY)
    frequency_days = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    penalty_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='created_goals')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    
    class Meta:
        db_table = 'goals'
        constraints = [
            models.CheckConstraint(
                check=models.Q(frequency_days__gte=1),
                name='goal_frequency_days_positive',
            ),
        ]
        indexes = [
            models.Index(fields=['group', 'is_active'], name='goals_group_active_idx'),
            models.Index(fields=['created_by'], name='goals_created_by_idx'),
        ]
        ordering = ['created_at']
    
    def __str__(self):
        return f"{self.emoji} {self.name} (every {self.frequency_days}d)"
    
    def save(self, *args, **kwargs):
        if self.goal_type in GOAL_TYPE_DAYS:
            self.frequency_days = GOAL_TYPE_DAYS[self.goal_type]
        super().save(*args, **kwargs)


class GoalCompletion(models.Model):
    """
    One logged completion of a goal by a member.

    Completions are append-only apart from their author undoing them. The
    integer id breaks ties between completions logged at the same instant.
    """
    
    id = models.BigAutoField(primary_key=True)
    goal = models.ForeignKey(Goal, on_delete=models.CASCADE, related_name='completions')
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='goal_completions')
    completed_at = models.DateTimeField(default=timezone.now)
    proof_photo_url = models.URLField(max_length=500, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    
    class Meta:
        db_table = 'goal_completions'
        indexes = [
            models.Index(fields=['goal', 'user', 'completed_at'], name='completions_goal_user_idx'),
            models.Index(fields=['completed_at'], name='completions_completed_idx'),
        ]
        ordering = ['-completed_at', '-id']
    
    def __str__(self):
        return f"{self.user.get_display_name()} completed {self.goal.name} at {self.completed_at}"
