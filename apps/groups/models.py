# ==========================================
# apps/groups/models.py
# ==========================================

from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Sum
import uuid
import secrets


def default_penalty_amount():
    return settings.PACT_DEFAULT_PENALTY_AMOUNT


class GroupRole(models.TextChoices):
    OWNER = 'owner', 'Owner'
    MEMBER = 'member', 'Member'


class Group(models.Model):
    """A pact group whose members owe each other penalties on failure."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    default_penalty_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=default_penalty_amount,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    invite_code = models.CharField(max_length=16, unique=True, db_index=True, editable=False)
    created_by = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='created_groups')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    
    class Meta:
        db_table = 'groups'
        indexes = [
            models.Index(fields=['created_by', 'created_at'], name='groups_creator_created_idx'),
        ]
        ordering = ['-created_at']
    
    def __str__(self):
        return self.name
    
    def save(self, *args, **kwargs):
        if not self.invite_code:
            self.invite_code = secrets.token_urlsafe(12)[:16]
        super().save(*args, **kwargs)
    
    def has_member(self, user):
        return self.memberships.filter(user=user).exists()
    
    def get_membership(self, user):
        try:
            return self.memberships.get(user=user)
        except GroupMembership.DoesNotExist:
            return None
    
    def is_owner(self, user):
        return self.created_by_id == getattr(user, 'id', None)
    
    def balance_total(self):
        """Sum of all member balances; zero for a consistent ledger."""
        total = self.memberships.aggregate(total=Sum('current_balance'))['total']
        return total or Decimal('0.00')


class GroupMembership(models.Model):
    """
    A user's participation in one group.

    ``current_balance`` is a running total: positive means the group owes
    this member, negative means the member owes the group. It and
    ``failure_count`` are written only by the ledger services.
    """
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='group_memberships')
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name='memberships')
    role = models.CharField(max_length=20, choices=GroupRole.choices, default=GroupRole.MEMBER)
    current_balance = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    failure_count = models.PositiveIntegerField(default=0)
    joined_at = models.DateTimeField(auto_now_add=True)
    
    class Meta:
        db_table = 'group_members'
        unique_together = [['user', 'group']]
        indexes = [
            models.Index(fields=['group', 'failure_count'], name='members_group_failures_idx'),
            models.Index(fields=['user', 'joined_at'], name='members_user_joined_idx'),
        ]
        ordering = ['joined_at']
    
    def __str__(self):
        return f"{self.user.get_display_name()} in {self.group.name} ({self.current_balance})"
    
    def save(self, *args, **kwargs):
        if self.group.created_by_id == self.user_id:
            self.role = GroupRole.OWNER
        super().save(*args, **kwargs)
