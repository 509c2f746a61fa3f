from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class TransactionStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PAID = 'paid', 'Paid'


class FailureEvent(models.Model):
    """
    One logged failure by a member.

    Kept even when nobody else is in the group, so the member's own
    history of failures is complete.
    """
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    
    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.CASCADE,
        related_name='failures'
    )
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='failures'
    )
    
    description = models.TextField(blank=True)
    proof_photo_url = models.URLField(max_length=500, blank=True)
    
    # Snapshot of the distribution at the time of failure
    penalty_amount = models.DecimalField(max_digits=10, decimal_places=2)
    transactions_created = models.PositiveIntegerField(default=0)
    total_debt = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    
    # Client-supplied key making retries of the same report safe
    idempotency_key = models.CharField(max_length=64, null=True, blank=True)
    
    created_at = models.DateTimeField(auto_now_add=True)
    
    class Meta:
        db_table = 'failure_events'
        constraints = [
            models.UniqueConstraint(
                fields=['group', 'user', 'idempotency_key'],
                name='unique_failure_idempotency_key',
            ),
        ]
        indexes = [
            models.Index(fields=['group', 'created_at'], name='failures_group_created_idx'),
            models.Index(fields=['user', 'created_at'], name='failures_user_created_idx'),
        ]
        ordering = ['-created_at']
    
    def __str__(self):
        return f"{self.user.get_display_name()} failed in {self.group.name} ({self.total_debt})"


class Transaction(models.Model):
    """A directed debt: ``from_user`` owes ``amount`` to ``to_user``."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    
    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.CASCADE,
        related_name='transactions'
    )
    failure = models.ForeignKey(
        FailureEvent,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='transactions'
    )
    
    from_user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='debts'
    )
    to_user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='credits'
    )
    
    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    status = models.CharField(
        max_length=20,
        choices=TransactionStatus.choices,
        default=TransactionStatus.PENDING
    )
    
    description = models.TextField(blank=True)
    proof_photo_url = models.URLField(max_length=500, blank=True)
    
    # Settlement
    settled_at = models.DateTimeField(null=True, blank=True)
    settled_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='settled_transactions'
    )
    
    created_at = models.DateTimeField(auto_now_add=True)
    
    class Meta:
        db_table = 'transactions'
        constraints = [
            models.CheckConstraint(
                check=models.Q(amount__gt=0),
                name='transaction_amount_positive',
            ),
        ]
        indexes = [
            models.Index(fields=['group', 'status'], name='tx_group_status_idx'),
            models.Index(fields=['from_user', 'status'], name='tx_from_status_idx'),
            models.Index(fields=['to_user', 'status'], name='tx_to_status_idx'),
            models.Index(fields=['created_at'], name='tx_created_idx'),
        ]
        ordering = ['-created_at']
    
    def __str__(self):
        return (
            f"{self.from_user.get_display_name()} owes "
            f"{self.to_user.get_display_name()} {self.amount} ({self.status})"
        )
    
    @property
    def is_settled(self):
        return self.status == TransactionStatus.PAID
