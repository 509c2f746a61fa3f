"""
Penalty distribution service.

When a member logs a failure, they owe the group's penalty to every other
member. All rows and balance changes of one failure are written in a single
database transaction, with the group row locked so concurrent failures in
the same group are applied one after another.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from django.db import transaction, OperationalError
from django.db.models import F

from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership
from apps.groups.services.exceptions import GroupNotFoundError, NotMemberError
from apps.ledger.models import FailureEvent, Transaction

from .exceptions import LedgerStoreUnavailableError

logger = logging.getLogger(__name__)


@dataclass
class FailureResult:
    """Outcome of a logged failure."""

    failure: FailureEvent
    transactions_created: int
    total_debt: Decimal
    transactions: List[Transaction] = field(default_factory=list)
    replayed: bool = False

    @classmethod
    def from_event(cls, failure: FailureEvent, replayed: bool = False) -> 'FailureResult':
        return cls(
            failure=failure,
            transactions_created=failure.transactions_created,
            total_debt=failure.total_debt,
            transactions=list(failure.transactions.order_by('created_at', 'id')),
            replayed=replayed,
        )


def log_failure(
    *,
    group_id: UUID,
    user: User,
    description: str = '',
    proof_photo_url: str = '',
    idempotency_key: Optional[str] = None,
) -> FailureResult:
    """
    Record a failure and charge the group's penalty to the failing member.

    For a group penalty P and n other members, creates n pending
    transactions of P from the actor to each other member, lowers the
    actor's balance by P * n, raises every recipient's balance by P and
    increments the actor's failure count. A zero penalty or an otherwise
    empty group still records the failure and the count, without any
    transaction.

    Args:
        group_id: Group the failure happened in
        user: Member who failed
        description: Free text attached to the failure and its transactions
        proof_photo_url: URL of an already uploaded proof photo
        idempotency_key: Optional client key; replaying the same key
            returns the first result without writing anything

    Returns:
        FailureResult with the failure event and created transactions

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not a member of the group
        LedgerStoreUnavailableError: If the database could not commit
    """
    try:
        with transaction.atomic():
            return _apply_failure(
                group_id=group_id,
                user=user,
                description=description,
                proof_photo_url=proof_photo_url,
                idempotency_key=idempotency_key,
            )
    except OperationalError as e:
        logger.warning("Failure for user %s in group %s not recorded: %s", user.id, group_id, e)
        raise LedgerStoreUnavailableError("Ledger is temporarily unavailable, please retry") from e


def _apply_failure(*, group_id, user, description, proof_photo_url, idempotency_key):
    try:
        group = Group.objects.select_for_update().get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    try:
        actor = GroupMembership.objects.get(group=group, user=user)
    except GroupMembership.DoesNotExist:
        raise NotMemberError(f"User is not a member of {group.name}")

    if idempotency_key:
        existing = FailureEvent.objects.filter(
            group=group,
            user=user,
            idempotency_key=idempotency_key,
        ).first()
        if existing is not None:
            logger.info("Replayed failure %s for key %s", existing.id, idempotency_key)
            return FailureResult.from_event(existing, replayed=True)

    penalty = group.default_penalty_amount
    recipients = list(
        GroupMembership.objects
        .filter(group=group)
        .exclude(user=user)
        .order_by('joined_at', 'id')
    )
    # Transactions must carry a positive amount
    if penalty <= 0:
        recipients = []

    count = len(recipients)
    total_debt = penalty * count

    failure = FailureEvent.objects.create(
        group=group,
        user=user,
        description=description,
        proof_photo_url=proof_photo_url,
        penalty_amount=penalty,
        transactions_created=count,
        total_debt=total_debt,
        idempotency_key=idempotency_key or None,
    )

    transactions = Transaction.objects.bulk_create([
        Transaction(
            group=group,
            failure=failure,
            from_user=user,
            to_user_id=recipient.user_id,
            amount=penalty,
            description=description,
            proof_photo_url=proof_photo_url,
        )
        for recipient in recipients
    ])

    GroupMembership.objects.filter(pk=actor.pk).update(
        failure_count=F('failure_count') + 1,
        current_balance=F('current_balance') - total_debt,
    )
    if recipients:
        GroupMembership.objects.filter(
            pk__in=[recipient.pk for recipient in recipients]
        ).update(current_balance=F('current_balance') + penalty)

    logger.info(
        "User %s failed in group %s: %d transactions, total debt %s",
        user.id, group.id, count, total_debt
    )
    return FailureResult(
        failure=failure,
        transactions_created=count,
        total_debt=total_debt,
        transactions=transactions,
    )
