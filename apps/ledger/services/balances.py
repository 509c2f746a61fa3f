"""
Balance queries.

Read-only views over memberships and transactions. Balances are never
netted across groups; the net balance is a plain sum.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from django.db.models import Q, QuerySet, Sum

from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership
from apps.groups.services.exceptions import GroupNotFoundError, NotMemberError
from apps.ledger.models import FailureEvent, Transaction, TransactionStatus

ZERO = Decimal('0.00')


@dataclass(frozen=True)
class GroupBalance:
    group: Group
    balance: Decimal
    failure_count: int


def get_net_balance(*, user: User) -> Decimal:
    """Sum of the user's balances over every group they belong to."""
    total = (
        GroupMembership.objects
        .filter(user=user)
        .aggregate(total=Sum('current_balance'))['total']
    )
    return total if total is not None else ZERO


def get_group_balances(*, user: User) -> List[GroupBalance]:
    """One entry per membership of the user, oldest membership first."""
    memberships = (
        GroupMembership.objects
        .filter(user=user)
        .select_related('group')
        .order_by('joined_at')
    )
    return [
        GroupBalance(
            group=m.group,
            balance=m.current_balance,
            failure_count=m.failure_count,
        )
        for m in memberships
    ]


def _pending(group_id: Optional[UUID]) -> QuerySet[Transaction]:
    qs = Transaction.objects.filter(status=TransactionStatus.PENDING)
    if group_id:
        qs = qs.filter(group_id=group_id)
    return qs.select_related('group', 'from_user', 'to_user')


def get_pending_debts(*, user: User, group_id: Optional[UUID] = None) -> QuerySet[Transaction]:
    """Pending transactions the user has to pay."""
    return _pending(group_id).filter(from_user=user)


def get_pending_credits(*, user: User, group_id: Optional[UUID] = None) -> QuerySet[Transaction]:
    """Pending transactions owed to the user."""
    return _pending(group_id).filter(to_user=user)


def get_balance_with_user(
    *,
    user: User,
    other_user_id: UUID,
    group_id: Optional[UUID] = None,
) -> Decimal:
    """
    What ``other_user_id`` owes ``user`` in pending transactions, minus
    what ``user`` owes them. Positive means the other user owes money.
    """
    owed_to_me = (
        get_pending_credits(user=user, group_id=group_id)
        .filter(from_user_id=other_user_id)
        .aggregate(total=Sum('amount'))['total']
    ) or ZERO
    i_owe = (
        get_pending_debts(user=user, group_id=group_id)
        .filter(to_user_id=other_user_id)
        .aggregate(total=Sum('amount'))['total']
    ) or ZERO
    return owed_to_me - i_owe


def get_user_transactions(
    *,
    user: User,
    group_id: Optional[UUID] = None,
    status: Optional[str] = None,
) -> QuerySet[Transaction]:
    """Transactions the user is a party to, newest first."""
    qs = Transaction.objects.filter(Q(from_user=user) | Q(to_user=user))
    if group_id:
        qs = qs.filter(group_id=group_id)
    if status:
        qs = qs.filter(status=status)
    return qs.select_related('group', 'from_user', 'to_user', 'settled_by').order_by('-created_at')


def get_shame_leaderboard(*, group_id: UUID, user: User) -> QuerySet[GroupMembership]:
    """
    Members of a group ranked by failures, most first.

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not a member
    """
    _require_member(group_id=group_id, user=user)
    return (
        GroupMembership.objects
        .filter(group_id=group_id)
        .select_related('user')
        .order_by('-failure_count', 'joined_at')
    )


def get_group_failures(*, group_id: UUID, user: User) -> QuerySet[FailureEvent]:
    """
    Failures logged in a group, newest first.

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not a member
    """
    _require_member(group_id=group_id, user=user)
    return (
        FailureEvent.objects
        .filter(group_id=group_id)
        .select_related('user')
        .order_by('-created_at')
    )


def find_unbalanced_groups(*, group_id: Optional[UUID] = None) -> Dict[UUID, Decimal]:
    """
    Groups whose member balances do not sum to zero, mapped to that sum.

    An empty result means every checked group's ledger is closed.
    """
    qs = GroupMembership.objects.all()
    if group_id:
        qs = qs.filter(group_id=group_id)
    totals = qs.values('group_id').annotate(total=Sum('current_balance'))
    return {
        row['group_id']: row['total']
        for row in totals
        if row['total'] != 0
    }


def _require_member(*, group_id, user):
    if not GroupMembership.objects.filter(group_id=group_id, user=user).exists():
        if not Group.objects.filter(id=group_id).exists():
            raise GroupNotFoundError(f"Group with ID {group_id} not found")
        raise NotMemberError("User is not a member of this group")
