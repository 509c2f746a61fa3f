"""
Membership management service.

Handles group membership operations with concurrency protection.
"""

import logging
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import Q, QuerySet

from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, GroupRole

from .exceptions import (
    GroupNotFoundError,
    InvalidInviteCodeError,
    AlreadyMemberError,
    NotMemberError,
    OwnerCannotLeaveError,
    OutstandingBalanceError,
)

logger = logging.getLogger(__name__)


@transaction.atomic
def join_group(*, invite_code: str, user: User) -> GroupMembership:
    """
    Join a group using its invite code.

    Uses row-level locking to prevent race conditions when checking
    and creating memberships.

    Args:
        invite_code: Invite code shared by a member
        user: User joining the group

    Returns:
        Created GroupMembership instance with a zero balance

    Raises:
        InvalidInviteCodeError: If no group has this invite code
        AlreadyMemberError: If user is already a member
    """
    try:
        group = (
            Group.objects
            .select_for_update()
            .get(invite_code=invite_code)
        )
    except Group.DoesNotExist:
        raise InvalidInviteCodeError("Invalid invite code")

    if group.has_member(user):
        raise AlreadyMemberError(f"User is already a member of {group.name}")

    try:
        membership = GroupMembership.objects.create(
            user=user,
            group=group,
            role=GroupRole.MEMBER
        )
    except IntegrityError:
        # Database constraint caught duplicate membership
        raise AlreadyMemberError(f"User is already a member of {group.name}")

    logger.info("User %s joined group %s", user.id, group.id)
    return membership


@transaction.atomic
def leave_group(*, group_id: UUID, user: User) -> None:
    """
    Leave a group.

    A member may only leave with a settled ledger: zero balance and no
    pending transactions in either direction. Otherwise a later settlement
    would only find one of its two parties. The owner cannot leave; they
    delete the group instead.

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not a member
        OwnerCannotLeaveError: If user is the owner
        OutstandingBalanceError: If the member still owes or is owed money
    """
    from apps.ledger.models import Transaction, TransactionStatus

    try:
        group = Group.objects.select_for_update().get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if group.is_owner(user):
        raise OwnerCannotLeaveError(
            "Group owner cannot leave. Delete the group instead."
        )

    try:
        membership = (
            GroupMembership.objects
            .select_for_update()
            .get(user=user, group=group)
        )
    except GroupMembership.DoesNotExist:
        raise NotMemberError(f"User is not a member of {group.name}")

    balance = membership.current_balance
    if balance < 0:
        raise OutstandingBalanceError(
            f"You owe {abs(balance):.2f} to other members. "
            "Please settle your debts before leaving."
        )
    if balance > 0:
        raise OutstandingBalanceError(
            f"Other members owe you {balance:.2f}. "
            "Please have them settle before you leave."
        )

    has_open_transactions = Transaction.objects.filter(
        Q(from_user=user) | Q(to_user=user),
        group=group,
        status=TransactionStatus.PENDING,
    ).exists()
    if has_open_transactions:
        raise OutstandingBalanceError(
            "You still have pending transactions in this group."
        )

    membership.delete()
    logger.info("User %s left group %s", user.id, group.id)


def get_group_members(*, group_id: UUID) -> QuerySet[GroupMembership]:
    """
    Get all members of a group with their balances.

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    if not Group.objects.filter(id=group_id).exists():
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    return (
        GroupMembership.objects
        .filter(group_id=group_id)
        .select_related('user')
        .order_by('joined_at')
    )


def get_membership(*, group_id: UUID, user: User) -> GroupMembership:
    """
    Return the user's membership in a group.

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not a member
    """
    try:
        return GroupMembership.objects.select_related('group').get(
            group_id=group_id,
            user=user
        )
    except GroupMembership.DoesNotExist:
        if not Group.objects.filter(id=group_id).exists():
            raise GroupNotFoundError(f"Group with ID {group_id} not found")
        raise NotMemberError("User is not a member of this group")
