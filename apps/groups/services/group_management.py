"""
Group management service.

Handles group CRUD operations with proper transaction safety.
"""

import logging
import secrets
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import Prefetch

from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, GroupRole

from .exceptions import (
    GroupNotFoundError,
    InsufficientPermissionsError,
    NotGroupOwnerError,
)

logger = logging.getLogger(__name__)


def create_group(
    *,
    name: str,
    created_by: User,
    description: str = '',
    default_penalty_amount: Optional[Decimal] = None,
    max_retries: int = 5
) -> Group:
    """
    Create a new group and add the creator as owner.

    This is a multi-step operation wrapped in a transaction:
    1. Generate unique invite code
    2. Create the group
    3. Create owner membership with a zero balance

    Args:
        name: Group name
        created_by: User who will own the group
        description: Optional group description
        default_penalty_amount: Penalty each other member receives when
            someone fails; falls back to PACT_DEFAULT_PENALTY_AMOUNT
        max_retries: Maximum attempts to generate unique invite code

    Returns:
        Created Group instance

    Raises:
        RuntimeError: If cannot generate unique invite code after retries
    """
    extra = {}
    if default_penalty_amount is not None:
        extra['default_penalty_amount'] = default_penalty_amount

    # Retry logic outside transaction to handle invite code collisions
    for attempt in range(max_retries):
        invite_code = secrets.token_urlsafe(12)[:16]

        try:
            with transaction.atomic():
                group = Group.objects.create(
                    name=name,
                    created_by=created_by,
                    description=description,
                    invite_code=invite_code,
                    **extra
                )

                GroupMembership.objects.create(
                    user=created_by,
                    group=group,
                    role=GroupRole.OWNER
                )

                logger.info("Group %s created by %s", group.id, created_by.id)
                return group

        except IntegrityError:
            # Invite code collision (very rare)
            if attempt == max_retries - 1:
                raise RuntimeError(
                    f"Failed to generate unique invite code after {max_retries} attempts"
                )
            continue

    raise RuntimeError("Unexpected error in group creation")


def get_group_by_id(*, group_id: UUID) -> Group:
    """
    Get a group by ID with its memberships prefetched.

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    try:
        return (
            Group.objects
            .select_related('created_by')
            .prefetch_related(
                Prefetch(
                    'memberships',
                    queryset=GroupMembership.objects.select_related('user')
                )
            )
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")


@transaction.atomic
def update_group(
    *,
    group_id: UUID,
    user: User,
    name: Optional[str] = None,
    description: Optional[str] = None,
    default_penalty_amount: Optional[Decimal] = None
) -> Group:
    """
    Update group details (owner only).

    Changing the penalty only affects failures logged afterwards; existing
    transactions keep the amount they were created with.

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If user is not the owner
    """
    try:
        group = (
            Group.objects
            .select_for_update()
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not group.is_owner(user):
        raise InsufficientPermissionsError("Only the group owner can update the group")

    update_fields = ['updated_at']

    if name is not None:
        group.name = name
        update_fields.append('name')

    if description is not None:
        group.description = description
        update_fields.append('description')

    if default_penalty_amount is not None:
        group.default_penalty_amount = default_penalty_amount
        update_fields.append('default_penalty_amount')

    group.save(update_fields=update_fields)

    return group


@transaction.atomic
def delete_group(*, group_id: UUID, user: User) -> None:
    """
    Delete a group (owner only).

    Cascading deletes will automatically remove:
    - All memberships
    - All goals and their completions
    - All transactions and failure records

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotGroupOwnerError: If user is not the owner
    """
    try:
        group = (
            Group.objects
            .select_for_update()
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not group.is_owner(user):
        raise NotGroupOwnerError("Only the group creator can delete this group")

    logger.info("Group %s deleted by %s", group.id, user.id)
    group.delete()
