"""
Invite management service.

Handles group invite code operations with uniqueness guarantees.
"""

import secrets

from uuid import UUID

from django.db import transaction, IntegrityError

from apps.accounts.models import User
from apps.groups.models import Group

from .exceptions import (
    GroupNotFoundError,
    InsufficientPermissionsError,
    InvalidInviteCodeError,
)


@transaction.atomic
def regenerate_invite_code(
    *,
    group_id: UUID,
    user: User,
    max_retries: int = 5
) -> str:
    """
    Regenerate a group's invite code (owner only).

    The old code stops working immediately.

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If user is not the owner
        RuntimeError: If cannot generate unique code after retries
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
        raise InsufficientPermissionsError("Only the group owner can regenerate invite codes")

    for attempt in range(max_retries):
        new_code = secrets.token_urlsafe(12)[:16]

        try:
            # Savepoint so a collision does not poison the outer transaction
            with transaction.atomic():
                group.invite_code = new_code
                group.save(update_fields=['invite_code', 'updated_at'])
            return new_code
        except IntegrityError:
            if attempt == max_retries - 1:
                raise RuntimeError(
                    f"Failed to generate unique invite code after {max_retries} attempts"
                )
            continue

    raise RuntimeError("Unexpected error in invite code generation")


def get_group_by_invite_code(*, invite_code: str) -> Group:
    """
    Look up the group an invite code belongs to (join preview).

    Raises:
        InvalidInviteCodeError: If no group has this code
    """
    try:
        return Group.objects.select_related('created_by').get(invite_code=invite_code)
    except Group.DoesNotExist:
        raise InvalidInviteCodeError("Invalid invite code")
