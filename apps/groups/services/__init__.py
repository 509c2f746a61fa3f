"""
Groups app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions and concurrency protection.
"""

from .exceptions import (
    GroupsServiceError,
    GroupNotFoundError,
    InvalidInviteCodeError,
    AlreadyMemberError,
    NotMemberError,
    OwnerCannotLeaveError,
    OutstandingBalanceError,
    NotGroupOwnerError,
    InsufficientPermissionsError,
)

from .group_management import (
    create_group,
    update_group,
    delete_group,
    get_group_by_id,
)

from .membership_management import (
    join_group,
    leave_group,
    get_group_members,
    get_membership,
)

from .invite_management import (
    regenerate_invite_code,
    get_group_by_invite_code,
)


__all__ = [
    # Exceptions
    'GroupsServiceError',
    'GroupNotFoundError',
    'InvalidInviteCodeError',
    'AlreadyMemberError',
    'NotMemberError',
    'OwnerCannotLeaveError',
    'OutstandingBalanceError',
    'NotGroupOwnerError',
    'InsufficientPermissionsError',

    # Group Management
    'create_group',
    'update_group',
    'delete_group',
    'get_group_by_id',

    # Membership Management
    'join_group',
    'leave_group',
    'get_group_members',
    'get_membership',

    # Invite Management
    'regenerate_invite_code',
    'get_group_by_invite_code',
]
