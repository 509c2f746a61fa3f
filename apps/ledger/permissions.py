"""
Custom permission classes for ledger app.
"""
from rest_framework.permissions import BasePermission


class IsTransactionParty(BasePermission):
    """
    Permission to view a transaction.

    Allows access if:
    - User owes or is owed the amount
    - User created the transaction's group
    """

    message = 'You do not have permission to view this transaction.'

    def has_object_permission(self, request, view, obj):
        if request.user.id in (obj.from_user_id, obj.to_user_id):
            return True
        return obj.group.is_owner(request.user)
