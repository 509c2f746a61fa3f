"""
Shared error taxonomy for service layers.

Every app's domain exceptions derive from one of the four kinds below so
views can tell apart a missing record, a forbidden action, a rule violation
and a store hiccup that is safe to retry.
"""


class ServiceError(Exception):
    """Base exception for all service-layer errors."""
    pass


class NotFoundError(ServiceError):
    """Referenced group, transaction or goal does not exist."""
    pass


class UnauthorizedError(ServiceError):
    """Acting user may not perform the operation on this record."""
    pass


class InvalidStateError(ServiceError):
    """Operation is not allowed in the record's current state."""
    pass


class TransientStoreError(ServiceError):
    """The store was unavailable or the atomic update could not commit."""
    pass
