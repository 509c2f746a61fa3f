"""
Services for accounts business logic.

Login is handled by simplejwt's token view; only sign-up needs a service.
"""

from .exceptions import AccountsServiceError, UserRegistrationError
from .user_registration import register_user

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    # Services
    'register_user',
]
