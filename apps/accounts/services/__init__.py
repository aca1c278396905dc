"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    InvalidCredentialsError,
    InactiveAccountError,
    ChurchUserNotFoundError,
    AccountValidationError,
)
from .user_authentication import authenticate_user, issue_tokens
from .church_user_management import (
    get_church_user,
    list_church_users,
    create_church_user,
    update_church_user,
    delete_church_user,
    search_church_users,
    update_permissions,
)

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'ChurchUserNotFoundError',
    'AccountValidationError',
    # Services
    'authenticate_user',
    'issue_tokens',
    'get_church_user',
    'list_church_users',
    'create_church_user',
    'update_church_user',
    'delete_church_user',
    'search_church_users',
    'update_permissions',
]
