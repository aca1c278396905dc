"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class InvalidCredentialsError(AccountsServiceError):
    """Raised when authentication credentials are invalid."""
    pass


class InactiveAccountError(AccountsServiceError):
    """Raised when account is deactivated."""
    pass


class ChurchUserNotFoundError(AccountsServiceError):
    """Raised when a church account does not exist."""
    pass


class AccountValidationError(AccountsServiceError):
    """Raised on a taken username, unknown role or unknown permission."""
    pass
