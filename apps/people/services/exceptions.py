"""Domain-specific exceptions for people services."""


class PeopleServiceError(Exception):
    """Base exception for people services."""
    pass


class PersonNotFoundError(PeopleServiceError):
    """Raised when person does not exist."""
    pass


class HouseholdNotFoundError(PeopleServiceError):
    """Raised when household does not exist."""
    pass


class EventNotFoundError(PeopleServiceError):
    """Raised when a newcomer is registered against an unknown event."""
    pass


class ProfileImageNotFoundError(PeopleServiceError):
    """Raised when a person has no stored profile image."""
    pass


class InvalidImageError(PeopleServiceError):
    """Raised when an upload is not an image or is too large."""
    pass


class PersonInUseError(PeopleServiceError):
    """Raised when a person is still referenced by an account or heads a household."""
    pass


class PeopleValidationError(PeopleServiceError):
    """Raised on malformed input such as an unknown gender."""
    pass
