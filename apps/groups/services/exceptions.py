"""
Domain-specific exceptions for groups app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class GroupsServiceError(Exception):
    """Base exception for all groups service errors."""
    pass


class NotFoundError(GroupsServiceError):
    """Base for a referenced record that does not exist or is out of scope."""
    pass


class GroupNotFoundError(NotFoundError):
    """Raised when a group does not exist or is inaccessible."""
    pass


class SubgroupNotFoundError(NotFoundError):
    """Raised when a subgroup does not exist or is inaccessible."""
    pass


class MemberNotFoundError(NotFoundError):
    """Raised when a group membership does not exist."""
    pass


class PersonNotFoundError(NotFoundError):
    """Raised when a person does not exist."""
    pass


class ChurchUserNotFoundError(NotFoundError):
    """Raised when a church user account does not exist."""
    pass


class DuplicateMembershipError(GroupsServiceError):
    """Raised when a person is already a member of the group."""
    pass


class InvalidSubgroupAssignmentError(GroupsServiceError):
    """Raised when a person has no membership in the subgroup's parent group."""
    pass


class SubgroupGroupMismatchError(GroupsServiceError):
    """Raised when a subgroup does not belong to the membership's group."""
    pass


class InsufficientPermissionsError(GroupsServiceError):
    """Raised when the actor may not perform the action."""
    pass


class GroupValidationError(GroupsServiceError):
    """Raised on malformed input (missing field, unknown enum value, bad range)."""
    pass
