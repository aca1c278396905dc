"""
Domain-specific exceptions for events app.

Caught in views and converted to HTTP responses.
"""


class EventsServiceError(Exception):
    """Base exception for all events service errors."""
    pass


class EventNotFoundError(EventsServiceError):
    """Raised when an event does not exist."""
    pass


class PersonNotFoundError(EventsServiceError):
    """Raised when the person to check in does not exist."""
    pass


class AlreadyCheckedInError(EventsServiceError):
    """Raised when a person is checked in to the same event twice."""
    pass


class CheckInNotAllowedError(EventsServiceError):
    """Raised when the actor may not check people in to this event."""
    pass


class EventValidationError(EventsServiceError):
    """Raised on invalid event data or search input."""
    pass
