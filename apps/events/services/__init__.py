"""
Events app services layer.

Event CRUD and check-in logic.
"""

from .exceptions import (
    EventsServiceError,
    EventNotFoundError,
    PersonNotFoundError,
    AlreadyCheckedInError,
    CheckInNotAllowedError,
    EventValidationError,
)

from .event_management import (
    get_event,
    create_event,
    update_event,
    delete_event,
    list_events,
)

from .check_in import (
    can_check_in,
    check_in_person,
    get_event_attendance,
    search_attendees,
    get_newcomers,
)


__all__ = [
    # Exceptions
    'EventsServiceError',
    'EventNotFoundError',
    'PersonNotFoundError',
    'AlreadyCheckedInError',
    'CheckInNotAllowedError',
    'EventValidationError',

    # Event Management
    'get_event',
    'create_event',
    'update_event',
    'delete_event',
    'list_events',

    # Check-in
    'can_check_in',
    'check_in_person',
    'get_event_attendance',
    'search_attendees',
    'get_newcomers',
]
