"""
People app services layer.

Person and household business logic. Views call these functions and
translate their exceptions into HTTP responses.
"""

from .exceptions import (
    PeopleServiceError,
    PersonNotFoundError,
    HouseholdNotFoundError,
    EventNotFoundError,
    ProfileImageNotFoundError,
    InvalidImageError,
    PersonInUseError,
    PeopleValidationError,
)

from .person_management import (
    get_person,
    create_person,
    update_person,
    delete_person,
    search_people,
    quick_search_people,
    quick_register,
    set_profile_image,
    get_profile_image,
    get_person_groups,
)

from .household_management import (
    create_household,
    get_household,
    list_households,
    update_household,
    delete_household,
)


__all__ = [
    # Exceptions
    'PeopleServiceError',
    'PersonNotFoundError',
    'HouseholdNotFoundError',
    'EventNotFoundError',
    'ProfileImageNotFoundError',
    'InvalidImageError',
    'PersonInUseError',
    'PeopleValidationError',

    # Person Management
    'get_person',
    'create_person',
    'update_person',
    'delete_person',
    'search_people',
    'quick_search_people',
    'quick_register',
    'set_profile_image',
    'get_profile_image',
    'get_person_groups',

    # Household Management
    'create_household',
    'get_household',
    'list_households',
    'update_household',
    'delete_household',
]
