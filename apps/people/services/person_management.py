"""
Person management service.

CRUD, search, newcomer registration, profile images and a person's
group overview.
"""

import logging
from typing import Iterable, Optional
from uuid import UUID

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q, QuerySet, ProtectedError
from django.utils import timezone

from apps.events.models import Event
from apps.groups.models import Group, Subgroup, GroupMember
from apps.people.models import Person, Gender

from .exceptions import (
    PersonNotFoundError,
    EventNotFoundError,
    ProfileImageNotFoundError,
    InvalidImageError,
    PersonInUseError,
    PeopleValidationError,
)

logger = logging.getLogger(__name__)

PERSON_FIELDS = (
    'first_name',
    'last_name',
    'date_of_birth',
    'gender',
    'phone',
    'email',
    'invited_by',
    'group_interests',
)

QUICK_SEARCH_MIN_LENGTH = 2
QUICK_SEARCH_LIMIT = 10


def _clean_person_fields(fields: dict) -> dict:
    unknown = set(fields) - set(PERSON_FIELDS)
    if unknown:
        raise PeopleValidationError(f"Unknown person field: {sorted(unknown)[0]}")

    for required in ('first_name', 'last_name'):
        if required in fields and not (fields[required] or '').strip():
            raise PeopleValidationError(f"{required} is required")

    if 'gender' in fields and fields['gender'] not in Gender.values:
        raise PeopleValidationError(f"Invalid gender: {fields['gender']}")

    if fields.get('group_interests') is not None:
        interests = fields['group_interests']
        if isinstance(interests, str):
            interests = [interests]
        fields['group_interests'] = [i.strip() for i in interests if i and i.strip()]

    return fields


def get_person(*, person_id: UUID) -> Person:
    try:
        return Person.objects.select_related('household').get(id=person_id)
    except (Person.DoesNotExist, ValidationError):
        raise PersonNotFoundError(f"Person with ID {person_id} not found")


@transaction.atomic
def create_person(*, first_name: str, last_name: str, gender: str, **fields) -> Person:
    """
    Create a person.

    Raises:
        PeopleValidationError: On missing names, unknown gender or fields
    """
    fields = _clean_person_fields({
        'first_name': first_name,
        'last_name': last_name,
        'gender': gender,
        **fields,
    })
    person = Person.objects.create(**fields)
    logger.info("Person %s created", person.id)
    return person


@transaction.atomic
def update_person(*, person_id: UUID, **fields) -> Person:
    """Update the given fields of a person; others are left unchanged."""
    try:
        person = Person.objects.select_for_update().get(id=person_id)
    except (Person.DoesNotExist, ValidationError):
        raise PersonNotFoundError(f"Person with ID {person_id} not found")

    for field, value in _clean_person_fields(fields).items():
        setattr(person, field, value)
    person.save()
    return person


@transaction.atomic
def delete_person(*, person_id: UUID) -> None:
    """
    Delete a person and all of their group memberships.

    Leader entries on groups and subgroups go with the person. A person
    linked to a church account, or heading a household, cannot be deleted.

    Raises:
        PersonNotFoundError: If person doesn't exist
        PersonInUseError: If the person is still referenced
    """
    person = get_person(person_id=person_id)

    removed, _ = GroupMember.objects.filter(person=person).delete()
    try:
        person.delete()
    except ProtectedError:
        raise PersonInUseError(
            "Person is linked to a church account or heads a household"
        )

    logger.info("Person %s deleted with %d membership rows", person_id, removed)


def search_people(
    *,
    search: Optional[str] = None,
    group_id: Optional[UUID] = None
) -> QuerySet[Person]:
    """
    Filter people for the paginated list.

    Args:
        search: Case-insensitive match on first name, last name or email
        group_id: Only people with a membership in this group

    Returns:
        QuerySet of Person, newest first
    """
    queryset = Person.objects.all()

    if search:
        queryset = queryset.filter(
            Q(first_name__icontains=search) |
            Q(last_name__icontains=search) |
            Q(email__icontains=search)
        )

    if group_id:
        queryset = queryset.filter(group_memberships__group_id=group_id)

    return queryset.distinct().order_by('-created_at')


def quick_search_people(*, query: str, exclude_group_id: Optional[UUID] = None) -> list:
    """
    Typeahead search used when picking people to add to a group.

    Queries shorter than two characters return nothing. When
    ``exclude_group_id`` is given, existing members of that group are left out.
    """
    if not query or len(query) < QUICK_SEARCH_MIN_LENGTH:
        return []

    queryset = search_people(search=query)
    if exclude_group_id:
        queryset = queryset.exclude(group_memberships__group_id=exclude_group_id)

    return list(queryset[:QUICK_SEARCH_LIMIT])


@transaction.atomic
def quick_register(
    *,
    first_name: str,
    last_name: str,
    gender: str,
    phone: str = '',
    invited_by: str = '',
    event_id: Optional[UUID] = None,
    group_interests: Optional[Iterable[str]] = None
) -> Person:
    """
    Register a newcomer, optionally against the event they first attended.

    Raises:
        EventNotFoundError: If event_id is given but unknown
        PeopleValidationError: On invalid fields
    """
    event = None
    if event_id:
        try:
            event = Event.objects.get(id=event_id)
        except (Event.DoesNotExist, ValidationError):
            raise EventNotFoundError(f"Event with ID {event_id} not found")

    fields = _clean_person_fields({
        'first_name': first_name,
        'last_name': last_name,
        'gender': gender,
        'phone': phone or '',
        'invited_by': invited_by or '',
        'group_interests': list(group_interests or []),
    })

    person = Person.objects.create(
        registered_event=event,
        registration_date=timezone.now(),
        **fields
    )
    logger.info("Newcomer %s registered (event %s)", person.id, event_id)
    return person


@transaction.atomic
def set_profile_image(*, person_id: UUID, upload) -> Person:
    """
    Store an uploaded image on the person.

    Args:
        person_id: UUID of the person
        upload: Django UploadedFile

    Raises:
        InvalidImageError: If the upload is not an image or exceeds PROFILE_IMAGE_MAX_BYTES
    """
    content_type = getattr(upload, 'content_type', '') or ''
    if not content_type.startswith('image/'):
        raise InvalidImageError("Not an image! Please upload only images.")
    if upload.size > settings.PROFILE_IMAGE_MAX_BYTES:
        raise InvalidImageError(
            f"Image exceeds the {settings.PROFILE_IMAGE_MAX_BYTES} byte limit"
        )

    try:
        person = Person.objects.select_for_update().get(id=person_id)
    except (Person.DoesNotExist, ValidationError):
        raise PersonNotFoundError(f"Person with ID {person_id} not found")

    person.profile_image = upload.read()
    person.profile_image_content_type = content_type
    person.save(update_fields=['profile_image', 'profile_image_content_type', 'updated_at'])
    return person


def get_profile_image(*, person_id: UUID) -> tuple:
    """
    Returns:
        ``(bytes, content_type)``

    Raises:
        ProfileImageNotFoundError: If the person or the image is missing
    """
    person = Person.objects.filter(id=person_id).only(
        'profile_image', 'profile_image_content_type'
    ).first()
    if person is None or not person.profile_image:
        raise ProfileImageNotFoundError("No image found")
    return bytes(person.profile_image), person.profile_image_content_type


def get_person_groups(*, person_id: UUID) -> dict:
    """
    Groups a person takes part in.

    Returns:
        Dict with ``as_member`` (GroupMember list), ``as_leader`` (Group list)
        and ``as_subgroup_leader`` (Subgroup list)
    """
    person = get_person(person_id=person_id)

    return {
        'as_member': list(
            GroupMember.objects
            .filter(person=person)
            .select_related('group', 'subgroup')
            .order_by('created_at')
        ),
        'as_leader': list(Group.objects.filter(leaders=person).order_by('name')),
        'as_subgroup_leader': list(
            Subgroup.objects.filter(leaders=person).select_related('parent_group').order_by('name')
        ),
    }
