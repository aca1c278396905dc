"""
Household management service.

Keeps Person.household pointing at the household that lists the person
as head, spouse or child.
"""

import logging
from typing import Iterable, Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet

from apps.people.models import Household, Person

from .exceptions import HouseholdNotFoundError, PersonNotFoundError, PeopleValidationError

logger = logging.getLogger(__name__)

_UNSET = object()

ADDRESS_FIELDS = ('street', 'city', 'state', 'zip_code', 'primary_phone', 'family_image')


def _get_person(person_id) -> Person:
    try:
        return Person.objects.get(id=person_id)
    except (Person.DoesNotExist, ValidationError):
        raise PersonNotFoundError(f"Person with ID {person_id} not found")


def _get_people(person_ids: Iterable) -> list:
    ids = {UUID(str(pid)) for pid in person_ids}
    people = list(Person.objects.filter(id__in=ids))
    if len(people) != len(ids):
        missing = ids - {p.id for p in people}
        raise PersonNotFoundError(f"Person with ID {sorted(str(m) for m in missing)[0]} not found")
    return people


def _sync_member_links(household: Household) -> None:
    """Point listed people at the household and unlink anyone no longer listed."""
    member_ids = household.member_ids()
    Person.objects.filter(household=household).exclude(id__in=member_ids).update(household=None)
    Person.objects.filter(id__in=member_ids).update(household=household)


def _clean_address(fields: dict) -> dict:
    unknown = set(fields) - set(ADDRESS_FIELDS)
    if unknown:
        raise PeopleValidationError(f"Unknown household field: {sorted(unknown)[0]}")
    if 'primary_phone' in fields and not (fields['primary_phone'] or '').strip():
        raise PeopleValidationError("primary_phone is required")
    return fields


@transaction.atomic
def create_household(
    *,
    head_of_household_id: UUID,
    primary_phone: str,
    spouse_id: Optional[UUID] = None,
    child_ids: Optional[Iterable[UUID]] = None,
    **fields
) -> Household:
    """
    Create a household and link its members to it.

    Raises:
        PersonNotFoundError: If head, spouse or a child doesn't exist
        PeopleValidationError: On missing primary phone or unknown fields
    """
    fields = _clean_address({'primary_phone': primary_phone, **fields})

    household = Household.objects.create(
        head_of_household=_get_person(head_of_household_id),
        spouse=_get_person(spouse_id) if spouse_id else None,
        **fields
    )
    if child_ids:
        household.children.set(_get_people(child_ids))

    _sync_member_links(household)
    logger.info("Household %s created", household.id)
    return household


def get_household(*, household_id: UUID) -> Household:
    try:
        return (
            Household.objects
            .select_related('head_of_household', 'spouse')
            .prefetch_related('children')
            .get(id=household_id)
        )
    except (Household.DoesNotExist, ValidationError):
        raise HouseholdNotFoundError(f"Household with ID {household_id} not found")


def list_households() -> QuerySet[Household]:
    return (
        Household.objects
        .select_related('head_of_household', 'spouse')
        .prefetch_related('children')
        .order_by('-created_at')
    )


@transaction.atomic
def update_household(
    *,
    household_id: UUID,
    head_of_household_id: Optional[UUID] = None,
    spouse_id=_UNSET,
    child_ids: Optional[Iterable[UUID]] = None,
    **fields
) -> Household:
    """
    Update a household and re-link its members.

    ``spouse_id=None`` clears the spouse; leaving it out keeps it.
    ``child_ids`` replaces the children list when given.
    """
    try:
        household = Household.objects.select_for_update().get(id=household_id)
    except (Household.DoesNotExist, ValidationError):
        raise HouseholdNotFoundError(f"Household with ID {household_id} not found")

    for field, value in _clean_address(fields).items():
        setattr(household, field, value)

    if head_of_household_id:
        household.head_of_household = _get_person(head_of_household_id)
    if spouse_id is not _UNSET:
        household.spouse = _get_person(spouse_id) if spouse_id else None
    household.save()

    if child_ids is not None:
        household.children.set(_get_people(child_ids))

    _sync_member_links(household)
    return household


@transaction.atomic
def delete_household(*, household_id: UUID) -> None:
    """Delete a household; its members stay, unlinked."""
    household = get_household(household_id=household_id)
    Person.objects.filter(household=household).update(household=None)
    household.delete()
    logger.info("Household %s deleted", household_id)
