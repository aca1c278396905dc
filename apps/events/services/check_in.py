"""
Check-in service.

Records event attendance, one check-in per person per event, and
supports the check-in desk's phone lookup.
"""

import logging
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import QuerySet

from apps.accounts.models import ChurchUser, Permission
from apps.events.models import Event, CheckIn
from apps.people.models import Person

from .event_management import get_event
from .exceptions import (
    PersonNotFoundError,
    AlreadyCheckedInError,
    CheckInNotAllowedError,
    EventValidationError,
)

logger = logging.getLogger(__name__)


def can_check_in(actor: ChurchUser, event: Event) -> bool:
    """Admins, holders of perform_check_in and the event's check-in staff."""
    if actor.is_admin or actor.has_permission(Permission.PERFORM_CHECK_IN):
        return True
    return event.is_check_in_staff(actor)


@transaction.atomic
def check_in_person(*, event_id: UUID, person_id: UUID, actor: ChurchUser) -> CheckIn:
    """
    Check a person in to an event.

    Raises:
        EventNotFoundError: If the event doesn't exist
        CheckInNotAllowedError: If the actor may not check people in here
        PersonNotFoundError: If the person doesn't exist
        AlreadyCheckedInError: If the person is already checked in
    """
    event = get_event(event_id=event_id)

    if not can_check_in(actor, event):
        raise CheckInNotAllowedError("Not authorized to check people in to this event")

    try:
        person = Person.objects.get(id=person_id)
    except (Person.DoesNotExist, ValidationError):
        raise PersonNotFoundError(f"Person with ID {person_id} not found")

    if CheckIn.objects.filter(event=event, person=person).exists():
        raise AlreadyCheckedInError("Person already checked in")

    try:
        with transaction.atomic():
            check_in = CheckIn.objects.create(event=event, person=person, checked_in_by=actor)
    except IntegrityError:
        raise AlreadyCheckedInError("Person already checked in")

    logger.info("Checked %s in to event %s by %s", person.id, event.id, actor.username)
    return check_in


def get_event_attendance(*, event_id: UUID) -> QuerySet[CheckIn]:
    """Check-ins for an event, latest first."""
    event = get_event(event_id=event_id)
    return (
        CheckIn.objects
        .filter(event=event)
        .select_related('person', 'checked_in_by__person')
        .order_by('-check_in_time')
    )


def search_attendees(*, event_id: UUID, phone: str) -> list:
    """
    Find people by phone, expanded to everyone in their households.

    Returns:
        List of Person, each annotated with ``checked_in`` for this event
    """
    if not phone or not phone.strip():
        raise EventValidationError("Phone number is required")

    event = get_event(event_id=event_id)

    matches = list(Person.objects.filter(phone__icontains=phone.strip()))
    household_ids = {p.household_id for p in matches if p.household_id}

    people = {p.id: p for p in matches}
    if household_ids:
        for member in Person.objects.filter(household_id__in=household_ids):
            people.setdefault(member.id, member)

    checked_in = set(
        CheckIn.objects.filter(event=event, person_id__in=people.keys())
        .values_list('person_id', flat=True)
    )
    result = sorted(people.values(), key=lambda p: (p.last_name, p.first_name))
    for person in result:
        person.checked_in = person.id in checked_in
    return result


def get_newcomers(*, event_id: UUID) -> QuerySet[Person]:
    """People registered as newcomers at this event."""
    event = get_event(event_id=event_id)
    return Person.objects.filter(registered_event=event).order_by('-registration_date')
