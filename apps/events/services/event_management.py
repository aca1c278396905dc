"""
Event management service.

CRUD for events plus the filtered list used by the paginated endpoint.
Recurrence settings are stored as entered.
"""

import datetime
import logging
from typing import Iterable, Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, QuerySet

from apps.accounts.models import ChurchUser
from apps.events.models import Event, EventStatus, RecurringFrequency

from .exceptions import EventNotFoundError, EventValidationError

logger = logging.getLogger(__name__)

EVENT_FIELDS = (
    'name',
    'description',
    'start_datetime',
    'end_datetime',
    'status',
    'is_recurring',
    'recurring_frequency',
    'recurring_days',
    'recurring_end_date',
)


def _clean_event_fields(fields: dict) -> dict:
    unknown = set(fields) - set(EVENT_FIELDS)
    if unknown:
        raise EventValidationError(f"Unknown event field: {sorted(unknown)[0]}")

    if 'name' in fields and not (fields['name'] or '').strip():
        raise EventValidationError("name is required")
    if 'status' in fields and fields['status'] not in EventStatus.values:
        raise EventValidationError(f"Invalid status: {fields['status']}")
    if fields.get('recurring_frequency') and fields['recurring_frequency'] not in RecurringFrequency.values:
        raise EventValidationError(f"Invalid recurring_frequency: {fields['recurring_frequency']}")

    return fields


def _check_window(event: Event) -> None:
    if event.end_datetime < event.start_datetime:
        raise EventValidationError("end_datetime must not be before start_datetime")


def _staff(user_ids: Iterable) -> list:
    ids = {UUID(str(pk)) for pk in user_ids}
    users = list(ChurchUser.objects.filter(id__in=ids))
    if len(users) != len(ids):
        raise EventValidationError("Unknown church user in staff list")
    return users


def get_event(*, event_id: UUID) -> Event:
    try:
        return (
            Event.objects
            .prefetch_related('event_in_charge', 'check_in_in_charge')
            .annotate(attendance_count=Count('check_ins'))
            .get(id=event_id)
        )
    except (Event.DoesNotExist, ValidationError):
        raise EventNotFoundError(f"Event with ID {event_id} not found")


@transaction.atomic
def create_event(
    *,
    name: str,
    start_datetime: datetime.datetime,
    end_datetime: datetime.datetime,
    event_in_charge_ids: Optional[Iterable[UUID]] = None,
    check_in_in_charge_ids: Optional[Iterable[UUID]] = None,
    **fields
) -> Event:
    """
    Create an event.

    Raises:
        EventValidationError: On a bad time window, status or staff list
    """
    fields = _clean_event_fields({
        'name': name,
        'start_datetime': start_datetime,
        'end_datetime': end_datetime,
        **fields,
    })
    event = Event(**fields)
    _check_window(event)
    event.save()

    if event_in_charge_ids:
        event.event_in_charge.set(_staff(event_in_charge_ids))
    if check_in_in_charge_ids:
        event.check_in_in_charge.set(_staff(check_in_in_charge_ids))

    logger.info("Event %s created (%s)", event.id, event.name)
    return get_event(event_id=event.id)


@transaction.atomic
def update_event(
    *,
    event_id: UUID,
    event_in_charge_ids: Optional[Iterable[UUID]] = None,
    check_in_in_charge_ids: Optional[Iterable[UUID]] = None,
    **fields
) -> Event:
    """Update the given fields; staff lists are replaced when given."""
    try:
        event = Event.objects.select_for_update().get(id=event_id)
    except (Event.DoesNotExist, ValidationError):
        raise EventNotFoundError(f"Event with ID {event_id} not found")

    for field, value in _clean_event_fields(fields).items():
        setattr(event, field, value)
    _check_window(event)
    event.save()

    if event_in_charge_ids is not None:
        event.event_in_charge.set(_staff(event_in_charge_ids))
    if check_in_in_charge_ids is not None:
        event.check_in_in_charge.set(_staff(check_in_in_charge_ids))

    return get_event(event_id=event.id)


@transaction.atomic
def delete_event(*, event_id: UUID) -> None:
    """Delete an event with its check-ins. Newcomers keep their record."""
    event = get_event(event_id=event_id)
    event.delete()
    logger.info("Event %s deleted", event_id)


def list_events(
    *,
    status: Optional[str] = None,
    start_date: Optional[datetime.date] = None,
    end_date: Optional[datetime.date] = None
) -> QuerySet[Event]:
    """
    Events newest first, filtered on status and on the start date range.

    Both date bounds are inclusive.
    """
    queryset = Event.objects.prefetch_related('event_in_charge', 'check_in_in_charge')

    if status:
        queryset = queryset.filter(status=status)
    if start_date:
        queryset = queryset.filter(start_datetime__date__gte=start_date)
    if end_date:
        queryset = queryset.filter(start_datetime__date__lte=end_date)

    return queryset.annotate(attendance_count=Count('check_ins')).order_by('-start_datetime')
