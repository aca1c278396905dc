"""
Group management service.

Handles group CRUD operations. Deletion lives in cascade.py.
"""

import logging
from datetime import timedelta
from typing import Iterable, Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import ChurchUser
from apps.groups.models import Group, MeetingDay, MeetingFrequency

from .access_policy import require_manage_groups, require_group_access
from .exceptions import GroupNotFoundError, GroupValidationError
from .leadership_sync import sync_group_leaders

logger = logging.getLogger(__name__)

GROUP_FIELDS = (
    'name',
    'description',
    'purpose',
    'meeting_frequency',
    'custom_frequency',
    'meeting_day',
    'meeting_time',
    'meeting_location',
    'is_active',
)

NEW_GROUP_WINDOW = timedelta(days=30)


def validate_choice(value, choices, field: str) -> None:
    if value is not None and value not in choices.values:
        raise GroupValidationError(f"Invalid {field}: {value}")


def _clean_group_fields(fields: dict) -> dict:
    unknown = set(fields) - set(GROUP_FIELDS)
    if unknown:
        raise GroupValidationError(f"Unknown group field: {sorted(unknown)[0]}")

    if 'name' in fields and not (fields['name'] or '').strip():
        raise GroupValidationError("Group name is required")

    validate_choice(fields.get('meeting_frequency'), MeetingFrequency, 'meeting_frequency')
    validate_choice(fields.get('meeting_day'), MeetingDay, 'meeting_day')
    return fields


@transaction.atomic
def create_group(
    *,
    actor: ChurchUser,
    name: str,
    leader_ids: Optional[Iterable[UUID]] = None,
    **fields
) -> Group:
    """
    Create a group in the actor's church.

    Leaders given as person ids are mirrored onto their accounts'
    leadership lists.

    Raises:
        InsufficientPermissionsError: If actor cannot manage groups
        GroupValidationError: On missing name or unknown enum values
        PersonNotFoundError: If a leader id is unknown
    """
    require_manage_groups(actor, "Only group administrators can create groups")
    fields = _clean_group_fields({'name': name, **fields})

    group = Group.objects.create(
        created_by=actor,
        church_id=actor.church_id,
        **fields
    )

    if leader_ids:
        sync_group_leaders(group=group, person_ids=leader_ids)

    logger.info("Group %s (%s) created by %s", group.id, group.name, actor.username)
    return group


def get_group_by_id(*, group_id: UUID, actor: ChurchUser) -> Group:
    """
    Get a group by ID within the actor's church.

    Raises:
        GroupNotFoundError: If group doesn't exist or belongs to another church
    """
    try:
        return (
            Group.objects
            .prefetch_related('leaders', 'subgroups__leaders')
            .get(id=group_id, church_id=actor.church_id)
        )
    except (Group.DoesNotExist, ValidationError):
        raise GroupNotFoundError(f"Group with ID {group_id} not found")


@transaction.atomic
def update_group(
    *,
    group_id: UUID,
    actor: ChurchUser,
    leader_ids: Optional[Iterable[UUID]] = None,
    **fields
) -> Group:
    """
    Update group fields. Only fields passed in are touched.

    A ``leader_ids`` list replaces the leader set; ``None`` leaves it alone.

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If actor is not an administrator or a leader of the group
        GroupValidationError: On invalid field values
    """
    try:
        group = (
            Group.objects
            .select_for_update()
            .get(id=group_id, church_id=actor.church_id)
        )
    except (Group.DoesNotExist, ValidationError):
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    require_group_access(actor, group.id, "Not authorized to update this group")
    fields = _clean_group_fields(fields)

    for field, value in fields.items():
        setattr(group, field, value)
    group.save()

    if leader_ids is not None:
        sync_group_leaders(group=group, person_ids=leader_ids)

    return group


def list_groups(*, actor: ChurchUser) -> QuerySet[Group]:
    return (
        Group.objects
        .filter(church_id=actor.church_id)
        .prefetch_related('leaders')
        .order_by('name')
    )


def groups_by_interest(*, interest: str, actor: ChurchUser) -> QuerySet[Group]:
    """Active groups whose purpose mentions the interest (case-insensitive)."""
    return (
        Group.objects
        .filter(
            church_id=actor.church_id,
            is_active=True,
            purpose__icontains=interest,
        )
        .order_by('name')
    )


def group_stats(*, actor: ChurchUser) -> dict:
    """
    Counts for the groups dashboard.

    ``user_groups`` counts groups the actor's person belongs to or leads;
    ``new_groups`` counts groups created in the last 30 days.
    """
    groups = Group.objects.filter(church_id=actor.church_id)
    since = timezone.now() - NEW_GROUP_WINDOW

    user_groups = (
        groups.filter(memberships__person_id=actor.person_id)
        | groups.filter(leaders__id=actor.person_id)
    ).distinct().count()

    return {
        'total_groups': groups.count(),
        'active_groups': groups.filter(is_active=True).count(),
        'user_groups': user_groups,
        'new_groups': groups.filter(created_at__gte=since).count(),
    }
