"""
Subgroup management service.

Subgroup CRUD. A subgroup always has an existing parent group; deletion
lives in cascade.py.
"""

import logging
from typing import Iterable, Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import ChurchUser
from apps.groups.models import Group, Subgroup, MeetingDay

from .access_policy import require_group_access, require_subgroup_access
from .exceptions import GroupNotFoundError, SubgroupNotFoundError, GroupValidationError
from .group_management import validate_choice
from .leadership_sync import sync_subgroup_leaders

logger = logging.getLogger(__name__)

SUBGROUP_FIELDS = (
    'name',
    'description',
    'meeting_day',
    'meeting_time',
    'meeting_location',
    'is_active',
)


def _clean_subgroup_fields(fields: dict) -> dict:
    unknown = set(fields) - set(SUBGROUP_FIELDS)
    if unknown:
        raise GroupValidationError(f"Unknown subgroup field: {sorted(unknown)[0]}")

    if 'name' in fields and not (fields['name'] or '').strip():
        raise GroupValidationError("Subgroup name is required")

    validate_choice(fields.get('meeting_day'), MeetingDay, 'meeting_day')
    return fields


@transaction.atomic
def create_subgroup(
    *,
    parent_group_id: UUID,
    actor: ChurchUser,
    name: str,
    leader_ids: Optional[Iterable[UUID]] = None,
    **fields
) -> Subgroup:
    """
    Create a subgroup under an existing group.

    Args:
        parent_group_id: UUID of the parent group (must exist)
        actor: Account creating the subgroup
        name: Subgroup name
        leader_ids: Optional person ids to make leaders

    Raises:
        GroupNotFoundError: If the parent group doesn't exist
        InsufficientPermissionsError: If actor may not manage the parent group
        GroupValidationError: On invalid field values
    """
    try:
        parent = Group.objects.get(id=parent_group_id, church_id=actor.church_id)
    except (Group.DoesNotExist, ValidationError):
        raise GroupNotFoundError(f"Parent group with ID {parent_group_id} not found")

    require_group_access(actor, parent.id, "Not authorized to create subgroups for this group")
    fields = _clean_subgroup_fields({'name': name, **fields})

    subgroup = Subgroup.objects.create(
        parent_group=parent,
        created_by=actor,
        church_id=actor.church_id,
        **fields
    )

    if leader_ids:
        sync_subgroup_leaders(subgroup=subgroup, person_ids=leader_ids)

    logger.info("Subgroup %s created under group %s by %s", subgroup.id, parent.id, actor.username)
    return subgroup


def get_subgroup(*, subgroup_id: UUID, actor: ChurchUser) -> Subgroup:
    try:
        return (
            Subgroup.objects
            .select_related('parent_group')
            .prefetch_related('leaders')
            .get(id=subgroup_id, church_id=actor.church_id)
        )
    except (Subgroup.DoesNotExist, ValidationError):
        raise SubgroupNotFoundError(f"Subgroup with ID {subgroup_id} not found")


@transaction.atomic
def update_subgroup(
    *,
    subgroup_id: UUID,
    actor: ChurchUser,
    leader_ids: Optional[Iterable[UUID]] = None,
    **fields
) -> Subgroup:
    """Update subgroup fields; ``leader_ids`` replaces the leader set when given."""
    try:
        subgroup = (
            Subgroup.objects
            .select_for_update()
            .get(id=subgroup_id, church_id=actor.church_id)
        )
    except (Subgroup.DoesNotExist, ValidationError):
        raise SubgroupNotFoundError(f"Subgroup with ID {subgroup_id} not found")

    require_subgroup_access(actor, subgroup, "Not authorized to update this subgroup")
    fields = _clean_subgroup_fields(fields)

    for field, value in fields.items():
        setattr(subgroup, field, value)
    subgroup.save()

    if leader_ids is not None:
        sync_subgroup_leaders(subgroup=subgroup, person_ids=leader_ids)

    return subgroup


def list_subgroups(*, actor: ChurchUser, parent_group_id: Optional[UUID] = None) -> QuerySet[Subgroup]:
    queryset = (
        Subgroup.objects
        .filter(church_id=actor.church_id)
        .select_related('parent_group')
        .prefetch_related('leaders')
    )
    if parent_group_id is not None:
        queryset = queryset.filter(parent_group_id=parent_group_id)
    return queryset.order_by('name')
