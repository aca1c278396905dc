"""
Cascade service.

Group and subgroup deletion. The foreign keys from Subgroup and
GroupMember are PROTECT, so these functions are the only way to delete
either; dependents are always removed before the parent.
"""

import logging
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction

from apps.accounts.models import ChurchUser
from apps.groups.models import Group, Subgroup, GroupMember

from .access_policy import require_manage_groups, require_group_access
from .exceptions import GroupNotFoundError, SubgroupNotFoundError
from .leadership_sync import purge_group_leaderships, purge_subgroup_leaderships

logger = logging.getLogger(__name__)


@transaction.atomic
def delete_group(*, group_id: UUID, actor: ChurchUser) -> None:
    """
    Delete a group with its subgroups and memberships.

    Order: subgroup leaderships, memberships (attendance cascades with
    them), subgroups, group leaderships, then the group itself.
    Running it again after success raises GroupNotFoundError and changes
    nothing.

    Args:
        group_id: UUID of the group
        actor: Account performing the deletion

    Raises:
        InsufficientPermissionsError: If actor cannot manage groups
        GroupNotFoundError: If group doesn't exist in the actor's church
    """
    require_manage_groups(actor, "Only group administrators can delete groups")

    try:
        group = (
            Group.objects
            .select_for_update()
            .get(id=group_id, church_id=actor.church_id)
        )
    except (Group.DoesNotExist, ValidationError):
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    subgroup_ids = list(group.subgroups.values_list('id', flat=True))

    purge_subgroup_leaderships(subgroup_ids=subgroup_ids)
    member_count, _ = GroupMember.objects.filter(group=group).delete()
    Subgroup.objects.filter(id__in=subgroup_ids).delete()
    purge_group_leaderships(group_ids=[group.id])

    group.delete()

    logger.info(
        "Deleted group %s (%d subgroups, %d membership rows) by %s",
        group_id, len(subgroup_ids), member_count, actor.username,
    )


@transaction.atomic
def delete_subgroup(*, subgroup_id: UUID, actor: ChurchUser) -> None:
    """
    Delete a subgroup without removing anyone from the parent group.

    Memberships that pointed at the subgroup keep their group and get
    ``subgroup = None``.

    Raises:
        SubgroupNotFoundError: If subgroup doesn't exist in the actor's church
        InsufficientPermissionsError: If actor is neither an administrator
            nor a leader of the parent group
    """
    try:
        subgroup = (
            Subgroup.objects
            .select_for_update()
            .get(id=subgroup_id, church_id=actor.church_id)
        )
    except (Subgroup.DoesNotExist, ValidationError):
        raise SubgroupNotFoundError(f"Subgroup with ID {subgroup_id} not found")

    require_group_access(
        actor, subgroup.parent_group_id, "Not authorized to delete this subgroup"
    )

    detached = GroupMember.objects.filter(subgroup=subgroup).update(subgroup=None)
    purge_subgroup_leaderships(subgroup_ids=[subgroup.id])

    subgroup.delete()

    logger.info(
        "Deleted subgroup %s of group %s (%d members detached) by %s",
        subgroup_id, subgroup.parent_group_id, detached, actor.username,
    )
