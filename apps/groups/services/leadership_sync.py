"""
Leadership sync service.

Keeps Group.leaders / Subgroup.leaders (people) mirrored with
ChurchUser.group_leaderships / subgroup_leaderships (accounts).
This module is the only writer of either side of the mirror.

Every operation is idempotent: M2M ``add``/``remove`` are no-ops when the
row already exists or is already gone, so re-running after a failure
converges to the same end state.
"""

import logging
from typing import Iterable
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction

from apps.accounts.models import ChurchUser
from apps.groups.models import Group, Subgroup
from apps.people.models import Person

from .access_policy import require_manage_groups, require_subgroup_access
from .exceptions import (
    ChurchUserNotFoundError,
    GroupNotFoundError,
    SubgroupNotFoundError,
    PersonNotFoundError,
)

logger = logging.getLogger(__name__)


def _get_church_user(church_user_id, actor) -> ChurchUser:
    try:
        return (
            ChurchUser.objects
            .select_related('person')
            .get(id=church_user_id, church_id=actor.church_id)
        )
    except (ChurchUser.DoesNotExist, ValidationError):
        raise ChurchUserNotFoundError(f"User with ID {church_user_id} not found")


def _get_group(group_id, actor) -> Group:
    try:
        return Group.objects.get(id=group_id, church_id=actor.church_id)
    except (Group.DoesNotExist, ValidationError):
        raise GroupNotFoundError(f"Group with ID {group_id} not found")


def _get_subgroup(subgroup_id, actor) -> Subgroup:
    try:
        return Subgroup.objects.get(id=subgroup_id, church_id=actor.church_id)
    except (Subgroup.DoesNotExist, ValidationError):
        raise SubgroupNotFoundError(f"Subgroup with ID {subgroup_id} not found")


def _resolve_people(person_ids: Iterable) -> list:
    ids = {UUID(str(pid)) for pid in person_ids}
    people = list(Person.objects.filter(id__in=ids))
    missing = ids - {p.id for p in people}
    if missing:
        raise PersonNotFoundError(
            f"Person with ID {sorted(str(m) for m in missing)[0]} not found"
        )
    return people


@transaction.atomic
def assign_group_leadership(*, church_user_id: UUID, group_id: UUID, actor: ChurchUser) -> ChurchUser:
    """
    Make an account a leader of a group.

    Adds the account's person to ``Group.leaders`` and the group to the
    account's ``group_leaderships``. Assigning twice changes nothing.

    Raises:
        InsufficientPermissionsError: If actor cannot manage groups
        ChurchUserNotFoundError: If the account doesn't exist
        GroupNotFoundError: If the group doesn't exist
    """
    require_manage_groups(actor, "Only group administrators can assign group leaders")

    user = _get_church_user(church_user_id, actor)
    group = _get_group(group_id, actor)

    group.leaders.add(user.person)
    user.group_leaderships.add(group)

    logger.info("Assigned %s as leader of group %s", user.username, group.id)
    return user


@transaction.atomic
def remove_group_leadership(*, church_user_id: UUID, group_id: UUID, actor: ChurchUser) -> ChurchUser:
    """Symmetric inverse of assign_group_leadership."""
    require_manage_groups(actor, "Only group administrators can remove group leaders")

    user = _get_church_user(church_user_id, actor)
    group = _get_group(group_id, actor)

    group.leaders.remove(user.person)
    user.group_leaderships.remove(group)

    logger.info("Removed %s as leader of group %s", user.username, group.id)
    return user


@transaction.atomic
def assign_subgroup_leadership(*, church_user_id: UUID, subgroup_id: UUID, actor: ChurchUser) -> ChurchUser:
    """
    Make an account a leader of a subgroup.

    Allowed for group administrators and leaders of the parent group or
    the subgroup itself.
    """
    user = _get_church_user(church_user_id, actor)
    subgroup = _get_subgroup(subgroup_id, actor)

    require_subgroup_access(actor, subgroup, "Not authorized to assign leaders for this subgroup")

    subgroup.leaders.add(user.person)
    user.subgroup_leaderships.add(subgroup)

    logger.info("Assigned %s as leader of subgroup %s", user.username, subgroup.id)
    return user


@transaction.atomic
def remove_subgroup_leadership(*, church_user_id: UUID, subgroup_id: UUID, actor: ChurchUser) -> ChurchUser:
    user = _get_church_user(church_user_id, actor)
    subgroup = _get_subgroup(subgroup_id, actor)

    require_subgroup_access(actor, subgroup, "Not authorized to remove leaders for this subgroup")

    subgroup.leaders.remove(user.person)
    user.subgroup_leaderships.remove(subgroup)

    logger.info("Removed %s as leader of subgroup %s", user.username, subgroup.id)
    return user


@transaction.atomic
def sync_group_leaders(*, group: Group, person_ids: Iterable) -> None:
    """
    Replace a group's leader list and mirror the diff onto accounts.

    People without an account are stored as leaders; they simply have no
    leadership list to update.

    Raises:
        PersonNotFoundError: If any person id is unknown
    """
    people = _resolve_people(person_ids)
    new_ids = {p.id for p in people}
    old_ids = set(group.leaders.values_list('id', flat=True))

    group.leaders.set(people)

    added = new_ids - old_ids
    removed = old_ids - new_ids
    if added:
        group.leader_accounts.add(*ChurchUser.objects.filter(person_id__in=added))
    if removed:
        group.leader_accounts.remove(*ChurchUser.objects.filter(person_id__in=removed))

    if added or removed:
        logger.info(
            "Group %s leaders synced: +%d -%d", group.id, len(added), len(removed)
        )


@transaction.atomic
def sync_subgroup_leaders(*, subgroup: Subgroup, person_ids: Iterable) -> None:
    """Subgroup counterpart of sync_group_leaders."""
    people = _resolve_people(person_ids)
    new_ids = {p.id for p in people}
    old_ids = set(subgroup.leaders.values_list('id', flat=True))

    subgroup.leaders.set(people)

    added = new_ids - old_ids
    removed = old_ids - new_ids
    if added:
        subgroup.leader_accounts.add(*ChurchUser.objects.filter(person_id__in=added))
    if removed:
        subgroup.leader_accounts.remove(*ChurchUser.objects.filter(person_id__in=removed))

    if added or removed:
        logger.info(
            "Subgroup %s leaders synced: +%d -%d", subgroup.id, len(added), len(removed)
        )


def claim_person_leaderships(*, user: ChurchUser) -> None:
    """
    Copy a person's existing leader entries onto their new account.

    Leaders can be recorded before the person has an account; this fills
    the account side once one exists.
    """
    groups = list(Group.objects.filter(leaders=user.person_id))
    subgroups = list(Subgroup.objects.filter(leaders=user.person_id))

    if groups:
        user.group_leaderships.add(*groups)
    if subgroups:
        user.subgroup_leaderships.add(*subgroups)

    if groups or subgroups:
        logger.info(
            "Account %s picked up %d group and %d subgroup leaderships",
            user.username, len(groups), len(subgroups),
        )


def purge_group_leaderships(*, group_ids: Iterable) -> int:
    """Drop the given groups from every account's leadership list."""
    through = ChurchUser.group_leaderships.through
    deleted, _ = through.objects.filter(group_id__in=list(group_ids)).delete()
    return deleted


def purge_subgroup_leaderships(*, subgroup_ids: Iterable) -> int:
    """Drop the given subgroups from every account's leadership list."""
    through = ChurchUser.subgroup_leaderships.through
    deleted, _ = through.objects.filter(subgroup_id__in=list(subgroup_ids)).delete()
    return deleted
