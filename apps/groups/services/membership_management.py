"""
Membership management service.

Handles group membership and subgroup assignment. A person has at most
one membership per group; a subgroup is only ever set on a membership of
the subgroup's parent group.
"""

import logging
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.models import ChurchUser
from apps.groups.models import Group, Subgroup, GroupMember, MemberRole
from apps.people.models import Person

from .access_policy import require_group_access, require_subgroup_access
from .exceptions import (
    GroupNotFoundError,
    SubgroupNotFoundError,
    MemberNotFoundError,
    PersonNotFoundError,
    DuplicateMembershipError,
    InvalidSubgroupAssignmentError,
    SubgroupGroupMismatchError,
)
from .group_management import validate_choice

logger = logging.getLogger(__name__)

_UNSET = object()


def _get_member_for_update(member_id, actor: ChurchUser) -> GroupMember:
    try:
        return (
            GroupMember.objects
            .select_for_update()
            .get(id=member_id, church_id=actor.church_id)
        )
    except (GroupMember.DoesNotExist, ValidationError):
        raise MemberNotFoundError(f"Group member with ID {member_id} not found")


def _get_subgroup(subgroup_id, actor: ChurchUser) -> Subgroup:
    try:
        return Subgroup.objects.get(id=subgroup_id, church_id=actor.church_id)
    except (Subgroup.DoesNotExist, ValidationError):
        raise SubgroupNotFoundError(f"Subgroup with ID {subgroup_id} not found")


@transaction.atomic
def add_member(
    *,
    group_id: UUID,
    person_id: UUID,
    actor: ChurchUser,
    subgroup_id: Optional[UUID] = None,
    role: str = MemberRole.MEMBER,
    notes: str = ''
) -> GroupMember:
    """
    Add a person to a group.

    The unique (person, group) constraint is the authority on duplicates;
    the pre-check only gives a friendlier path for the common case.

    Args:
        group_id: UUID of the group
        person_id: UUID of the person joining
        actor: Account performing the change
        subgroup_id: Optional subgroup of the same group
        role: Membership role (default member)

    Returns:
        Created GroupMember instance

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If actor may not manage the group
        PersonNotFoundError: If person doesn't exist
        InvalidSubgroupAssignmentError: If the subgroup belongs to another group
        DuplicateMembershipError: If the person is already a member
    """
    try:
        group = (
            Group.objects
            .select_for_update()
            .get(id=group_id, church_id=actor.church_id)
        )
    except (Group.DoesNotExist, ValidationError):
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    require_group_access(actor, group.id, "Not authorized to add members to this group")
    validate_choice(role, MemberRole, 'role')

    try:
        person = Person.objects.get(id=person_id)
    except (Person.DoesNotExist, ValidationError):
        raise PersonNotFoundError(f"Person with ID {person_id} not found")

    subgroup = None
    if subgroup_id:
        subgroup = _get_subgroup(subgroup_id, actor)
        if subgroup.parent_group_id != group.id:
            raise InvalidSubgroupAssignmentError(
                "Person must be a member of the subgroup's parent group"
            )

    if group.has_member(person):
        raise DuplicateMembershipError("Person is already a member of this group")

    try:
        with transaction.atomic():
            member = GroupMember.objects.create(
                person=person,
                group=group,
                subgroup=subgroup,
                role=role,
                notes=notes,
                church_id=group.church_id,
            )
    except IntegrityError:
        # Concurrent add won the race
        raise DuplicateMembershipError("Person is already a member of this group")

    logger.info("Person %s added to group %s by %s", person.id, group.id, actor.username)
    return member


@transaction.atomic
def assign_subgroup(
    *,
    member_id: UUID,
    subgroup_id: Optional[UUID],
    actor: ChurchUser
) -> GroupMember:
    """
    Move a membership into a subgroup of its own group, or clear it.

    Clearing (``subgroup_id=None``) keeps the parent-group membership and
    needs the same access as remove_person_from_subgroup: access to the
    subgroup being left.

    Raises:
        MemberNotFoundError: If membership doesn't exist
        SubgroupNotFoundError: If subgroup doesn't exist
        InsufficientPermissionsError: If actor may not manage the target
        SubgroupGroupMismatchError: If the subgroup belongs to another group
    """
    member = _get_member_for_update(member_id, actor)

    if subgroup_id is None:
        if member.subgroup_id:
            require_subgroup_access(actor, member.subgroup_id)
        else:
            require_group_access(actor, member.group_id, "Not authorized to update this group member")
        member.subgroup = None
    else:
        subgroup = _get_subgroup(subgroup_id, actor)
        require_subgroup_access(actor, subgroup)
        if subgroup.parent_group_id != member.group_id:
            raise SubgroupGroupMismatchError("Subgroup does not belong to the member's group")
        member.subgroup = subgroup

    member.save(update_fields=['subgroup', 'updated_at'])
    return member


@transaction.atomic
def add_person_to_subgroup(*, subgroup_id: UUID, person_id: UUID, actor: ChurchUser) -> GroupMember:
    """
    Put an existing parent-group member into a subgroup.

    Raises:
        SubgroupNotFoundError: If subgroup doesn't exist
        InsufficientPermissionsError: If actor may not manage the subgroup
        InvalidSubgroupAssignmentError: If the person is not a member of the parent group
    """
    subgroup = _get_subgroup(subgroup_id, actor)
    require_subgroup_access(actor, subgroup)

    try:
        member = (
            GroupMember.objects
            .select_for_update()
            .get(person_id=person_id, group_id=subgroup.parent_group_id)
        )
    except (GroupMember.DoesNotExist, ValidationError):
        raise InvalidSubgroupAssignmentError(
            "Person must be a member of the parent group before joining a subgroup"
        )

    member.subgroup = subgroup
    member.save(update_fields=['subgroup', 'updated_at'])
    return member


@transaction.atomic
def remove_person_from_subgroup(*, subgroup_id: UUID, person_id: UUID, actor: ChurchUser) -> GroupMember:
    """Clear the subgroup on a person's membership; they stay in the parent group."""
    subgroup = _get_subgroup(subgroup_id, actor)
    require_subgroup_access(actor, subgroup)

    try:
        member = (
            GroupMember.objects
            .select_for_update()
            .get(person_id=person_id, subgroup=subgroup)
        )
    except (GroupMember.DoesNotExist, ValidationError):
        raise MemberNotFoundError("Member not found in this subgroup")

    member.subgroup = None
    member.save(update_fields=['subgroup', 'updated_at'])
    return member


@transaction.atomic
def remove_member(*, member_id: UUID, actor: ChurchUser) -> None:
    """
    Delete a membership, including any subgroup assignment and attendance.

    To keep the person in the group but out of a subgroup use
    assign_subgroup(subgroup_id=None).
    """
    member = _get_member_for_update(member_id, actor)
    require_group_access(actor, member.group_id, "Not authorized to remove members from this group")

    member.delete()
    logger.info("Membership %s removed from group %s by %s", member_id, member.group_id, actor.username)


@transaction.atomic
def update_member(
    *,
    member_id: UUID,
    actor: ChurchUser,
    role: Optional[str] = None,
    is_active: Optional[bool] = None,
    notes: Optional[str] = None,
    subgroup_id=_UNSET
) -> GroupMember:
    """
    Update a membership. Arguments left out are not touched.

    ``subgroup_id`` follows assign_subgroup rules: ``None`` clears it and a
    subgroup of another group raises SubgroupGroupMismatchError.
    """
    member = _get_member_for_update(member_id, actor)
    require_group_access(actor, member.group_id, "Not authorized to update this group member")

    if role is not None:
        validate_choice(role, MemberRole, 'role')
        member.role = role
    if is_active is not None:
        member.is_active = is_active
    if notes is not None:
        member.notes = notes

    if subgroup_id is not _UNSET:
        if subgroup_id is None:
            member.subgroup = None
        else:
            subgroup = _get_subgroup(subgroup_id, actor)
            if subgroup.parent_group_id != member.group_id:
                raise SubgroupGroupMismatchError("Subgroup does not belong to the member's group")
            member.subgroup = subgroup

    member.save()
    return member


def get_group_members(*, group_id: UUID, actor: ChurchUser) -> QuerySet[GroupMember]:
    """
    Members of a group in the actor's church, in join order.

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    if not Group.objects.filter(id=group_id, church_id=actor.church_id).exists():
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    return (
        GroupMember.objects
        .filter(group_id=group_id, church_id=actor.church_id)
        .select_related('person', 'subgroup')
        .order_by('created_at')
    )


def get_subgroup_members(*, subgroup_id: UUID, actor: ChurchUser) -> QuerySet[GroupMember]:
    if not Subgroup.objects.filter(id=subgroup_id, church_id=actor.church_id).exists():
        raise SubgroupNotFoundError(f"Subgroup with ID {subgroup_id} not found")

    return (
        GroupMember.objects
        .filter(subgroup_id=subgroup_id, church_id=actor.church_id)
        .select_related('person', 'group')
        .order_by('created_at')
    )
