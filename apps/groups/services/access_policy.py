"""
Access policy for groups and subgroups.

Pure decision functions: they read the actor's role, permission set and
leadership lists and never write anything. Mutating services call the
``require_*`` helpers, which raise InsufficientPermissionsError on denial.
"""

from typing import Union
from uuid import UUID

from apps.accounts.models import ChurchUser, Permission, Role
from apps.groups.models import Subgroup

from .exceptions import InsufficientPermissionsError


def _as_uuid(value) -> UUID:
    return value if isinstance(value, UUID) else UUID(str(value))


def can_manage_groups(actor: ChurchUser) -> bool:
    """Admins and holders of ``manage_groups`` may act on any group."""
    return actor.role == Role.ADMIN or actor.has_permission(Permission.MANAGE_GROUPS)


def can_access_group(actor: ChurchUser, group_id) -> bool:
    if can_manage_groups(actor):
        return True
    return _as_uuid(group_id) in actor.group_leadership_ids()


def can_access_subgroup(actor: ChurchUser, subgroup: Union[Subgroup, UUID, str]) -> bool:
    """
    Admin, leader of the subgroup, or leader of its parent group.

    Accepts a Subgroup or its id; an id costs one lookup to resolve the
    parent group, and an unknown id is denied.
    """
    if can_manage_groups(actor):
        return True

    if not isinstance(subgroup, Subgroup):
        subgroup = Subgroup.objects.filter(id=_as_uuid(subgroup)).only('id', 'parent_group_id').first()
        if subgroup is None:
            return False

    if subgroup.id in actor.subgroup_leadership_ids():
        return True

    return can_access_group(actor, subgroup.parent_group_id)


def can_view(actor: ChurchUser, obj) -> bool:
    """Read access: any authenticated actor in the same church tenant."""
    return getattr(obj, 'church_id', None) == actor.church_id


def require_manage_groups(actor: ChurchUser, message: str = "Only group administrators can do this") -> None:
    if not can_manage_groups(actor):
        raise InsufficientPermissionsError(message)


def require_group_access(actor: ChurchUser, group_id, message: str = "Not authorized to manage this group") -> None:
    if not can_access_group(actor, group_id):
        raise InsufficientPermissionsError(message)


def require_subgroup_access(actor: ChurchUser, subgroup, message: str = "Not authorized to manage this subgroup") -> None:
    if not can_access_subgroup(actor, subgroup):
        raise InsufficientPermissionsError(message)
