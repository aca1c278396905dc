"""
Permission classes for the groups app.

Thin DRF wrappers over services.access_policy so views and services
apply the same rules.
"""
from rest_framework.permissions import BasePermission

from apps.groups.services.access_policy import (
    can_manage_groups,
    can_access_group,
    can_access_subgroup,
)


class CanManageGroups(BasePermission):
    """
    Permission: admin role or the ``manage_groups`` permission.

    Usage:
        def get_permissions(self):
            if self.action in ['create', 'destroy']:
                return [IsAuthenticated(), CanManageGroups()]
    """

    message = 'Only group administrators can do this.'

    def has_permission(self, request, view):
        return can_manage_groups(request.user)


class CanAccessGroup(BasePermission):
    """
    Permission: group administrator or leader of this group.
    """

    message = 'Not authorized to manage this group.'

    def has_object_permission(self, request, view, obj):
        # obj is a Group instance
        return can_access_group(request.user, obj.id)


class CanAccessSubgroup(BasePermission):
    """
    Permission: group administrator, leader of the subgroup, or leader of its parent group.
    """

    message = 'Not authorized to manage this subgroup.'

    def has_object_permission(self, request, view, obj):
        # obj is a Subgroup instance
        return can_access_subgroup(request.user, obj)
