"""
Role-derived permission classes.

Each class checks one entry of the account's permission list. Admins
always pass.

Usage:
    def get_permissions(self):
        if self.action in ['create', 'update', 'partial_update', 'destroy']:
            return [IsAuthenticated(), CanManagePeople()]
        return [IsAuthenticated()]
"""
from rest_framework.permissions import BasePermission

from apps.accounts.models import Permission


class HasChurchPermission(BasePermission):
    """Base class; subclasses set ``required_permission``."""

    required_permission = None
    message = 'Permission denied.'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.is_admin or user.has_permission(self.required_permission)


class CanManageUsers(HasChurchPermission):
    required_permission = Permission.MANAGE_USERS
    message = 'You do not have permission to manage church users.'


class CanManagePeople(HasChurchPermission):
    required_permission = Permission.MANAGE_PEOPLE
    message = 'You do not have permission to manage people.'


class CanManageHouseholds(HasChurchPermission):
    required_permission = Permission.MANAGE_HOUSEHOLDS
    message = 'You do not have permission to manage households.'


class CanManageEvents(HasChurchPermission):
    required_permission = Permission.MANAGE_EVENTS
    message = 'You do not have permission to manage events.'


class CanRegisterNewcomers(HasChurchPermission):
    required_permission = Permission.REGISTER_NEWCOMERS
    message = 'You do not have permission to register newcomers.'
