"""
Church account management service.

CRUD for ChurchUser plus search and explicit permission overrides.
Leadership assignment lives in apps.groups.services.leadership_sync.
"""

import logging
from typing import Iterable, Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Q, QuerySet

from apps.accounts.models import ChurchUser, Church, Permission, Role
from apps.groups.services.leadership_sync import claim_person_leaderships
from apps.people.models import Person
from apps.people.services.exceptions import PersonNotFoundError

from .exceptions import ChurchUserNotFoundError, AccountValidationError

logger = logging.getLogger(__name__)

SEARCH_MIN_LENGTH = 2


def _validate_role(role: str) -> str:
    if role not in Role.values:
        raise AccountValidationError(f"Invalid role: {role}")
    return role


def _get_church(church_id) -> Optional[Church]:
    if not church_id:
        return None
    try:
        return Church.objects.get(id=church_id)
    except (Church.DoesNotExist, ValidationError):
        raise AccountValidationError(f"Church with ID {church_id} not found")


def get_church_user(*, user_id: UUID) -> ChurchUser:
    try:
        return (
            ChurchUser.objects
            .select_related('person', 'church')
            .prefetch_related('group_leaderships', 'subgroup_leaderships')
            .get(id=user_id)
        )
    except (ChurchUser.DoesNotExist, ValidationError):
        raise ChurchUserNotFoundError(f"User with ID {user_id} not found")


def list_church_users() -> QuerySet[ChurchUser]:
    return (
        ChurchUser.objects
        .select_related('person', 'church')
        .prefetch_related('group_leaderships', 'subgroup_leaderships')
        .order_by('username')
    )


@transaction.atomic
def create_church_user(
    *,
    username: str,
    password: str,
    person_id: UUID,
    role: str = Role.USER,
    church_id: Optional[UUID] = None
) -> ChurchUser:
    """
    Create a church account for an existing person.

    Permissions are derived from the role. The password is stored hashed.
    If the person already leads groups or subgroups, the account's
    leadership lists are filled in to match.

    Raises:
        PersonNotFoundError: If the person doesn't exist
        AccountValidationError: On taken username, linked person or bad role
    """
    _validate_role(role)

    try:
        person = Person.objects.get(id=person_id)
    except (Person.DoesNotExist, ValidationError):
        raise PersonNotFoundError(f"Person with ID {person_id} not found")

    if ChurchUser.objects.filter(username=username).exists():
        raise AccountValidationError("Username is already taken")
    if ChurchUser.objects.filter(person=person).exists():
        raise AccountValidationError("Person already has a church account")

    try:
        with transaction.atomic():
            user = ChurchUser.objects.create_user(
                username=username,
                password=password,
                person=person,
                role=role,
                church=_get_church(church_id),
            )
    except IntegrityError:
        raise AccountValidationError("Username is already taken")

    claim_person_leaderships(user=user)

    logger.info("Church user %s created with role %s", user.username, user.role)
    return user


@transaction.atomic
def update_church_user(
    *,
    user_id: UUID,
    username: Optional[str] = None,
    password: Optional[str] = None,
    role: Optional[str] = None,
    is_active: Optional[bool] = None,
    church_id: Optional[UUID] = None
) -> ChurchUser:
    """
    Update a church account.

    Changing the role re-derives the permission list.
    """
    try:
        user = ChurchUser.objects.select_for_update().get(id=user_id)
    except (ChurchUser.DoesNotExist, ValidationError):
        raise ChurchUserNotFoundError(f"User with ID {user_id} not found")

    if username is not None and username != user.username:
        if ChurchUser.objects.filter(username=username).exclude(id=user.id).exists():
            raise AccountValidationError("Username is already taken")
        user.username = username
    if password:
        user.set_password(password)
    if role is not None:
        user.role = _validate_role(role)
    if is_active is not None:
        user.is_active = is_active
    if church_id is not None:
        user.church = _get_church(church_id)

    user.save()
    return get_church_user(user_id=user.id)


@transaction.atomic
def delete_church_user(*, user_id: UUID) -> None:
    """Delete an account; the linked person stays."""
    user = get_church_user(user_id=user_id)
    username = user.username
    user.delete()
    logger.info("Church user %s deleted", username)


def search_church_users(*, query: str, role: Optional[str] = None) -> list:
    """
    Match accounts by username or by the linked person's name.

    Queries shorter than two characters return nothing.
    """
    if not query or len(query) < SEARCH_MIN_LENGTH:
        return []

    queryset = list_church_users().filter(
        Q(username__icontains=query) |
        Q(person__first_name__icontains=query) |
        Q(person__last_name__icontains=query)
    )
    if role:
        queryset = queryset.filter(role=role)

    return list(queryset)


@transaction.atomic
def update_permissions(*, user_id: UUID, permissions: Iterable[str]) -> ChurchUser:
    """
    Replace an account's permission list without changing its role.

    The override holds until the role next changes.

    Raises:
        AccountValidationError: If a permission name is unknown
    """
    permissions = list(dict.fromkeys(permissions))
    unknown = [p for p in permissions if p not in Permission.ALL]
    if unknown:
        raise AccountValidationError(f"Unknown permission: {unknown[0]}")

    try:
        user = ChurchUser.objects.select_for_update().get(id=user_id)
    except (ChurchUser.DoesNotExist, ValidationError):
        raise ChurchUserNotFoundError(f"User with ID {user_id} not found")

    user.permissions = permissions
    user.save(update_fields=['permissions', 'updated_at'])

    logger.info("Permissions of %s set to %s", user.username, permissions)
    return get_church_user(user_id=user.id)
