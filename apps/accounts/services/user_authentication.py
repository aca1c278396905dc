"""User authentication service."""

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework_simplejwt.tokens import RefreshToken

from .exceptions import InvalidCredentialsError, InactiveAccountError

User = get_user_model()


@transaction.atomic
def authenticate_user(*, username: str, password: str) -> User:
    """
    Authenticate a church account with username and password.

    Uses select_for_update() to prevent race conditions when updating last_login.

    Raises:
        InvalidCredentialsError: If credentials are invalid
        InactiveAccountError: If account is deactivated
    """
    try:
        user = (
            User.objects
            .select_for_update()
            .get(username=username)
        )
    except User.DoesNotExist:
        raise InvalidCredentialsError("Invalid username or password")

    if not user.check_password(password):
        raise InvalidCredentialsError("Invalid username or password")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    return user


def issue_tokens(user: User) -> dict:
    """
    Create a refresh/access pair carrying the account's authorization claims.

    Claims are informational for clients; the API re-reads role,
    permissions and leaderships from the database on every request.
    """
    refresh = RefreshToken.for_user(user)
    refresh['role'] = user.role
    refresh['permissions'] = list(user.permissions or [])
    refresh['person_id'] = str(user.person_id)
    refresh['group_leaderships'] = [str(pk) for pk in user.group_leadership_ids()]
    refresh['subgroup_leaderships'] = [str(pk) for pk in user.subgroup_leadership_ids()]

    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }
