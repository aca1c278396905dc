import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import ChurchUser, Church, Role
from apps.groups.models import Group, Subgroup
from apps.people.models import Person, Gender


def make_account(username, role, church, first_name='Test', last_name=None, **extra):
    person = Person.objects.create(
        first_name=first_name,
        last_name=last_name or username.title(),
        gender=Gender.OTHER,
        email=f'{username}@example.com',
    )
    return ChurchUser.objects.create_user(
        username=username,
        password='TestPass123!',
        person=person,
        role=role,
        church=church,
        **extra
    )


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def church(db):
    return Church.objects.create(name='Grace Chapel')


@pytest.fixture
def user(db, church):
    """Create and return a plain church account."""
    return make_account('testuser', Role.USER, church)


@pytest.fixture
def user_inactive(db, church):
    """Create and return an inactive account."""
    return make_account('inactive', Role.USER, church, is_active=False)


@pytest.fixture
def admin_user(db, church):
    return make_account('admin', Role.ADMIN, church, first_name='Ada')


@pytest.fixture
def group_admin(db, church):
    return make_account('groupadmin', Role.GROUP_ADMIN, church)


@pytest.fixture
def leader_user(db, church):
    return make_account('leader', Role.GROUP_LEADER, church, first_name='Lea')


@pytest.fixture
def unlinked_person(db):
    """A person without an account."""
    return Person.objects.create(first_name='Mary', last_name='Smith', gender=Gender.FEMALE)


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def admin_client(api_client, admin_user):
    refresh = RefreshToken.for_user(admin_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def group_admin_client(api_client, group_admin):
    refresh = RefreshToken.for_user(group_admin)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def leader_client(api_client, leader_user):
    refresh = RefreshToken.for_user(leader_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def group(db, church):
    return Group.objects.create(name='Choir', church=church)


@pytest.fixture
def subgroup(db, church, group):
    return Subgroup.objects.create(name='Altos', parent_group=group, church=church)
