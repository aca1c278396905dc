import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import ChurchUser, Church, Role
from apps.groups.models import Group, Subgroup, GroupMember
from apps.people.models import Person, Gender


def make_account(username, role, church, first_name=None):
    person = Person.objects.create(
        first_name=first_name or username.title(),
        last_name='Staff',
        gender=Gender.OTHER,
    )
    return ChurchUser.objects.create_user(
        username=username,
        password='TestPass123!',
        person=person,
        role=role,
        church=church,
    )


def authenticate(client, account):
    refresh = RefreshToken.for_user(account)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def church(db):
    return Church.objects.create(name='Grace Chapel')


@pytest.fixture
def other_church(db):
    return Church.objects.create(name='Hope Fellowship')


@pytest.fixture
def admin_user(db, church):
    """Account with the admin role."""
    return make_account('admin', Role.ADMIN, church)


@pytest.fixture
def group_admin(db, church):
    """Account holding manage_groups through the group_admin role."""
    return make_account('groupadmin', Role.GROUP_ADMIN, church)


@pytest.fixture
def leader_user(db, church, group):
    """Group leader of ``group``, mirrored on both sides."""
    account = make_account('leader', Role.GROUP_LEADER, church)
    group.leaders.add(account.person)
    account.group_leaderships.add(group)
    return account


@pytest.fixture
def subgroup_leader(db, church, subgroup):
    """Leader of ``subgroup`` only."""
    account = make_account('subleader', Role.GROUP_LEADER, church)
    subgroup.leaders.add(account.person)
    account.subgroup_leaderships.add(subgroup)
    return account


@pytest.fixture
def outsider(db, church):
    """Same church, no leaderships, no manage_groups."""
    return make_account('outsider', Role.GROUP_LEADER, church)


@pytest.fixture
def foreign_admin(db, other_church):
    """Admin of a different church."""
    return make_account('foreign', Role.ADMIN, other_church)


@pytest.fixture
def admin_client(api_client, admin_user):
    return authenticate(api_client, admin_user)


@pytest.fixture
def leader_client(api_client, leader_user):
    return authenticate(api_client, leader_user)


@pytest.fixture
def subgroup_leader_client(api_client, subgroup_leader):
    return authenticate(api_client, subgroup_leader)


@pytest.fixture
def outsider_client(api_client, outsider):
    return authenticate(api_client, outsider)


@pytest.fixture
def foreign_client(api_client, foreign_admin):
    return authenticate(api_client, foreign_admin)


@pytest.fixture
def group(db, church):
    """Create and return the 'Youth' group."""
    return Group.objects.create(
        name='Youth',
        description='Youth fellowship',
        purpose='Bible study and worship for teenagers',
        church=church,
    )


@pytest.fixture
def other_group(db, church):
    return Group.objects.create(name='Choir', purpose='Music', church=church)


@pytest.fixture
def subgroup(db, church, group):
    """'Worship Team' inside Youth."""
    return Subgroup.objects.create(name='Worship Team', parent_group=group, church=church)


@pytest.fixture
def other_subgroup(db, church, other_group):
    """'Altos' inside Choir."""
    return Subgroup.objects.create(name='Altos', parent_group=other_group, church=church)


@pytest.fixture
def person(db):
    return Person.objects.create(first_name='Peter', last_name='Rock', gender=Gender.MALE)


@pytest.fixture
def another_person(db):
    return Person.objects.create(first_name='Mary', last_name='Smith', gender=Gender.FEMALE)


@pytest.fixture
def member(db, church, group, person):
    """Peter's membership in Youth, no subgroup."""
    return GroupMember.objects.create(person=person, group=group, church=church)


@pytest.fixture
def subgroup_member(db, church, group, subgroup, another_person):
    """Mary's membership in Youth, placed in Worship Team."""
    return GroupMember.objects.create(
        person=another_person,
        group=group,
        subgroup=subgroup,
        church=church,
    )
