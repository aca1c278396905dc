import pytest
from datetime import timedelta
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import ChurchUser, Church, Role
from apps.events.models import Event
from apps.people.models import Person, Household, Gender


def _authenticate(client, account):
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
def person(db):
    """Create and return a test person."""
    return Person.objects.create(
        first_name='John',
        last_name='Doe',
        gender=Gender.MALE,
        phone='555-0100',
        email='john@example.com',
    )


@pytest.fixture
def spouse(db):
    return Person.objects.create(first_name='Jane', last_name='Doe', gender=Gender.FEMALE)


@pytest.fixture
def child(db):
    return Person.objects.create(first_name='Jimmy', last_name='Doe', gender=Gender.MALE)


@pytest.fixture
def other_person(db):
    return Person.objects.create(
        first_name='Mary',
        last_name='Smith',
        gender=Gender.FEMALE,
        email='mary@example.com',
    )


@pytest.fixture
def admin_account(db, church):
    """Admin church user."""
    staff = Person.objects.create(first_name='Admin', last_name='Person', gender=Gender.OTHER)
    return ChurchUser.objects.create_user(
        username='admin',
        password='TestPass123!',
        person=staff,
        role=Role.ADMIN,
        church=church,
    )


@pytest.fixture
def plain_account(db, church):
    """Church user with the default 'user' role."""
    staff = Person.objects.create(first_name='Plain', last_name='User', gender=Gender.OTHER)
    return ChurchUser.objects.create_user(
        username='plain',
        password='TestPass123!',
        person=staff,
        role=Role.USER,
        church=church,
    )


@pytest.fixture
def check_in_account(db, church):
    staff = Person.objects.create(first_name='Door', last_name='Keeper', gender=Gender.OTHER)
    return ChurchUser.objects.create_user(
        username='doorkeeper',
        password='TestPass123!',
        person=staff,
        role=Role.CHECK_IN_STAFF,
        church=church,
    )


@pytest.fixture
def admin_client(api_client, admin_account):
    """Return API client authenticated as admin."""
    return _authenticate(api_client, admin_account)


@pytest.fixture
def plain_client(api_client, plain_account):
    """Return API client authenticated as a plain user."""
    return _authenticate(api_client, plain_account)


@pytest.fixture
def check_in_client(api_client, check_in_account):
    return _authenticate(api_client, check_in_account)


@pytest.fixture
def household(db, person, spouse, child):
    """Household with head, spouse and one child, links in place."""
    household = Household.objects.create(
        head_of_household=person,
        spouse=spouse,
        primary_phone='555-0100',
        city='Springfield',
    )
    household.children.set([child])
    Person.objects.filter(id__in=[person.id, spouse.id, child.id]).update(household=household)
    return household


@pytest.fixture
def event(db):
    start = timezone.now()
    return Event.objects.create(
        name='Sunday Service',
        start_datetime=start,
        end_datetime=start + timedelta(hours=2),
    )
