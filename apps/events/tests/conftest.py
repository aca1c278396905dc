import pytest
from datetime import datetime, timedelta
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import ChurchUser, Church, Role
from apps.events.models import Event, EventStatus
from apps.people.models import Person, Household, Gender


def make_account(username, role, church):
    person = Person.objects.create(first_name=username.title(), last_name='Staff', gender=Gender.OTHER)
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
def event_manager(db, church):
    return make_account('manager', Role.EVENT_MANAGER, church)


@pytest.fixture
def check_in_staff(db, church):
    return make_account('doorkeeper', Role.CHECK_IN_STAFF, church)


@pytest.fixture
def plain_user(db, church):
    return make_account('plain', Role.USER, church)


@pytest.fixture
def manager_client(api_client, event_manager):
    return authenticate(api_client, event_manager)


@pytest.fixture
def staff_client(api_client, check_in_staff):
    return authenticate(api_client, check_in_staff)


@pytest.fixture
def plain_client(api_client, plain_user):
    return authenticate(api_client, plain_user)


@pytest.fixture
def event(db):
    """A published event starting now."""
    start = timezone.now()
    return Event.objects.create(
        name='Sunday Service',
        start_datetime=start,
        end_datetime=start + timedelta(hours=2),
        status=EventStatus.PUBLISHED,
    )


@pytest.fixture
def dated_events(db):
    """Three events on fixed dates: Jan 10 (draft), Feb 10 and Mar 10 (published)."""
    def make(name, month, status):
        start = timezone.make_aware(datetime(2024, month, 10, 10, 0))
        return Event.objects.create(
            name=name,
            start_datetime=start,
            end_datetime=start + timedelta(hours=1),
            status=status,
        )

    return [
        make('January', 1, EventStatus.DRAFT),
        make('February', 2, EventStatus.PUBLISHED),
        make('March', 3, EventStatus.PUBLISHED),
    ]


@pytest.fixture
def person(db):
    return Person.objects.create(first_name='John', last_name='Doe', gender=Gender.MALE, phone='555-0100')


@pytest.fixture
def family(db, person):
    """John's household: John (phone 555-0100), Jane and Jimmy (no phone)."""
    spouse = Person.objects.create(first_name='Jane', last_name='Doe', gender=Gender.FEMALE)
    child = Person.objects.create(first_name='Jimmy', last_name='Doe', gender=Gender.MALE)
    household = Household.objects.create(head_of_household=person, spouse=spouse, primary_phone='555-0100')
    household.children.set([child])
    Person.objects.filter(id__in=[person.id, spouse.id, child.id]).update(household=household)
    return [person, spouse, child]


@pytest.fixture
def helper_account(db, church):
    """Plain user, no check-in permission of its own."""
    return make_account('helper', Role.USER, church)
