import pytest
from io import StringIO
from django.core.management import call_command
from apps.accounts.models import ChurchUser
from apps.events.models import CheckIn
from apps.groups.models import Group, GroupMember, AttendanceEntry
from apps.people.models import Household


@pytest.mark.django_db
class TestCreateSampleData:

    def test_creates_linked_sample_data(self):
        out = StringIO()
        call_command('create_sample_data', stdout=out)

        assert 'Sample data created successfully!' in out.getvalue()
        assert ChurchUser.objects.count() == 4
        assert Household.objects.count() == 1
        assert Group.objects.count() == 2
        assert GroupMember.objects.count() == 3
        assert AttendanceEntry.objects.count() == 3
        assert CheckIn.objects.count() == 3

        leader = ChurchUser.objects.get(username='leader')
        choir = Group.objects.get(name='Choir')
        assert leader.group_leaderships.filter(id=choir.id).exists()
        assert choir.leaders.filter(id=leader.person_id).exists()

    def test_clear_then_recreate(self):
        call_command('create_sample_data', stdout=StringIO())
        call_command('create_sample_data', '--clear', stdout=StringIO())

        assert Group.objects.count() == 2
        assert GroupMember.objects.count() == 3
