"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data

This creates:
- 1 church with 4 accounts (admin, groupadmin, leader, doorkeeper)
- a household and a handful of people
- 2 groups, one with a subgroup, members and a week of attendance
- 1 published event with check-ins
"""

from datetime import timedelta

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import ChurchUser, Church, Role
from apps.events.models import Event, CheckIn, EventStatus
from apps.groups.models import Group, Subgroup, GroupMember, AttendanceEntry, AttendanceStatus
from apps.groups.services import (
    create_group,
    create_subgroup,
    add_member,
    assign_group_leadership,
    record_attendance,
)
from apps.people.models import Person, Household, Gender
from apps.people.services import create_household


SAMPLE_PASSWORD = 'password123'


class Command(BaseCommand):
    help = 'Create sample data for trying out the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        church, _ = Church.objects.get_or_create(name='Grace Chapel')
        accounts = self.create_accounts(church)
        people = self.create_people()
        groups = self.create_groups(accounts, people)
        self.create_event(accounts, people)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        for username in accounts:
            self.stdout.write(f'  {username} / {SAMPLE_PASSWORD}')
        self.stdout.write(f'Groups: {", ".join(g.name for g in groups)}')

    def clear_data(self):
        """Clear all sample data from the database."""
        CheckIn.objects.all().delete()
        Event.objects.all().delete()
        AttendanceEntry.objects.all().delete()
        GroupMember.objects.all().delete()
        ChurchUser.subgroup_leaderships.through.objects.all().delete()
        ChurchUser.group_leaderships.through.objects.all().delete()
        Subgroup.objects.all().delete()
        Group.objects.all().delete()
        ChurchUser.objects.filter(is_superuser=False).delete()
        Household.objects.all().delete()
        Person.objects.filter(church_user__isnull=True).delete()

    def create_accounts(self, church):
        """Create one account per staff role."""
        self.stdout.write('  Creating accounts...')

        staff = [
            ('admin', 'Ada', 'Admin', Role.ADMIN),
            ('groupadmin', 'Gus', 'Admin', Role.GROUP_ADMIN),
            ('leader', 'Lea', 'Leader', Role.GROUP_LEADER),
            ('doorkeeper', 'Dora', 'Keeper', Role.CHECK_IN_STAFF),
        ]

        accounts = {}
        for username, first_name, last_name, role in staff:
            user = ChurchUser.objects.filter(username=username).first()
            if user is None:
                person = Person.objects.create(
                    first_name=first_name,
                    last_name=last_name,
                    gender=Gender.OTHER,
                )
                user = ChurchUser.objects.create_user(
                    username=username,
                    password=SAMPLE_PASSWORD,
                    person=person,
                    role=role,
                    church=church,
                )
            accounts[username] = user
        return accounts

    def create_people(self):
        """Create a household and a few single people."""
        self.stdout.write('  Creating people...')

        head = Person.objects.create(first_name='John', last_name='Doe', gender=Gender.MALE, phone='555-0100')
        spouse = Person.objects.create(first_name='Jane', last_name='Doe', gender=Gender.FEMALE, phone='555-0101')
        child = Person.objects.create(first_name='Jimmy', last_name='Doe', gender=Gender.MALE)
        create_household(
            head_of_household_id=head.id,
            spouse_id=spouse.id,
            child_ids=[child.id],
            primary_phone='555-0100',
            city='Springfield',
        )

        singles = [
            Person.objects.create(first_name='Mary', last_name='Smith', gender=Gender.FEMALE),
            Person.objects.create(first_name='Peter', last_name='Rock', gender=Gender.MALE),
        ]
        return [head, spouse, child] + singles

    def create_groups(self, accounts, people):
        """Create groups through the services so leadership mirrors stay in sync."""
        self.stdout.write('  Creating groups...')

        actor = accounts['admin']
        choir = create_group(actor=actor, name='Choir', purpose='Music and worship')
        youth = create_group(actor=actor, name='Youth', purpose='Youth fellowship')
        altos = create_subgroup(parent_group_id=choir.id, actor=actor, name='Altos')

        assign_group_leadership(
            church_user_id=accounts['leader'].id,
            group_id=choir.id,
            actor=actor,
        )

        members = [
            add_member(group_id=choir.id, person_id=people[0].id, actor=actor),
            add_member(group_id=choir.id, person_id=people[1].id, actor=actor, subgroup_id=altos.id),
            add_member(group_id=youth.id, person_id=people[2].id, actor=actor),
        ]

        last_sunday = timezone.localdate() - timedelta(days=(timezone.localdate().weekday() + 1) % 7)
        for member in members:
            record_attendance(
                member_id=member.id,
                date=last_sunday,
                status=AttendanceStatus.PRESENT,
                actor=actor,
            )

        return [choir, youth]

    def create_event(self, accounts, people):
        self.stdout.write('  Creating events...')

        start = timezone.now().replace(minute=0, second=0, microsecond=0)
        event = Event.objects.create(
            name='Sunday Service',
            start_datetime=start,
            end_datetime=start + timedelta(hours=2),
            status=EventStatus.PUBLISHED,
        )
        event.check_in_in_charge.add(accounts['doorkeeper'])

        for person in people[:3]:
            CheckIn.objects.get_or_create(
                event=event,
                person=person,
                defaults={'checked_in_by': accounts['doorkeeper']},
            )
        return event
