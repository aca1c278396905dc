# ==========================================
# apps/groups/models.py
# ==========================================

from django.db import models
from django.utils import timezone
import uuid


class MemberRole(models.TextChoices):
    MEMBER = 'member', 'Member'
    LEADER = 'leader', 'Leader'
    ASSISTANT = 'assistant', 'Assistant'
    ADMIN = 'admin', 'Admin'


class MeetingFrequency(models.TextChoices):
    WEEKLY = 'weekly', 'Weekly'
    BIWEEKLY = 'biweekly', 'Biweekly'
    MONTHLY = 'monthly', 'Monthly'
    QUARTERLY = 'quarterly', 'Quarterly'
    CUSTOM = 'custom', 'Custom'


class MeetingDay(models.TextChoices):
    MONDAY = 'monday', 'Monday'
    TUESDAY = 'tuesday', 'Tuesday'
    WEDNESDAY = 'wednesday', 'Wednesday'
    THURSDAY = 'thursday', 'Thursday'
    FRIDAY = 'friday', 'Friday'
    SATURDAY = 'saturday', 'Saturday'
    SUNDAY = 'sunday', 'Sunday'
    VARIES = 'varies', 'Varies'


class AttendanceStatus(models.TextChoices):
    PRESENT = 'present', 'Present'
    ABSENT = 'absent', 'Absent'
    EXCUSED = 'excused', 'Excused'


class Group(models.Model):
    """Top-level congregational grouping with its own leaders and schedule."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    purpose = models.TextField(blank=True)
    meeting_frequency = models.CharField(
        max_length=20,
        choices=MeetingFrequency.choices,
        default=MeetingFrequency.WEEKLY,
    )
    custom_frequency = models.CharField(max_length=100, blank=True)
    meeting_day = models.CharField(max_length=20, choices=MeetingDay.choices, default=MeetingDay.SUNDAY)
    meeting_time = models.CharField(max_length=50, blank=True)
    meeting_location = models.CharField(max_length=200, blank=True)
    is_active = models.BooleanField(default=True)
    leaders = models.ManyToManyField('people.Person', blank=True, related_name='led_groups')
    created_by = models.ForeignKey(
        'accounts.ChurchUser',
        on_delete=models.SET_NULL,
        null=True,
        related_name='created_groups',
    )
    church = models.ForeignKey(
        'accounts.Church',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='groups',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'groups'
        indexes = [
            models.Index(fields=['church', 'name'], name='groups_church_name_idx'),
            models.Index(fields=['is_active'], name='groups_is_active_idx'),
        ]
        ordering = ['name']

    def __str__(self):
        return self.name

    def has_member(self, person):
        return self.memberships.filter(person=person).exists()


class Subgroup(models.Model):
    """A sub-division of exactly one Group, with its own leaders."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    # PROTECT: parent deletion goes through services.cascade.delete_group
    parent_group = models.ForeignKey(Group, on_delete=models.PROTECT, related_name='subgroups')
    leaders = models.ManyToManyField('people.Person', blank=True, related_name='led_subgroups')
    meeting_day = models.CharField(max_length=20, choices=MeetingDay.choices, default=MeetingDay.SUNDAY)
    meeting_time = models.CharField(max_length=50, blank=True)
    meeting_location = models.CharField(max_length=200, blank=True)
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(
        'accounts.ChurchUser',
        on_delete=models.SET_NULL,
        null=True,
        related_name='created_subgroups',
    )
    church = models.ForeignKey(
        'accounts.Church',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='subgroups',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'subgroups'
        indexes = [
            models.Index(fields=['parent_group', 'name'], name='subgroups_parent_name_idx'),
        ]
        ordering = ['name']

    def __str__(self):
        return f"{self.parent_group.name} / {self.name}"


class GroupMember(models.Model):
    """A person's participation in a group, optionally within one of its subgroups."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    person = models.ForeignKey('people.Person', on_delete=models.PROTECT, related_name='group_memberships')
    group = models.ForeignKey(Group, on_delete=models.PROTECT, related_name='memberships')
    subgroup = models.ForeignKey(
        Subgroup,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='memberships',
    )
    role = models.CharField(max_length=20, choices=MemberRole.choices, default=MemberRole.MEMBER)
    join_date = models.DateTimeField(default=timezone.now)
    is_active = models.BooleanField(default=True)
    notes = models.TextField(blank=True)
    church = models.ForeignKey(
        'accounts.Church',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='group_memberships',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'group_members'
        unique_together = [['person', 'group']]
        indexes = [
            models.Index(fields=['group', 'role'], name='group_members_group_role_idx'),
            models.Index(fields=['subgroup'], name='group_members_subgroup_idx'),
        ]
        ordering = ['created_at']

    def __str__(self):
        return f"{self.person.full_name} in {self.group.name} ({self.role})"


class AttendanceEntry(models.Model):
    """One attendance mark for a membership. Same-date entries are allowed."""

    member = models.ForeignKey(GroupMember, on_delete=models.CASCADE, related_name='attendance')
    date = models.DateField()
    status = models.CharField(max_length=10, choices=AttendanceStatus.choices)
    notes = models.TextField(blank=True)
    recorded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'group_attendance'
        indexes = [
            models.Index(fields=['member', 'date'], name='group_att_member_date_idx'),
        ]
        # Insertion order
        ordering = ['id']

    def __str__(self):
        return f"{self.member_id} {self.date} {self.status}"
