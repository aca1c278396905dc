from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
import uuid


class Role(models.TextChoices):
    ADMIN = 'admin', 'Admin'
    USER = 'user', 'User'
    EVENT_MANAGER = 'event_manager', 'Event Manager'
    TEAM_LEAD = 'team_lead', 'Team Lead'
    CHECK_IN_STAFF = 'check_in_staff', 'Check-in Staff'
    GROUP_LEADER = 'group_leader', 'Group Leader'
    GROUP_ADMIN = 'group_admin', 'Group Admin'


class Permission:
    MANAGE_USERS = 'manage_users'
    MANAGE_PEOPLE = 'manage_people'
    MANAGE_HOUSEHOLDS = 'manage_households'
    MANAGE_EVENTS = 'manage_events'
    MANAGE_TEAMS = 'manage_teams'
    MANAGE_GROUPS = 'manage_groups'
    MANAGE_GROUP_MEMBERS = 'manage_group_members'
    VIEW_PEOPLE = 'view_people'
    VIEW_HOUSEHOLDS = 'view_households'
    VIEW_EVENTS = 'view_events'
    VIEW_GROUPS = 'view_groups'
    PERFORM_CHECK_IN = 'perform_check_in'
    REGISTER_NEWCOMERS = 'register_newcomers'

    ALL = [
        MANAGE_USERS,
        MANAGE_PEOPLE,
        MANAGE_HOUSEHOLDS,
        MANAGE_EVENTS,
        MANAGE_TEAMS,
        MANAGE_GROUPS,
        MANAGE_GROUP_MEMBERS,
        VIEW_PEOPLE,
        VIEW_HOUSEHOLDS,
        VIEW_EVENTS,
        VIEW_GROUPS,
        PERFORM_CHECK_IN,
        REGISTER_NEWCOMERS,
    ]


ROLE_PERMISSIONS = {
    Role.ADMIN: list(Permission.ALL),
    Role.EVENT_MANAGER: [
        Permission.MANAGE_EVENTS,
        Permission.MANAGE_TEAMS,
        Permission.VIEW_EVENTS,
        Permission.VIEW_PEOPLE,
        Permission.VIEW_GROUPS,
        Permission.PERFORM_CHECK_IN,
        Permission.REGISTER_NEWCOMERS,
    ],
    Role.TEAM_LEAD: [
        Permission.MANAGE_TEAMS,
        Permission.VIEW_EVENTS,
        Permission.VIEW_PEOPLE,
        Permission.VIEW_GROUPS,
    ],
    Role.GROUP_LEADER: [
        Permission.MANAGE_GROUP_MEMBERS,
        Permission.VIEW_GROUPS,
        Permission.VIEW_PEOPLE,
        Permission.VIEW_EVENTS,
    ],
    Role.GROUP_ADMIN: [
        Permission.MANAGE_GROUPS,
        Permission.MANAGE_GROUP_MEMBERS,
        Permission.VIEW_GROUPS,
        Permission.VIEW_PEOPLE,
        Permission.VIEW_EVENTS,
    ],
    Role.CHECK_IN_STAFF: [
        Permission.VIEW_EVENTS,
        Permission.VIEW_GROUPS,
        Permission.PERFORM_CHECK_IN,
        Permission.REGISTER_NEWCOMERS,
    ],
    Role.USER: [
        Permission.VIEW_EVENTS,
        Permission.VIEW_GROUPS,
    ],
}


def permissions_for_role(role):
    return list(ROLE_PERMISSIONS.get(role, []))


class Church(models.Model):
    """Tenant that groups, subgroups and memberships are scoped to."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'churches'
        ordering = ['name']

    def __str__(self):
        return self.name


class ChurchUserManager(BaseUserManager):
    """Manager for username-based church staff accounts."""

    def create_user(self, username, password=None, **extra_fields):
        if not username:
            raise ValueError('Username is required')

        user = self.model(username=username, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, username, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', Role.ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(username, password, **extra_fields)


class ChurchUser(AbstractBaseUser, PermissionsMixin):
    """
    Church staff account linked one-to-one with a Person.

    `permissions` is derived from `role` whenever the role changes.
    `group_leaderships` / `subgroup_leaderships` mirror Group.leaders and
    Subgroup.leaders; only apps.groups.services.leadership_sync writes them.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    person = models.OneToOneField(
        'people.Person',
        on_delete=models.PROTECT,
        related_name='church_user',
    )
    username = models.CharField(max_length=150, unique=True, db_index=True)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.USER)
    permissions = models.JSONField(default=list, blank=True)
    church = models.ForeignKey(
        Church,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='users',
    )

    group_leaderships = models.ManyToManyField(
        'groups.Group',
        blank=True,
        related_name='leader_accounts',
    )
    subgroup_leaderships = models.ManyToManyField(
        'groups.Subgroup',
        blank=True,
        related_name='leader_accounts',
    )

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ChurchUserManager()

    USERNAME_FIELD = 'username'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'church_users'
        ordering = ['username']

    def __str__(self):
        return self.username

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._loaded_role = instance.__dict__.get('role')
        return instance

    def save(self, *args, **kwargs):
        if self._state.adding or self.role != getattr(self, '_loaded_role', None):
            self.permissions = permissions_for_role(self.role)
            update_fields = kwargs.get('update_fields')
            if update_fields is not None and 'permissions' not in update_fields:
                kwargs['update_fields'] = list(update_fields) + ['permissions']
        super().save(*args, **kwargs)
        self._loaded_role = self.role

    def get_display_name(self):
        """Person's full name, falling back to the username."""
        if self.person_id:
            return self.person.full_name
        return self.username

    def has_permission(self, permission):
        return permission in (self.permissions or [])

    @property
    def is_admin(self):
        return self.role == Role.ADMIN

    def group_leadership_ids(self):
        return set(self.group_leaderships.values_list('id', flat=True))

    def subgroup_leadership_ids(self):
        return set(self.subgroup_leaderships.values_list('id', flat=True))
