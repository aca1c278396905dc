"""
Groups app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations run inside a transaction and check the
actor against the access policy first.
"""

from .exceptions import (
    GroupsServiceError,
    NotFoundError,
    GroupNotFoundError,
    SubgroupNotFoundError,
    MemberNotFoundError,
    PersonNotFoundError,
    ChurchUserNotFoundError,
    DuplicateMembershipError,
    InvalidSubgroupAssignmentError,
    SubgroupGroupMismatchError,
    InsufficientPermissionsError,
    GroupValidationError,
)

from .access_policy import (
    can_manage_groups,
    can_access_group,
    can_access_subgroup,
    can_view,
)

from .group_management import (
    create_group,
    get_group_by_id,
    update_group,
    list_groups,
    groups_by_interest,
    group_stats,
)

from .subgroup_management import (
    create_subgroup,
    get_subgroup,
    update_subgroup,
    list_subgroups,
)

from .membership_management import (
    add_member,
    assign_subgroup,
    add_person_to_subgroup,
    remove_person_from_subgroup,
    remove_member,
    update_member,
    get_group_members,
    get_subgroup_members,
)

from .attendance import (
    record_attendance,
    record_bulk_attendance,
    get_attendance_report,
)

from .leadership_sync import (
    assign_group_leadership,
    remove_group_leadership,
    assign_subgroup_leadership,
    remove_subgroup_leadership,
    sync_group_leaders,
    sync_subgroup_leaders,
    claim_person_leaderships,
)

from .cascade import (
    delete_group,
    delete_subgroup,
)


__all__ = [
    # Exceptions
    'GroupsServiceError',
    'NotFoundError',
    'GroupNotFoundError',
    'SubgroupNotFoundError',
    'MemberNotFoundError',
    'PersonNotFoundError',
    'ChurchUserNotFoundError',
    'DuplicateMembershipError',
    'InvalidSubgroupAssignmentError',
    'SubgroupGroupMismatchError',
    'InsufficientPermissionsError',
    'GroupValidationError',

    # Access Policy
    'can_manage_groups',
    'can_access_group',
    'can_access_subgroup',
    'can_view',

    # Group Management
    'create_group',
    'get_group_by_id',
    'update_group',
    'list_groups',
    'groups_by_interest',
    'group_stats',

    # Subgroup Management
    'create_subgroup',
    'get_subgroup',
    'update_subgroup',
    'list_subgroups',

    # Membership Management
    'add_member',
    'assign_subgroup',
    'add_person_to_subgroup',
    'remove_person_from_subgroup',
    'remove_member',
    'update_member',
    'get_group_members',
    'get_subgroup_members',

    # Attendance
    'record_attendance',
    'record_bulk_attendance',
    'get_attendance_report',

    # Leadership Sync
    'assign_group_leadership',
    'remove_group_leadership',
    'assign_subgroup_leadership',
    'remove_subgroup_leadership',
    'sync_group_leaders',
    'sync_subgroup_leaders',
    'claim_person_leaderships',

    # Cascade
    'delete_group',
    'delete_subgroup',
]
