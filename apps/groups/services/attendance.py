"""
Group attendance service.

Attendance entries are appended per membership and never deduplicated:
recording the same date twice keeps both entries.
"""

import logging
import datetime
from typing import List, Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Prefetch

from apps.accounts.models import ChurchUser
from apps.groups.models import Group, Subgroup, GroupMember, AttendanceEntry, AttendanceStatus

from .access_policy import require_group_access, require_subgroup_access
from .exceptions import (
    GroupNotFoundError,
    SubgroupNotFoundError,
    MemberNotFoundError,
    GroupValidationError,
)
from .group_management import validate_choice

logger = logging.getLogger(__name__)


def _scope_queryset(*, actor: ChurchUser, group_id, subgroup_id):
    """
    Resolve a group-or-subgroup scope to its member queryset.

    Exactly one of group_id / subgroup_id must be given. Access is checked
    on the resolved scope.
    """
    if (group_id is None) == (subgroup_id is None):
        raise GroupValidationError("Exactly one of group_id or subgroup_id is required")

    if group_id is not None:
        try:
            group = Group.objects.get(id=group_id, church_id=actor.church_id)
        except (Group.DoesNotExist, ValidationError):
            raise GroupNotFoundError(f"Group with ID {group_id} not found")
        require_group_access(actor, group.id, "Not authorized to manage attendance for this group")
        return GroupMember.objects.filter(group=group, church_id=actor.church_id)

    try:
        subgroup = Subgroup.objects.get(id=subgroup_id, church_id=actor.church_id)
    except (Subgroup.DoesNotExist, ValidationError):
        raise SubgroupNotFoundError(f"Subgroup with ID {subgroup_id} not found")
    require_subgroup_access(actor, subgroup, "Not authorized to manage attendance for this subgroup")
    return GroupMember.objects.filter(subgroup=subgroup, church_id=actor.church_id)


@transaction.atomic
def record_attendance(
    *,
    member_id: UUID,
    date: datetime.date,
    status: str,
    actor: ChurchUser,
    notes: str = ''
) -> AttendanceEntry:
    """
    Append one attendance entry to a membership.

    Raises:
        MemberNotFoundError: If membership doesn't exist
        InsufficientPermissionsError: If actor may not manage the member's group or subgroup
        GroupValidationError: On an unknown status
    """
    try:
        member = (
            GroupMember.objects
            .select_for_update()
            .get(id=member_id, church_id=actor.church_id)
        )
    except (GroupMember.DoesNotExist, ValidationError):
        raise MemberNotFoundError(f"Group member with ID {member_id} not found")

    if member.subgroup_id:
        require_subgroup_access(actor, member.subgroup_id, "Not authorized to record attendance for this member")
    else:
        require_group_access(actor, member.group_id, "Not authorized to record attendance for this member")

    validate_choice(status, AttendanceStatus, 'status')

    return AttendanceEntry.objects.create(member=member, date=date, status=status, notes=notes or '')


@transaction.atomic
def record_bulk_attendance(
    *,
    date: datetime.date,
    records: List[dict],
    actor: ChurchUser,
    group_id: Optional[UUID] = None,
    subgroup_id: Optional[UUID] = None
) -> List[dict]:
    """
    Record one date's attendance for many members of a group or subgroup.

    Each record is ``{'member_id', 'status', 'notes'}``. A member outside
    the scope or a bad status fails that record only.

    Returns:
        One ``{'member_id', 'success', 'message'}`` dict per record, in order
    """
    members = _scope_queryset(actor=actor, group_id=group_id, subgroup_id=subgroup_id)
    scope_ids = set(members.values_list('id', flat=True))
    not_found = "Member not found" if group_id is not None else "Member not found in this subgroup"

    results = []
    for record in records:
        member_id = record.get('member_id')
        status = record.get('status')

        try:
            member_uuid = UUID(str(member_id))
        except ValueError:
            member_uuid = None

        if member_uuid not in scope_ids:
            results.append({'member_id': member_id, 'success': False, 'message': not_found})
            continue

        if status not in AttendanceStatus.values:
            results.append({'member_id': member_id, 'success': False, 'message': f"Invalid status: {status}"})
            continue

        AttendanceEntry.objects.create(
            member_id=member_uuid,
            date=date,
            status=status,
            notes=record.get('notes') or '',
        )
        results.append({'member_id': member_id, 'success': True, 'message': 'Attendance recorded'})

    recorded = sum(1 for r in results if r['success'])
    logger.info(
        "Attendance for %s recorded: %d of %d by %s",
        date, recorded, len(results), actor.username,
    )
    return results


def get_attendance_report(
    *,
    start_date: datetime.date,
    end_date: datetime.date,
    actor: ChurchUser,
    group_id: Optional[UUID] = None,
    subgroup_id: Optional[UUID] = None
) -> List[dict]:
    """
    Attendance per member within ``[start_date, end_date]`` inclusive.

    Every member of the scope appears, in store order, even with no
    entries in range. Entries keep insertion order.
    """
    if start_date > end_date:
        raise GroupValidationError("start_date must not be after end_date")

    members = (
        _scope_queryset(actor=actor, group_id=group_id, subgroup_id=subgroup_id)
        .select_related('person')
        .prefetch_related(
            Prefetch(
                'attendance',
                queryset=AttendanceEntry.objects.filter(
                    date__gte=start_date, date__lte=end_date
                ).order_by('id'),
                to_attr='entries_in_range',
            )
        )
        .order_by('created_at')
    )

    return [
        {
            'member_id': member.id,
            'person_id': member.person_id,
            'first_name': member.person.first_name,
            'last_name': member.person.last_name,
            'attendance': [
                {'date': entry.date, 'status': entry.status, 'notes': entry.notes}
                for entry in member.entries_in_range
            ],
        }
        for member in members
    ]
