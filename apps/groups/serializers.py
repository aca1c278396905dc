from rest_framework import serializers

from apps.people.serializers import PersonMinimalSerializer
from .models import (
    Group,
    Subgroup,
    GroupMember,
    AttendanceEntry,
    MemberRole,
    AttendanceStatus,
)


class SubgroupMinimalSerializer(serializers.ModelSerializer):
    """Minimal subgroup info for nested serialization."""

    class Meta:
        model = Subgroup
        fields = ['id', 'name']
        read_only_fields = fields


class SubgroupSerializer(serializers.ModelSerializer):
    """Main serializer for subgroups."""

    leaders = PersonMinimalSerializer(many=True, read_only=True)
    parent_group_name = serializers.CharField(source='parent_group.name', read_only=True)
    member_count = serializers.SerializerMethodField()

    class Meta:
        model = Subgroup
        fields = [
            'id',
            'name',
            'description',
            'parent_group',
            'parent_group_name',
            'leaders',
            'meeting_day',
            'meeting_time',
            'meeting_location',
            'is_active',
            'member_count',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_member_count(self, obj):
        return obj.memberships.count()


class SubgroupWriteSerializer(serializers.ModelSerializer):
    """Serializer for creating and updating subgroups."""

    parent_group = serializers.UUIDField(required=False)
    leaders = serializers.ListField(child=serializers.UUIDField(), required=False)

    class Meta:
        model = Subgroup
        fields = [
            'name',
            'description',
            'parent_group',
            'leaders',
            'meeting_day',
            'meeting_time',
            'meeting_location',
            'is_active',
        ]


class GroupSerializer(serializers.ModelSerializer):
    """Main serializer for groups."""

    leaders = PersonMinimalSerializer(many=True, read_only=True)
    subgroups = SubgroupSerializer(many=True, read_only=True)
    member_count = serializers.SerializerMethodField()

    class Meta:
        model = Group
        fields = [
            'id',
            'name',
            'description',
            'purpose',
            'meeting_frequency',
            'custom_frequency',
            'meeting_day',
            'meeting_time',
            'meeting_location',
            'is_active',
            'leaders',
            'subgroups',
            'member_count',
            'created_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_member_count(self, obj):
        """Get number of members in the group."""
        return obj.memberships.count()


class GroupListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    leaders = PersonMinimalSerializer(many=True, read_only=True)

    class Meta:
        model = Group
        fields = [
            'id',
            'name',
            'description',
            'purpose',
            'meeting_day',
            'meeting_time',
            'meeting_location',
            'is_active',
            'leaders',
        ]
        read_only_fields = fields


class GroupWriteSerializer(serializers.ModelSerializer):
    """Serializer for creating and updating groups."""

    leaders = serializers.ListField(child=serializers.UUIDField(), required=False)

    class Meta:
        model = Group
        fields = [
            'name',
            'description',
            'purpose',
            'meeting_frequency',
            'custom_frequency',
            'meeting_day',
            'meeting_time',
            'meeting_location',
            'is_active',
            'leaders',
        ]


class GroupMemberSerializer(serializers.ModelSerializer):
    """Detailed member information."""

    person = PersonMinimalSerializer(read_only=True)
    subgroup = SubgroupMinimalSerializer(read_only=True)
    group_name = serializers.CharField(source='group.name', read_only=True)

    class Meta:
        model = GroupMember
        fields = [
            'id',
            'person',
            'group',
            'group_name',
            'subgroup',
            'role',
            'join_date',
            'is_active',
            'notes',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class AddMemberSerializer(serializers.Serializer):
    """Serializer for adding a person to a group."""

    person_id = serializers.UUIDField()
    subgroup_id = serializers.UUIDField(required=False, allow_null=True)
    role = serializers.ChoiceField(choices=MemberRole.choices, default=MemberRole.MEMBER)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class UpdateMemberSerializer(serializers.Serializer):
    """Serializer for updating a membership; every field is optional."""

    subgroup_id = serializers.UUIDField(required=False, allow_null=True)
    role = serializers.ChoiceField(choices=MemberRole.choices, required=False)
    is_active = serializers.BooleanField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class AttendanceEntrySerializer(serializers.ModelSerializer):

    class Meta:
        model = AttendanceEntry
        fields = ['id', 'member', 'date', 'status', 'notes', 'recorded_at']
        read_only_fields = fields


class RecordAttendanceSerializer(serializers.Serializer):
    """Single attendance mark for one member."""

    date = serializers.DateField()
    status = serializers.ChoiceField(choices=AttendanceStatus.choices)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class AttendanceItemSerializer(serializers.Serializer):
    member_id = serializers.UUIDField()
    # Checked per record by the service so one bad entry doesn't fail the batch
    status = serializers.CharField()
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class BulkAttendanceSerializer(serializers.Serializer):
    """One date's attendance for several members."""

    date = serializers.DateField()
    attendance_data = AttendanceItemSerializer(many=True)


class AttendanceReportQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()

    def validate(self, attrs):
        if attrs['start_date'] > attrs['end_date']:
            raise serializers.ValidationError('start_date must not be after end_date')
        return attrs
