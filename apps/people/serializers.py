from rest_framework import serializers

from apps.groups.models import Group, Subgroup, GroupMember
from .models import Person, Household, Gender


class PersonMinimalSerializer(serializers.ModelSerializer):
    """Minimal person info for nested serialization."""

    class Meta:
        model = Person
        fields = ['id', 'first_name', 'last_name', 'full_name', 'email', 'phone']
        read_only_fields = fields


class PersonSerializer(serializers.ModelSerializer):
    """Main serializer for people. The image itself is served separately."""

    group_interests = serializers.ListField(
        child=serializers.CharField(max_length=100),
        required=False,
    )
    has_profile_image = serializers.BooleanField(read_only=True)

    class Meta:
        model = Person
        fields = [
            'id',
            'first_name',
            'last_name',
            'full_name',
            'date_of_birth',
            'gender',
            'phone',
            'email',
            'has_profile_image',
            'household',
            'invited_by',
            'registered_event',
            'registration_date',
            'group_interests',
            'created_at',
            'updated_at',
        ]
        read_only_fields = [
            'id',
            'full_name',
            'household',
            'registered_event',
            'registration_date',
            'created_at',
            'updated_at',
        ]


class QuickRegisterSerializer(serializers.Serializer):
    """Newcomer registration at an event."""

    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    gender = serializers.ChoiceField(choices=Gender.choices)
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True, default='')
    invited_by = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    event_id = serializers.UUIDField(required=False, allow_null=True)
    group_interests = serializers.ListField(
        child=serializers.CharField(max_length=100),
        required=False,
        default=list,
    )


class ProfileImageUploadSerializer(serializers.Serializer):
    # Content type and size are checked by the service
    profile_image = serializers.FileField()


class _GroupBriefSerializer(serializers.ModelSerializer):

    class Meta:
        model = Group
        fields = ['id', 'name', 'description', 'meeting_day', 'meeting_time']
        read_only_fields = fields


class _SubgroupBriefSerializer(serializers.ModelSerializer):

    class Meta:
        model = Subgroup
        fields = ['id', 'name', 'description', 'meeting_day', 'meeting_time', 'parent_group']
        read_only_fields = fields


class _MembershipBriefSerializer(serializers.ModelSerializer):
    group = _GroupBriefSerializer(read_only=True)
    subgroup = _SubgroupBriefSerializer(read_only=True)

    class Meta:
        model = GroupMember
        fields = ['id', 'group', 'subgroup', 'role', 'join_date']
        read_only_fields = fields


class PersonGroupsSerializer(serializers.Serializer):
    """A person's memberships and leaderships."""

    as_member = _MembershipBriefSerializer(many=True, read_only=True)
    as_leader = _GroupBriefSerializer(many=True, read_only=True)
    as_subgroup_leader = _SubgroupBriefSerializer(many=True, read_only=True)


class HouseholdSerializer(serializers.ModelSerializer):
    """Household with members expanded."""

    head_of_household = PersonMinimalSerializer(read_only=True)
    spouse = PersonMinimalSerializer(read_only=True)
    children = PersonMinimalSerializer(many=True, read_only=True)

    class Meta:
        model = Household
        fields = [
            'id',
            'head_of_household',
            'spouse',
            'children',
            'family_image',
            'street',
            'city',
            'state',
            'zip_code',
            'primary_phone',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class HouseholdWriteSerializer(serializers.Serializer):
    """Serializer for creating and updating households."""

    head_of_household = serializers.UUIDField()
    spouse = serializers.UUIDField(required=False, allow_null=True)
    children = serializers.ListField(child=serializers.UUIDField(), required=False)
    family_image = serializers.URLField(required=False, allow_null=True, allow_blank=True)
    street = serializers.CharField(max_length=200, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    state = serializers.CharField(max_length=100, required=False, allow_blank=True)
    zip_code = serializers.CharField(max_length=20, required=False, allow_blank=True)
    primary_phone = serializers.CharField(max_length=30)

    def to_service_kwargs(self):
        """Map API field names onto household service arguments."""
        data = dict(self.validated_data)
        kwargs = {}
        if 'head_of_household' in data:
            kwargs['head_of_household_id'] = data.pop('head_of_household')
        if 'spouse' in data:
            kwargs['spouse_id'] = data.pop('spouse')
        if 'children' in data:
            kwargs['child_ids'] = data.pop('children')
        kwargs.update(data)
        return kwargs
