from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password

from apps.groups.models import Group, Subgroup
from apps.people.serializers import PersonMinimalSerializer
from .models import ChurchUser, Permission, Role


class _LeadershipGroupSerializer(serializers.ModelSerializer):

    class Meta:
        model = Group
        fields = ['id', 'name']
        read_only_fields = fields


class _LeadershipSubgroupSerializer(serializers.ModelSerializer):

    class Meta:
        model = Subgroup
        fields = ['id', 'name', 'parent_group']
        read_only_fields = fields


class ChurchUserSerializer(serializers.ModelSerializer):
    """Church account with person and leaderships expanded."""

    person = PersonMinimalSerializer(read_only=True)
    group_leaderships = _LeadershipGroupSerializer(many=True, read_only=True)
    subgroup_leaderships = _LeadershipSubgroupSerializer(many=True, read_only=True)

    class Meta:
        model = ChurchUser
        fields = [
            'id',
            'username',
            'role',
            'permissions',
            'person',
            'church',
            'group_leaderships',
            'subgroup_leaderships',
            'is_active',
            'last_login',
            'created_at',
        ]
        read_only_fields = fields


class ChurchUserCreateSerializer(serializers.Serializer):
    """Serializer for creating a church account."""

    username = serializers.CharField(max_length=150)
    password = serializers.CharField(
        write_only=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    person_id = serializers.UUIDField()
    role = serializers.ChoiceField(choices=Role.choices, default=Role.USER)
    church_id = serializers.UUIDField(required=False, allow_null=True)


class ChurchUserUpdateSerializer(serializers.Serializer):
    """Serializer for updating a church account. Every field is optional."""

    username = serializers.CharField(max_length=150, required=False)
    password = serializers.CharField(
        write_only=True,
        required=False,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    role = serializers.ChoiceField(choices=Role.choices, required=False)
    is_active = serializers.BooleanField(required=False)
    church_id = serializers.UUIDField(required=False)


class ChurchUserSearchSerializer(serializers.ModelSerializer):
    """Compact search result."""

    name = serializers.CharField(source='get_display_name', read_only=True)
    email = serializers.EmailField(source='person.email', read_only=True)
    group_leaderships = _LeadershipGroupSerializer(many=True, read_only=True)

    class Meta:
        model = ChurchUser
        fields = ['id', 'username', 'name', 'email', 'role', 'group_leaderships']
        read_only_fields = fields


class UpdatePermissionsSerializer(serializers.Serializer):
    permissions = serializers.ListField(
        child=serializers.ChoiceField(choices=Permission.ALL),
        allow_empty=True,
    )


class GroupLeadershipSerializer(serializers.Serializer):
    """Body for assigning or removing a group leader."""

    user_id = serializers.UUIDField()
    group_id = serializers.UUIDField()


class SubgroupLeadershipSerializer(serializers.Serializer):
    """Body for assigning or removing a subgroup leader."""

    user_id = serializers.UUIDField()
    subgroup_id = serializers.UUIDField()


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    username = serializers.CharField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )
