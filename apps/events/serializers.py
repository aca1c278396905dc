from rest_framework import serializers

from apps.accounts.models import ChurchUser
from apps.people.models import Person
from .models import Event, CheckIn, EventStatus, RecurringFrequency


class _StaffSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source='get_display_name', read_only=True)

    class Meta:
        model = ChurchUser
        fields = ['id', 'username', 'name']
        read_only_fields = fields


class EventSerializer(serializers.ModelSerializer):
    """Event with staff expanded and attendance counted."""

    event_in_charge = _StaffSerializer(many=True, read_only=True)
    check_in_in_charge = _StaffSerializer(many=True, read_only=True)
    total_attendance = serializers.SerializerMethodField()

    class Meta:
        model = Event
        fields = [
            'id',
            'name',
            'description',
            'start_datetime',
            'end_datetime',
            'status',
            'is_recurring',
            'recurring_frequency',
            'recurring_days',
            'recurring_end_date',
            'event_in_charge',
            'check_in_in_charge',
            'total_attendance',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_total_attendance(self, obj) -> int:
        count = getattr(obj, 'attendance_count', None)
        if count is None:
            return obj.total_attendance
        return count


class EventWriteSerializer(serializers.Serializer):
    """Serializer for creating and updating events."""

    name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True)
    start_datetime = serializers.DateTimeField()
    end_datetime = serializers.DateTimeField()
    status = serializers.ChoiceField(choices=EventStatus.choices, required=False)
    is_recurring = serializers.BooleanField(required=False)
    recurring_frequency = serializers.ChoiceField(
        choices=RecurringFrequency.choices,
        required=False,
        allow_blank=True,
    )
    recurring_days = serializers.ListField(child=serializers.CharField(max_length=20), required=False)
    recurring_end_date = serializers.DateField(required=False, allow_null=True)
    event_in_charge = serializers.ListField(child=serializers.UUIDField(), required=False)
    check_in_in_charge = serializers.ListField(child=serializers.UUIDField(), required=False)

    def to_service_kwargs(self):
        data = dict(self.validated_data)
        if 'event_in_charge' in data:
            data['event_in_charge_ids'] = data.pop('event_in_charge')
        if 'check_in_in_charge' in data:
            data['check_in_in_charge_ids'] = data.pop('check_in_in_charge')
        return data


class EventFilterSerializer(serializers.Serializer):
    """Query parameters for the event list."""

    status = serializers.ChoiceField(choices=EventStatus.choices, required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)


class CheckInRequestSerializer(serializers.Serializer):
    person_id = serializers.UUIDField()


class CheckInSerializer(serializers.ModelSerializer):
    """A check-in with names resolved."""

    person_name = serializers.CharField(source='person.full_name', read_only=True)
    checked_in_by_name = serializers.SerializerMethodField()

    class Meta:
        model = CheckIn
        fields = [
            'id',
            'event',
            'person',
            'person_name',
            'checked_in_by',
            'checked_in_by_name',
            'check_in_time',
        ]
        read_only_fields = fields

    def get_checked_in_by_name(self, obj) -> str:
        if obj.checked_in_by is None:
            return 'Unknown'
        return obj.checked_in_by.get_display_name()


class AttendeeSerializer(serializers.ModelSerializer):
    """Check-in desk search result."""

    checked_in = serializers.BooleanField(read_only=True)

    class Meta:
        model = Person
        fields = ['id', 'first_name', 'last_name', 'phone', 'household', 'checked_in']
        read_only_fields = fields


class NewcomerSerializer(serializers.ModelSerializer):

    class Meta:
        model = Person
        fields = [
            'id',
            'first_name',
            'last_name',
            'phone',
            'invited_by',
            'registration_date',
            'group_interests',
        ]
        read_only_fields = fields
