from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.accounts.permissions import CanManageEvents
from .serializers import (
    EventSerializer,
    EventWriteSerializer,
    EventFilterSerializer,
    CheckInRequestSerializer,
    CheckInSerializer,
    AttendeeSerializer,
    NewcomerSerializer,
)
from .services import (
    get_event,
    create_event,
    update_event,
    delete_event,
    list_events,
    check_in_person,
    get_event_attendance,
    search_attendees,
    get_newcomers,
    # Exceptions
    EventNotFoundError,
    PersonNotFoundError,
    AlreadyCheckedInError,
    CheckInNotAllowedError,
    EventValidationError,
)


class EventPagination(PageNumberPagination):
    """Pagination for the event list."""
    page_size = 10
    page_size_query_param = 'page_size'
    max_page_size = 100


class EventViewSet(viewsets.ModelViewSet):
    """
    ViewSet for events and check-ins.

    list: Paginated, filtered by ``status``, ``start_date`` and ``end_date``
    create / update / partial_update / destroy: requires manage_events
    check_in: admins, perform_check_in holders and the event's check-in staff
    """

    serializer_class = EventSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = EventPagination
    lookup_value_regex = r'[0-9a-fA-F-]{36}'

    def get_queryset(self):
        filters = EventFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return list_events(**filters.validated_data)

    def get_serializer_class(self):
        if self.action in ['create', 'update', 'partial_update']:
            return EventWriteSerializer
        return EventSerializer

    def get_permissions(self):
        if self.action in ['create', 'update', 'partial_update', 'destroy']:
            return [IsAuthenticated(), CanManageEvents()]
        return [IsAuthenticated()]

    @extend_schema(
        parameters=[
            OpenApiParameter('status', str),
            OpenApiParameter('start_date', str, description='YYYY-MM-DD, inclusive'),
            OpenApiParameter('end_date', str, description='YYYY-MM-DD, inclusive'),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def retrieve(self, request, *args, **kwargs):
        try:
            event = get_event(event_id=self.kwargs['pk'])
        except EventNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(EventSerializer(event).data)

    @extend_schema(request=EventWriteSerializer, responses={201: EventSerializer})
    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            event = create_event(**serializer.to_service_kwargs())
        except EventValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=EventWriteSerializer, responses={200: EventSerializer})
    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            event = update_event(event_id=self.kwargs['pk'], **serializer.to_service_kwargs())
        except EventNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except EventValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(EventSerializer(event).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_event(event_id=self.kwargs['pk'])
        except EventNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response({'message': 'Event deleted successfully'})

    @extend_schema(request=CheckInRequestSerializer, responses={201: CheckInSerializer})
    @action(detail=True, methods=['post'], url_path='check-in')
    def check_in(self, request, pk=None):
        """Check a person in to this event."""
        serializer = CheckInRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            check_in = check_in_person(
                event_id=pk,
                person_id=serializer.validated_data['person_id'],
                actor=request.user,
            )
        except (EventNotFoundError, PersonNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except CheckInNotAllowedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except AlreadyCheckedInError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(CheckInSerializer(check_in).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: CheckInSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def attendance(self, request, pk=None):
        """Everyone checked in to this event, latest first."""
        try:
            check_ins = get_event_attendance(event_id=pk)
        except EventNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(CheckInSerializer(check_ins, many=True).data)

    @extend_schema(
        parameters=[OpenApiParameter('phone', str, required=True)],
        responses={200: AttendeeSerializer(many=True)},
    )
    @action(detail=True, methods=['get'], url_path='search-attendees')
    def search_attendees(self, request, pk=None):
        """Phone lookup at the check-in desk, whole households included."""
        try:
            people = search_attendees(event_id=pk, phone=request.query_params.get('phone', ''))
        except EventNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except EventValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(AttendeeSerializer(people, many=True).data)

    @extend_schema(responses={200: NewcomerSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def newcomers(self, request, pk=None):
        """People first registered at this event."""
        try:
            people = get_newcomers(event_id=pk)
        except EventNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(NewcomerSerializer(people, many=True).data)
