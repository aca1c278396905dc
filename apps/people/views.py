from django.http import HttpResponse
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.accounts.permissions import CanManagePeople, CanManageHouseholds, CanRegisterNewcomers
from .serializers import (
    PersonSerializer,
    PersonMinimalSerializer,
    QuickRegisterSerializer,
    ProfileImageUploadSerializer,
    PersonGroupsSerializer,
    HouseholdSerializer,
    HouseholdWriteSerializer,
)
from .services import (
    get_person,
    create_person,
    update_person,
    delete_person,
    search_people,
    quick_search_people,
    quick_register,
    set_profile_image,
    get_profile_image,
    get_person_groups,
    create_household,
    get_household,
    list_households,
    update_household,
    delete_household,
    # Exceptions
    PersonNotFoundError,
    HouseholdNotFoundError,
    EventNotFoundError,
    ProfileImageNotFoundError,
    InvalidImageError,
    PersonInUseError,
    PeopleValidationError,
)

UUID_REGEX = r'[0-9a-fA-F-]{36}'


class PeoplePagination(PageNumberPagination):
    """Custom pagination for people and households."""
    page_size = 10
    page_size_query_param = 'page_size'
    max_page_size = 100


class PersonViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Person CRUD operations.

    list: Paginated people, filtered by ``search`` and ``group_id``
    create / update / partial_update / destroy: requires manage_people
    """

    serializer_class = PersonSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = PeoplePagination
    lookup_value_regex = UUID_REGEX

    def get_queryset(self):
        """
        Filter people based on query parameters.

        Filters:
        - search: Search in first name, last name, email
        - group_id: Only members of this group
        """
        return search_people(
            search=self.request.query_params.get('search'),
            group_id=self.request.query_params.get('group_id') or None,
        )

    def get_permissions(self):
        """Set permissions based on action."""
        if self.action in ['create', 'update', 'partial_update', 'destroy', 'image_upload']:
            return [IsAuthenticated(), CanManagePeople()]
        if self.action == 'quick_register':
            return [IsAuthenticated(), CanRegisterNewcomers()]
        return [IsAuthenticated()]

    def retrieve(self, request, *args, **kwargs):
        try:
            person = get_person(person_id=self.kwargs['pk'])
        except PersonNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(PersonSerializer(person).data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            person = create_person(**serializer.validated_data)
        except PeopleValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PersonSerializer(person).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            person = update_person(person_id=self.kwargs['pk'], **serializer.validated_data)
        except PersonNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except PeopleValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PersonSerializer(person).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_person(person_id=self.kwargs['pk'])
        except PersonNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except PersonInUseError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        return Response({'message': 'Person deleted successfully'})

    @extend_schema(
        parameters=[
            OpenApiParameter('query', str, description='At least two characters'),
            OpenApiParameter('group', str, description='Leave out members of this group'),
        ],
        responses={200: PersonMinimalSerializer(many=True)},
    )
    @action(detail=False, methods=['get'])
    def search(self, request):
        """Typeahead search, at most ten results."""
        people = quick_search_people(
            query=request.query_params.get('query', ''),
            exclude_group_id=request.query_params.get('group') or None,
        )
        return Response({'people': PersonMinimalSerializer(people, many=True).data})

    @extend_schema(request=QuickRegisterSerializer, responses={201: PersonSerializer})
    @action(detail=False, methods=['post'], url_path='quick-register')
    def quick_register(self, request):
        """Register a newcomer at an event."""
        serializer = QuickRegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            person = quick_register(**serializer.validated_data)
        except EventNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except PeopleValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PersonSerializer(person).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: PersonGroupsSerializer})
    @action(detail=True, methods=['get'])
    def groups(self, request, pk=None):
        """Groups the person belongs to or leads."""
        try:
            overview = get_person_groups(person_id=pk)
        except PersonNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(PersonGroupsSerializer(overview).data)

    @action(detail=True, methods=['get'])
    def image(self, request, pk=None):
        """Serve the stored profile image."""
        try:
            content, content_type = get_profile_image(person_id=pk)
        except ProfileImageNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        response = HttpResponse(content, content_type=content_type)
        response['Cache-Control'] = 'public, max-age=3600'
        return response

    @extend_schema(request=ProfileImageUploadSerializer, responses={200: PersonSerializer})
    @image.mapping.put
    def image_upload(self, request, pk=None):
        """Upload a profile image (multipart, field ``profile_image``)."""
        serializer = ProfileImageUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            person = set_profile_image(person_id=pk, upload=serializer.validated_data['profile_image'])
        except PersonNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidImageError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PersonSerializer(person).data)


class HouseholdViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Household CRUD operations.

    Writes re-link Person.household for head, spouse and children.
    """

    serializer_class = HouseholdSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = PeoplePagination
    lookup_value_regex = UUID_REGEX

    def get_queryset(self):
        return list_households()

    def get_serializer_class(self):
        if self.action in ['create', 'update', 'partial_update']:
            return HouseholdWriteSerializer
        return HouseholdSerializer

    def get_permissions(self):
        if self.action in ['create', 'update', 'partial_update', 'destroy']:
            return [IsAuthenticated(), CanManageHouseholds()]
        return [IsAuthenticated()]

    def retrieve(self, request, *args, **kwargs):
        try:
            household = get_household(household_id=self.kwargs['pk'])
        except HouseholdNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(HouseholdSerializer(household).data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            household = create_household(**serializer.to_service_kwargs())
        except PersonNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except PeopleValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(HouseholdSerializer(household).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            household = update_household(
                household_id=self.kwargs['pk'],
                **serializer.to_service_kwargs()
            )
        except (HouseholdNotFoundError, PersonNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except PeopleValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(HouseholdSerializer(household).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_household(household_id=self.kwargs['pk'])
        except HouseholdNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response({'message': 'Household deleted successfully'})
