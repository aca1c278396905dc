from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from .models import Group
from .serializers import (
    GroupSerializer,
    GroupListSerializer,
    GroupWriteSerializer,
    SubgroupSerializer,
    SubgroupWriteSerializer,
    GroupMemberSerializer,
    AddMemberSerializer,
    UpdateMemberSerializer,
    AttendanceEntrySerializer,
    RecordAttendanceSerializer,
    BulkAttendanceSerializer,
    AttendanceReportQuerySerializer,
)
from .permissions import CanManageGroups, CanAccessGroup, CanAccessSubgroup

from apps.groups.services import (
    create_group,
    update_group,
    list_groups,
    groups_by_interest,
    group_stats,
    create_subgroup,
    update_subgroup,
    list_subgroups,
    add_member,
    add_person_to_subgroup,
    remove_person_from_subgroup,
    remove_member,
    update_member,
    get_group_members,
    get_subgroup_members,
    record_attendance,
    record_bulk_attendance,
    get_attendance_report,
    delete_group,
    delete_subgroup,
    # Exceptions
    NotFoundError,
    DuplicateMembershipError,
    InvalidSubgroupAssignmentError,
    SubgroupGroupMismatchError,
    InsufficientPermissionsError,
    GroupValidationError,
)

UUID_REGEX = r'[0-9a-fA-F-]{36}'

BAD_REQUEST_ERRORS = (
    DuplicateMembershipError,
    InvalidSubgroupAssignmentError,
    SubgroupGroupMismatchError,
    GroupValidationError,
)


class GroupPagination(PageNumberPagination):
    """Custom pagination for groups."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


def _split_leaders(validated_data):
    data = dict(validated_data)
    return data.pop('leaders', None), data


class GroupViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Group CRUD operations.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Get all groups of the user's church
    create: Create a new group (group administrators)
    retrieve: Get a specific group with leaders and subgroups
    update: Update a group (administrators or group leaders)
    partial_update: Same as update
    destroy: Delete a group with its subgroups and memberships
    """

    serializer_class = GroupSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = GroupPagination
    lookup_value_regex = UUID_REGEX

    def get_queryset(self):
        """Return only groups of the user's church."""
        if self.action == 'list':
            return list_groups(actor=self.request.user)
        return (
            Group.objects
            .filter(church_id=self.request.user.church_id)
            .prefetch_related('leaders', 'subgroups__leaders')
        )

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'list':
            return GroupListSerializer
        elif self.action in ['create', 'update', 'partial_update']:
            return GroupWriteSerializer
        return GroupSerializer

    def get_permissions(self):
        """Set permissions based on action."""
        if self.action in ['create', 'destroy']:
            return [IsAuthenticated(), CanManageGroups()]
        if self.action in ['update', 'partial_update']:
            return [IsAuthenticated(), CanAccessGroup()]
        return [IsAuthenticated()]

    def create(self, request, *args, **kwargs):
        """Create a new group."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        leader_ids, fields = _split_leaders(serializer.validated_data)

        try:
            group = create_group(actor=request.user, leader_ids=leader_ids, **fields)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except GroupValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        output_serializer = GroupSerializer(group, context={'request': request})
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        """Update a group. PUT and PATCH both accept partial bodies."""
        group = self.get_object()
        serializer = self.get_serializer(group, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        leader_ids, fields = _split_leaders(serializer.validated_data)

        try:
            group = update_group(
                group_id=group.id,
                actor=request.user,
                leader_ids=leader_ids,
                **fields
            )
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except GroupValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(GroupSerializer(group, context={'request': request}).data)

    def destroy(self, request, *args, **kwargs):
        """Delete a group and everything hanging off it."""
        try:
            delete_group(group_id=self.kwargs['pk'], actor=request.user)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response({'message': 'Group deleted'}, status=status.HTTP_200_OK)

    @action(detail=False, methods=['get'])
    def stats(self, request):
        """Group counts for the dashboard."""
        return Response(group_stats(actor=request.user))

    @action(detail=False, methods=['get'], url_path=r'by-interest/(?P<interest>[^/]+)')
    def by_interest(self, request, interest=None):
        """Active groups whose purpose matches an interest."""
        groups = groups_by_interest(interest=interest, actor=request.user)
        serializer = GroupListSerializer(groups, many=True)
        return Response(serializer.data)

    @extend_schema(request=AddMemberSerializer, responses={200: GroupMemberSerializer(many=True)})
    @action(detail=True, methods=['get', 'post'])
    def members(self, request, pk=None):
        """GET lists members; POST adds a person to the group."""
        if request.method == 'GET':
            try:
                memberships = get_group_members(group_id=pk, actor=request.user)
            except NotFoundError as e:
                return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
            return Response(GroupMemberSerializer(memberships, many=True).data)

        serializer = AddMemberSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            membership = add_member(group_id=pk, actor=request.user, **serializer.validated_data)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except BAD_REQUEST_ERRORS as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(GroupMemberSerializer(membership).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=BulkAttendanceSerializer)
    @action(detail=True, methods=['get', 'post'])
    def attendance(self, request, pk=None):
        """GET returns the attendance report; POST records one date for many members."""
        if request.method == 'GET':
            query = AttendanceReportQuerySerializer(data=request.query_params)
            query.is_valid(raise_exception=True)
            try:
                report = get_attendance_report(group_id=pk, actor=request.user, **query.validated_data)
            except InsufficientPermissionsError as e:
                return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
            except NotFoundError as e:
                return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
            return Response(report)

        serializer = BulkAttendanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            results = record_bulk_attendance(
                group_id=pk,
                date=serializer.validated_data['date'],
                records=serializer.validated_data['attendance_data'],
                actor=request.user,
            )
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(results)

    @extend_schema(request=SubgroupWriteSerializer, responses={201: SubgroupSerializer})
    @action(detail=True, methods=['post'])
    def subgroups(self, request, pk=None):
        """Create a subgroup within this group."""
        serializer = SubgroupWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        leader_ids, fields = _split_leaders(serializer.validated_data)
        fields.pop('parent_group', None)

        try:
            subgroup = create_subgroup(
                parent_group_id=pk,
                actor=request.user,
                leader_ids=leader_ids,
                **fields
            )
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except GroupValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(SubgroupSerializer(subgroup).data, status=status.HTTP_201_CREATED)


class GroupMemberViewSet(viewsets.ViewSet):
    """
    Membership operations addressed by membership id.

    PUT/PATCH  /api/groups/members/{id}/             - Update role, status, notes, subgroup
    DELETE     /api/groups/members/{id}/             - Remove from the group
    POST       /api/groups/members/{id}/attendance/  - Record one attendance entry
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_REGEX

    @extend_schema(request=UpdateMemberSerializer, responses={200: GroupMemberSerializer})
    def update(self, request, pk=None):
        serializer = UpdateMemberSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            membership = update_member(member_id=pk, actor=request.user, **serializer.validated_data)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except BAD_REQUEST_ERRORS as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(GroupMemberSerializer(membership).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        try:
            remove_member(member_id=pk, actor=request.user)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response({'message': 'Member removed from group'})

    @extend_schema(request=RecordAttendanceSerializer, responses={201: AttendanceEntrySerializer})
    @action(detail=True, methods=['post'])
    def attendance(self, request, pk=None):
        serializer = RecordAttendanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            entry = record_attendance(member_id=pk, actor=request.user, **serializer.validated_data)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except GroupValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(AttendanceEntrySerializer(entry).data, status=status.HTTP_201_CREATED)


class SubgroupViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Subgroup CRUD operations.

    list: All subgroups of the user's church
    create: Create a subgroup (body carries parent_group)
    retrieve / update / partial_update / destroy: by subgroup id
    """

    serializer_class = SubgroupSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_REGEX

    def get_queryset(self):
        return list_subgroups(actor=self.request.user)

    def get_serializer_class(self):
        if self.action in ['create', 'update', 'partial_update']:
            return SubgroupWriteSerializer
        return SubgroupSerializer

    def get_permissions(self):
        if self.action in ['update', 'partial_update']:
            return [IsAuthenticated(), CanAccessSubgroup()]
        return [IsAuthenticated()]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        leader_ids, fields = _split_leaders(serializer.validated_data)

        parent_group_id = fields.pop('parent_group', None)
        if not parent_group_id:
            return Response({'error': 'parent_group is required'}, status=status.HTTP_400_BAD_REQUEST)

        try:
            subgroup = create_subgroup(
                parent_group_id=parent_group_id,
                actor=request.user,
                leader_ids=leader_ids,
                **fields
            )
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except GroupValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(SubgroupSerializer(subgroup).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        subgroup = self.get_object()
        serializer = self.get_serializer(subgroup, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        leader_ids, fields = _split_leaders(serializer.validated_data)
        # Moving a subgroup to another group is not supported
        fields.pop('parent_group', None)

        try:
            subgroup = update_subgroup(
                subgroup_id=subgroup.id,
                actor=request.user,
                leader_ids=leader_ids,
                **fields
            )
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except GroupValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(SubgroupSerializer(subgroup).data)

    def destroy(self, request, *args, **kwargs):
        """Delete a subgroup; its members stay in the parent group."""
        try:
            delete_subgroup(subgroup_id=self.kwargs['pk'], actor=request.user)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response({'message': 'Subgroup deleted'})

    @action(detail=False, methods=['get'], url_path=r'by-group/(?P<group_id>[0-9a-fA-F-]{36})')
    def by_group(self, request, group_id=None):
        subgroups = list_subgroups(actor=request.user, parent_group_id=group_id)
        return Response(SubgroupSerializer(subgroups, many=True).data)

    @action(detail=True, methods=['get'])
    def members(self, request, pk=None):
        try:
            memberships = get_subgroup_members(subgroup_id=pk, actor=request.user)
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(GroupMemberSerializer(memberships, many=True).data)

    @action(
        detail=True,
        methods=['post', 'delete'],
        url_path=r'members/(?P<person_id>[0-9a-fA-F-]{36})',
    )
    def member(self, request, pk=None, person_id=None):
        """POST puts a parent-group member into the subgroup; DELETE takes them out."""
        try:
            if request.method == 'POST':
                membership = add_person_to_subgroup(
                    subgroup_id=pk, person_id=person_id, actor=request.user
                )
                return Response(GroupMemberSerializer(membership).data)

            remove_person_from_subgroup(subgroup_id=pk, person_id=person_id, actor=request.user)
            return Response({'message': 'Member removed from subgroup'})
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidSubgroupAssignmentError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    @extend_schema(request=BulkAttendanceSerializer)
    @action(detail=True, methods=['get', 'post'])
    def attendance(self, request, pk=None):
        if request.method == 'GET':
            query = AttendanceReportQuerySerializer(data=request.query_params)
            query.is_valid(raise_exception=True)
            try:
                report = get_attendance_report(subgroup_id=pk, actor=request.user, **query.validated_data)
            except InsufficientPermissionsError as e:
                return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
            except NotFoundError as e:
                return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
            return Response(report)

        serializer = BulkAttendanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            results = record_bulk_attendance(
                subgroup_id=pk,
                date=serializer.validated_data['date'],
                records=serializer.validated_data['attendance_data'],
                actor=request.user,
            )
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(results)
