from rest_framework import status, viewsets, serializers
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.groups.services import (
    assign_group_leadership,
    remove_group_leadership,
    assign_subgroup_leadership,
    remove_subgroup_leadership,
    can_access_group,
    NotFoundError,
    InsufficientPermissionsError,
)
from apps.people.services import PersonNotFoundError
from .permissions import CanManageUsers
from .serializers import (
    ChurchUserSerializer,
    ChurchUserCreateSerializer,
    ChurchUserUpdateSerializer,
    ChurchUserSearchSerializer,
    UpdatePermissionsSerializer,
    GroupLeadershipSerializer,
    SubgroupLeadershipSerializer,
    UserLoginSerializer,
)
from .services import (
    authenticate_user,
    issue_tokens,
    get_church_user,
    list_church_users,
    create_church_user,
    update_church_user,
    delete_church_user,
    search_church_users,
    update_permissions,
    InvalidCredentialsError,
    InactiveAccountError,
    ChurchUserNotFoundError,
    AccountValidationError,
)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = ChurchUserSerializer()
    tokens = TokensResponseSerializer()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


class GroupPermissionResponseSerializer(serializers.Serializer):
    has_permission = serializers.BooleanField()


class LeadershipResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = ChurchUserSerializer()


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with username and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with username and password."""
    serializer = UserLoginSerializer(data=request.data)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        user = authenticate_user(**serializer.validated_data)
    except InvalidCredentialsError as e:
        return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
    except InactiveAccountError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response({
        'message': 'Login successful',
        'user': ChurchUserSerializer(get_church_user(user_id=user.id)).data,
        'tokens': issue_tokens(user),
    })


@extend_schema(
    responses={200: ChurchUserSerializer},
    description="Get the current authenticated account.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get current authenticated account."""
    return Response(ChurchUserSerializer(get_church_user(user_id=request.user.id)).data)


@extend_schema(
    responses={200: GroupPermissionResponseSerializer},
    description="Whether the current account may manage the given group.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def validate_group_permission(request, group_id):
    """Admins, manage_groups holders and leaders of the group pass."""
    return Response({'has_permission': can_access_group(request.user, group_id)})


class ChurchUserPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class ChurchUserViewSet(viewsets.ViewSet):
    """
    ViewSet for church accounts.

    Reads are open to authenticated accounts; writes need manage_users.
    Leadership actions are checked by the groups services.
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r'[0-9a-fA-F-]{36}'

    def get_permissions(self):
        if self.action in ['create', 'update', 'partial_update', 'destroy', 'update_permissions']:
            return [IsAuthenticated(), CanManageUsers()]
        return [IsAuthenticated()]

    @extend_schema(responses={200: ChurchUserSerializer(many=True)})
    def list(self, request):
        paginator = ChurchUserPagination()
        page = paginator.paginate_queryset(list_church_users(), request, view=self)
        return paginator.get_paginated_response(ChurchUserSerializer(page, many=True).data)

    @extend_schema(responses={200: ChurchUserSerializer})
    def retrieve(self, request, pk=None):
        try:
            user = get_church_user(user_id=pk)
        except ChurchUserNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(ChurchUserSerializer(user).data)

    @extend_schema(request=ChurchUserCreateSerializer, responses={201: ChurchUserSerializer})
    def create(self, request):
        serializer = ChurchUserCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            user = create_church_user(**serializer.validated_data)
        except PersonNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except AccountValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            ChurchUserSerializer(get_church_user(user_id=user.id)).data,
            status=status.HTTP_201_CREATED
        )

    @extend_schema(request=ChurchUserUpdateSerializer, responses={200: ChurchUserSerializer})
    def update(self, request, pk=None):
        serializer = ChurchUserUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            user = update_church_user(user_id=pk, **serializer.validated_data)
        except ChurchUserNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except AccountValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ChurchUserSerializer(user).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        try:
            delete_church_user(user_id=pk)
        except ChurchUserNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response({'message': 'User deleted successfully'})

    @extend_schema(
        parameters=[
            OpenApiParameter('query', str, description='At least two characters'),
            OpenApiParameter('role', str, description='Only accounts with this role'),
        ],
        responses={200: ChurchUserSearchSerializer(many=True)},
    )
    @action(detail=False, methods=['get'])
    def search(self, request):
        """Search accounts by username or person name."""
        users = search_church_users(
            query=request.query_params.get('query', ''),
            role=request.query_params.get('role') or None,
        )
        return Response({'users': ChurchUserSearchSerializer(users, many=True).data})

    @extend_schema(request=UpdatePermissionsSerializer, responses={200: ChurchUserSerializer})
    @action(detail=True, methods=['put'], url_path='update-permissions')
    def update_permissions(self, request, pk=None):
        """Override the permission list derived from the role."""
        serializer = UpdatePermissionsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            user = update_permissions(user_id=pk, permissions=serializer.validated_data['permissions'])
        except ChurchUserNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except AccountValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ChurchUserSerializer(user).data)

    def _leadership_change(self, request, serializer_class, service, target_field, message):
        serializer = serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            user = service(
                church_user_id=data['user_id'],
                actor=request.user,
                **{target_field: data[target_field]}
            )
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response({
            'message': message,
            'user': ChurchUserSerializer(get_church_user(user_id=user.id)).data,
        })

    @extend_schema(request=GroupLeadershipSerializer, responses={200: LeadershipResponseSerializer})
    @action(detail=False, methods=['post'], url_path='assign-group-leadership')
    def assign_group_leadership(self, request):
        return self._leadership_change(
            request, GroupLeadershipSerializer, assign_group_leadership,
            'group_id', 'Group leadership assigned successfully',
        )

    @extend_schema(request=GroupLeadershipSerializer, responses={200: LeadershipResponseSerializer})
    @action(detail=False, methods=['post'], url_path='remove-group-leadership')
    def remove_group_leadership(self, request):
        return self._leadership_change(
            request, GroupLeadershipSerializer, remove_group_leadership,
            'group_id', 'Group leadership removed successfully',
        )

    @extend_schema(request=SubgroupLeadershipSerializer, responses={200: LeadershipResponseSerializer})
    @action(detail=False, methods=['post'], url_path='assign-subgroup-leadership')
    def assign_subgroup_leadership(self, request):
        return self._leadership_change(
            request, SubgroupLeadershipSerializer, assign_subgroup_leadership,
            'subgroup_id', 'Subgroup leadership assigned successfully',
        )

    @extend_schema(request=SubgroupLeadershipSerializer, responses={200: LeadershipResponseSerializer})
    @action(detail=False, methods=['post'], url_path='remove-subgroup-leadership')
    def remove_subgroup_leadership(self, request):
        return self._leadership_change(
            request, SubgroupLeadershipSerializer, remove_subgroup_leadership,
            'subgroup_id', 'Subgroup leadership removed successfully',
        )
