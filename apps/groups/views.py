from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .models import Group
from .permissions import IsGroupMember
from .serializers import (
    GroupSerializer,
    GroupCreateSerializer,
    GroupUpdateSerializer,
    GroupListSerializer,
    GroupMemberSerializer,
    JoinGroupSerializer,
)

from apps.groups.services import (
    create_group,
    update_group,
    delete_group,
    get_group_by_id,
    join_group,
    leave_group,
    get_group_members,
    get_membership,
    regenerate_invite_code,
    get_group_by_invite_code,
)
from apps.ledger.serializers import LogFailureSerializer, FailureResultSerializer
from apps.ledger.services import log_failure as log_group_failure, get_shame_leaderboard
from common.exceptions import (
    NotFoundError,
    UnauthorizedError,
    InvalidStateError,
    TransientStoreError,
)


class GroupPagination(PageNumberPagination):
    """Custom pagination for groups."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class GroupViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Group CRUD operations.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Get all groups (user is member of)
    create: Create a new group
    retrieve: Get a specific group (members only)
    partial_update: Update a group (owner only)
    destroy: Delete a group (owner only)
    """

    serializer_class = GroupSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = GroupPagination
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        """Return only groups where user is a member."""
        user = self.request.user
        return Group.objects.filter(
            memberships__user=user
        ).select_related('created_by').prefetch_related('memberships').distinct()

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'list':
            return GroupListSerializer
        elif self.action == 'create':
            return GroupCreateSerializer
        elif self.action == 'partial_update':
            return GroupUpdateSerializer
        return GroupSerializer

    def create(self, request, *args, **kwargs):
        """Create a new group; the creator becomes its owner."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        group = create_group(
            name=serializer.validated_data['name'],
            created_by=request.user,
            description=serializer.validated_data.get('description', ''),
            default_penalty_amount=serializer.validated_data.get('default_penalty_amount'),
        )

        output_serializer = GroupSerializer(group, context={'request': request})
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, *args, **kwargs):
        """Get group details (members only)."""
        try:
            get_membership(group_id=self.kwargs['pk'], user=request.user)
            group = get_group_by_id(group_id=self.kwargs['pk'])
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except UnauthorizedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(GroupSerializer(group, context={'request': request}).data)

    def partial_update(self, request, *args, **kwargs):
        """Update name, description or default penalty (owner only)."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            group = update_group(
                group_id=self.kwargs['pk'],
                user=request.user,
                **serializer.validated_data
            )
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except UnauthorizedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(GroupSerializer(group, context={'request': request}).data)

    def destroy(self, request, *args, **kwargs):
        """Delete a group."""
        try:
            delete_group(group_id=self.kwargs['pk'], user=request.user)
            return Response(status=status.HTTP_204_NO_CONTENT)
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidStateError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    @action(detail=True, methods=['get'], permission_classes=[IsAuthenticated, IsGroupMember])
    def members(self, request, pk=None):
        """Get all members of the group with their balances."""
        group = self.get_object()
        memberships = get_group_members(group_id=group.id)
        serializer = GroupMemberSerializer(memberships, many=True)
        return Response(serializer.data)

    @extend_schema(request=JoinGroupSerializer, responses={201: GroupMemberSerializer})
    @action(detail=False, methods=['post'])
    def join(self, request):
        """Join a group using its invite code."""
        serializer = JoinGroupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            membership = join_group(
                invite_code=serializer.validated_data['invite_code'],
                user=request.user,
            )
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidStateError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        output_serializer = GroupMemberSerializer(membership)
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @extend_schema(
        parameters=[OpenApiParameter('code', str, required=True)],
        responses={200: GroupListSerializer},
    )
    @action(detail=False, methods=['get'])
    def preview(self, request):
        """Show which group an invite code belongs to before joining."""
        code = request.query_params.get('code')
        if not code:
            return Response(
                {'error': 'code is required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            group = get_group_by_invite_code(invite_code=code)
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(GroupListSerializer(group).data)

    @action(detail=True, methods=['post'])
    def leave(self, request, pk=None):
        """Leave a group."""
        try:
            leave_group(group_id=pk, user=request.user)
            return Response(status=status.HTTP_204_NO_CONTENT)
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except UnauthorizedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except InvalidStateError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    @action(detail=True, methods=['post'])
    def regenerate_invite(self, request, pk=None):
        """Regenerate invite code (owner only)."""
        try:
            new_code = regenerate_invite_code(group_id=pk, user=request.user)
            return Response({
                'invite_code': new_code,
                'message': 'Invite code regenerated successfully'
            })
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except UnauthorizedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    @extend_schema(request=LogFailureSerializer, responses={201: FailureResultSerializer})
    @action(detail=True, methods=['post'])
    def log_failure(self, request, pk=None):
        """
        Log a failure of the current user in this group.

        POST /api/groups/{id}/log_failure/
        Body: {"description": "...", "proof_photo_url": "...", "idempotency_key": "..."}
        """
        serializer = LogFailureSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = log_group_failure(
                group_id=pk,
                user=request.user,
                **serializer.validated_data
            )
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except UnauthorizedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except TransientStoreError as e:
            return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        response_status = status.HTTP_200_OK if result.replayed else status.HTTP_201_CREATED
        return Response(FailureResultSerializer(result).data, status=response_status)

    @extend_schema(responses={200: GroupMemberSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def leaderboard(self, request, pk=None):
        """Members ranked by number of failures, most first."""
        try:
            memberships = get_shame_leaderboard(group_id=pk, user=request.user)
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except UnauthorizedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(GroupMemberSerializer(memberships, many=True).data)


@extend_schema(
    responses={200: GroupListSerializer(many=True)},
    description="Get all groups where the current user is a member.",
    tags=['groups'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_groups(request):
    """Get all groups where user is a member."""
    groups = Group.objects.filter(
        memberships__user=request.user
    ).select_related('created_by').distinct()

    serializer = GroupListSerializer(groups, many=True, context={'request': request})
    return Response(serializer.data)
