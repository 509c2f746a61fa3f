from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .serializers import (
    GoalCreateSerializer,
    GoalUpdateSerializer,
    GoalFilterSerializer,
    GoalSerializer,
    GoalWithCompletionsSerializer,
    GoalCompletionSerializer,
    GoalStatusSerializer,
    CompletionInputSerializer,
    StatusQuerySerializer,
    GroupStatusQuerySerializer,
    CompletionsByDateQuerySerializer,
)

from apps.goals.services import (
    create_goal,
    update_goal,
    deactivate_goal,
    delete_goal,
    get_goal_for_member,
    get_group_goals,
    log_goal_completion,
    delete_goal_completion,
    get_goal_completions,
    get_completions_for_date,
    get_goal_status,
    get_group_goal_statuses,
)
from common.exceptions import (
    NotFoundError,
    UnauthorizedError,
    InvalidStateError,
)


def _error_response(e):
    if isinstance(e, NotFoundError):
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(e, UnauthorizedError):
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)


class GoalViewSet(viewsets.ViewSet):
    """
    ViewSet for group goals.

    All business logic is handled by services.

    list: Goals of a group (?group=<uuid>) with completions
    create: Create a goal in a group
    retrieve: Get a goal
    partial_update: Update a goal (creator only)
    destroy: Delete a goal (creator only)
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        parameters=[GoalFilterSerializer],
        responses={200: GoalWithCompletionsSerializer(many=True)},
    )
    def list(self, request):
        filter_serializer = GoalFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        try:
            goals = get_group_goals(
                group_id=params['group'],
                user=request.user,
                include_inactive=params['include_inactive'],
            )
        except (NotFoundError, UnauthorizedError) as e:
            return _error_response(e)

        return Response(GoalWithCompletionsSerializer(goals, many=True).data)

    @extend_schema(request=GoalCreateSerializer, responses={201: GoalSerializer})
    def create(self, request):
        serializer = GoalCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        group_id = data.pop('group')

        try:
            goal = create_goal(group_id=group_id, user=request.user, **data)
        except (NotFoundError, UnauthorizedError) as e:
            return _error_response(e)

        return Response(GoalSerializer(goal).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: GoalSerializer})
    def retrieve(self, request, pk=None):
        try:
            goal = get_goal_for_member(goal_id=pk, user=request.user)
        except (NotFoundError, UnauthorizedError) as e:
            return _error_response(e)

        return Response(GoalSerializer(goal).data)

    @extend_schema(request=GoalUpdateSerializer, responses={200: GoalSerializer})
    def partial_update(self, request, pk=None):
        serializer = GoalUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            goal = update_goal(goal_id=pk, user=request.user, **serializer.validated_data)
        except (NotFoundError, UnauthorizedError, InvalidStateError) as e:
            return _error_response(e)

        return Response(GoalSerializer(goal).data)

    def destroy(self, request, pk=None):
        try:
            delete_goal(goal_id=pk, user=request.user)
        except (NotFoundError, UnauthorizedError) as e:
            return _error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=None, responses={200: GoalSerializer})
    @action(detail=True, methods=['post'])
    def deactivate(self, request, pk=None):
        """Stop tracking a goal without deleting its history (creator only)."""
        try:
            goal = deactivate_goal(goal_id=pk, user=request.user)
        except (NotFoundError, UnauthorizedError) as e:
            return _error_response(e)

        return Response(GoalSerializer(goal).data)

    @extend_schema(request=CompletionInputSerializer, responses={201: GoalCompletionSerializer})
    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        """
        Log a completion of this goal by the current user.

        POST /api/goals/{id}/complete/
        Body: {"proof_photo_url": "...", "notes": "..."}
        """
        serializer = CompletionInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            completion = log_goal_completion(
                goal_id=pk,
                user=request.user,
                **serializer.validated_data
            )
        except (NotFoundError, UnauthorizedError, InvalidStateError) as e:
            return _error_response(e)

        return Response(GoalCompletionSerializer(completion).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: GoalCompletionSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def completions(self, request, pk=None):
        """All completions of this goal, newest first."""
        try:
            completions = get_goal_completions(goal_id=pk, user=request.user)
        except (NotFoundError, UnauthorizedError) as e:
            return _error_response(e)

        return Response(GoalCompletionSerializer(completions, many=True).data)

    @extend_schema(parameters=[StatusQuerySerializer], responses={200: GoalStatusSerializer})
    @action(detail=True, methods=['get'])
    def status(self, request, pk=None):
        """
        Where the current user stands on this goal.

        GET /api/goals/{id}/status/?now=<iso datetime>
        """
        query = StatusQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        try:
            goal_status = get_goal_status(
                goal_id=pk,
                user=request.user,
                now=query.validated_data.get('now'),
            )
        except (NotFoundError, UnauthorizedError) as e:
            return _error_response(e)

        return Response(GoalStatusSerializer(goal_status).data)

    @extend_schema(parameters=[GroupStatusQuerySerializer], responses={200: GoalStatusSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def statuses(self, request):
        """Status of every active goal of a group for the current user."""
        query = GroupStatusQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        try:
            statuses = get_group_goal_statuses(
                group_id=query.validated_data['group'],
                user=request.user,
                now=query.validated_data.get('now'),
            )
        except (NotFoundError, UnauthorizedError) as e:
            return _error_response(e)

        return Response(GoalStatusSerializer(statuses, many=True).data)

    @extend_schema(parameters=[CompletionsByDateQuerySerializer], responses={200: GoalCompletionSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def by_date(self, request):
        """Completions of a group's goals on one calendar day."""
        query = CompletionsByDateQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        try:
            completions = get_completions_for_date(
                group_id=query.validated_data['group'],
                user=request.user,
                day=query.validated_data['date'],
            )
        except (NotFoundError, UnauthorizedError) as e:
            return _error_response(e)

        return Response(GoalCompletionSerializer(completions, many=True).data)


@extend_schema(
    request=None,
    responses={204: None},
    description="Undo one of your own goal completions.",
    tags=['goals'],
)
@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def delete_completion(request, completion_id):
    """Undo one of the current user's completions."""
    try:
        delete_goal_completion(completion_id=completion_id, user=request.user)
    except (NotFoundError, UnauthorizedError) as e:
        return _error_response(e)

    return Response(status=status.HTTP_204_NO_CONTENT)
