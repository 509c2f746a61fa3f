from decimal import Decimal

from django.db.models import Sum
from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .models import Transaction
from .serializers import (
    TransactionSerializer,
    TransactionFilterSerializer,
    GroupFilterSerializer,
    FailureFilterSerializer,
    FailureEventSerializer,
    BalancesSerializer,
    BalanceWithUserSerializer,
    PendingSerializer,
)
from .permissions import IsTransactionParty

from apps.ledger.services import (
    settle_debt,
    get_net_balance,
    get_group_balances,
    get_pending_debts,
    get_pending_credits,
    get_balance_with_user,
    get_user_transactions,
    get_group_failures,
)
from common.exceptions import (
    NotFoundError,
    UnauthorizedError,
    InvalidStateError,
    TransientStoreError,
)


class LedgerPagination(PageNumberPagination):
    """Custom pagination for ledger lists."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class TransactionViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for ledger transactions (read-only, plus settle).

    list: Transactions the current user owes or is owed
    retrieve: A transaction in one of the user's groups
    settle: Mark a pending transaction as paid
    pending: Pending debts and credits of the current user
    """

    serializer_class = TransactionSerializer
    permission_classes = [IsAuthenticated, IsTransactionParty]
    pagination_class = LedgerPagination

    def get_queryset(self):
        """List only the user's own transactions; retrieve within the user's groups."""
        user = self.request.user
        if self.action == 'list':
            filter_serializer = TransactionFilterSerializer(data=self.request.query_params)
            filter_serializer.is_valid(raise_exception=True)
            params = filter_serializer.validated_data
            return get_user_transactions(
                user=user,
                group_id=params.get('group'),
                status=params.get('status'),
            )
        return Transaction.objects.filter(
            group__memberships__user=user
        ).select_related('group', 'from_user', 'to_user', 'settled_by').distinct()

    @extend_schema(request=None, responses={200: TransactionSerializer})
    @action(detail=True, methods=['post'])
    def settle(self, request, pk=None):
        """
        Settle a pending transaction.

        POST /api/ledger/transactions/{id}/settle/
        """
        try:
            settled = settle_debt(transaction_id=pk, user=request.user)
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except UnauthorizedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except InvalidStateError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        except TransientStoreError as e:
            return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response(TransactionSerializer(settled).data)

    @extend_schema(
        parameters=[OpenApiParameter('group', str, required=False)],
        responses={200: PendingSerializer},
    )
    @action(detail=False, methods=['get'])
    def pending(self, request):
        """
        Pending debts and credits of the current user.

        GET /api/ledger/transactions/pending/?group=<uuid>
        """
        filter_serializer = GroupFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        group_id = filter_serializer.validated_data.get('group')

        debts = get_pending_debts(user=request.user, group_id=group_id)
        credits = get_pending_credits(user=request.user, group_id=group_id)

        data = {
            'debts': debts,
            'credits': credits,
            'total_owed': debts.aggregate(total=Sum('amount'))['total'] or Decimal('0.00'),
            'total_owed_to_me': credits.aggregate(total=Sum('amount'))['total'] or Decimal('0.00'),
        }
        return Response(PendingSerializer(data).data)


@extend_schema(
    responses={200: BalancesSerializer},
    description="Net balance of the current user and the balance in each of their groups.",
    tags=['ledger'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def balances(request):
    """Net balance plus per-group balances of the current user."""
    data = {
        'net_balance': get_net_balance(user=request.user),
        'groups': get_group_balances(user=request.user),
    }
    return Response(BalancesSerializer(data).data)


@extend_schema(
    parameters=[OpenApiParameter('group', str, required=False)],
    responses={200: BalanceWithUserSerializer},
    description="Pending amount another user owes the current user, minus what the current user owes them.",
    tags=['ledger'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def balance_with_user(request, user_id):
    """Pending balance between the current user and another user."""
    filter_serializer = GroupFilterSerializer(data=request.query_params)
    filter_serializer.is_valid(raise_exception=True)

    balance = get_balance_with_user(
        user=request.user,
        other_user_id=user_id,
        group_id=filter_serializer.validated_data.get('group'),
    )
    return Response(BalanceWithUserSerializer({'user_id': user_id, 'balance': balance}).data)


@extend_schema(
    parameters=[OpenApiParameter('group', str, required=True)],
    responses={200: FailureEventSerializer(many=True)},
    description="Failures logged in a group, newest first.",
    tags=['ledger'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def failure_list(request):
    """List failures of a group the current user belongs to."""
    filter_serializer = FailureFilterSerializer(data=request.query_params)
    filter_serializer.is_valid(raise_exception=True)

    try:
        failures = get_group_failures(
            group_id=filter_serializer.validated_data['group'],
            user=request.user,
        )
    except NotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except UnauthorizedError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response(FailureEventSerializer(failures, many=True).data)
