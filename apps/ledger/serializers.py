from rest_framework import serializers
from django.conf import settings
from .models import FailureEvent, Transaction, TransactionStatus
from apps.accounts.serializers import UserMinimalSerializer
from apps.groups.models import Group


# =============================================================================
# Input Serializers
# =============================================================================

class LogFailureSerializer(serializers.Serializer):
    """
    Validate input for logging a failure.

    Fields:
        description (str): What went wrong
        proof_photo_url (str): URL of an uploaded proof photo
        idempotency_key (str): Client key making retries safe
    """

    description = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')
    proof_photo_url = serializers.URLField(max_length=500, required=False, allow_blank=True, default='')
    idempotency_key = serializers.CharField(max_length=64, required=False, allow_null=True, default=None)


class TransactionFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for transaction filtering.

    Query Parameters:
        group (UUID): Filter by group ID
        status (str): Filter by transaction status
    """

    group = serializers.UUIDField(required=False)
    status = serializers.ChoiceField(choices=TransactionStatus.choices, required=False)


class GroupFilterSerializer(serializers.Serializer):
    """Validate an optional ``group`` query parameter."""

    group = serializers.UUIDField(required=False)


class FailureFilterSerializer(serializers.Serializer):
    """Validate the required ``group`` query parameter of the failure list."""

    group = serializers.UUIDField(required=True)


# =============================================================================
# Output Serializers
# =============================================================================

class GroupMinimalSerializer(serializers.ModelSerializer):
    """Minimal group info for nested serialization."""

    class Meta:
        model = Group
        fields = ['id', 'name']
        read_only_fields = fields


class TransactionSerializer(serializers.ModelSerializer):
    """Serializer for ledger transactions."""

    from_user = UserMinimalSerializer(read_only=True)
    to_user = UserMinimalSerializer(read_only=True)
    group = GroupMinimalSerializer(read_only=True)

    class Meta:
        model = Transaction
        fields = [
            'id',
            'group',
            'failure',
            'from_user',
            'to_user',
            'amount',
            'status',
            'description',
            'proof_photo_url',
            'created_at',
            'settled_at',
            'settled_by',
        ]
        read_only_fields = fields


class FailureEventSerializer(serializers.ModelSerializer):
    """Serializer for logged failures."""

    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = FailureEvent
        fields = [
            'id',
            'group',
            'user',
            'description',
            'proof_photo_url',
            'penalty_amount',
            'transactions_created',
            'total_debt',
            'created_at',
        ]
        read_only_fields = fields


class FailureResultSerializer(serializers.Serializer):
    """Serializer for the outcome of log_failure."""

    failure = FailureEventSerializer(read_only=True)
    transactions_created = serializers.IntegerField()
    total_debt = serializers.DecimalField(max_digits=12, decimal_places=2)
    transactions = TransactionSerializer(many=True, read_only=True)


class GroupBalanceSerializer(serializers.Serializer):
    """Serializer for one entry of get_group_balances."""

    group = GroupMinimalSerializer(read_only=True)
    balance = serializers.DecimalField(max_digits=12, decimal_places=2)
    failure_count = serializers.IntegerField()


class BalancesSerializer(serializers.Serializer):
    """Net balance with its per-group breakdown."""

    net_balance = serializers.DecimalField(max_digits=12, decimal_places=2)
    currency = serializers.SerializerMethodField()
    groups = GroupBalanceSerializer(many=True)

    def get_currency(self, obj):
        return settings.PACT_CURRENCY


class BalanceWithUserSerializer(serializers.Serializer):
    """Pending balance between the current user and another user."""

    user_id = serializers.UUIDField()
    balance = serializers.DecimalField(max_digits=12, decimal_places=2)


class PendingSerializer(serializers.Serializer):
    """Pending debts and credits of the current user."""

    debts = TransactionSerializer(many=True)
    credits = TransactionSerializer(many=True)
    total_owed = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_owed_to_me = serializers.DecimalField(max_digits=12, decimal_places=2)
