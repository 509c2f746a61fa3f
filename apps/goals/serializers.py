from decimal import Decimal
from django.utils import timezone
from rest_framework import serializers
from .models import Goal, GoalCompletion, GoalType
from apps.accounts.serializers import UserMinimalSerializer


# =============================================================================
# Input Serializers
# =============================================================================

class GoalCreateSerializer(serializers.Serializer):
    """Validate input for creating a goal."""

    group = serializers.UUIDField()
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    emoji = serializers.CharField(max_length=16, required=False, default='🎯')
    goal_type = serializers.ChoiceField(choices=GoalType.choices, required=False, default=GoalType.FREQUENCY)
    frequency_days = serializers.IntegerField(min_value=1, required=False, default=1)
    penalty_amount = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal('0.00'),
        required=False
    )


class GoalUpdateSerializer(serializers.Serializer):
    """Validate input for updating a goal (all fields optional)."""

    name = serializers.CharField(max_length=200, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    emoji = serializers.CharField(max_length=16, required=False)
    goal_type = serializers.ChoiceField(choices=GoalType.choices, required=False)
    frequency_days = serializers.IntegerField(min_value=1, required=False)
    penalty_amount = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal('0.00'),
        required=False
    )


class GoalFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for goal listing.

    Query Parameters:
        group (UUID): Group whose goals to list
        include_inactive (bool): Include deactivated goals
    """

    group = serializers.UUIDField(required=True)
    include_inactive = serializers.BooleanField(required=False, default=False)


class CompletionInputSerializer(serializers.Serializer):
    """Validate input for logging a completion."""

    completed_at = serializers.DateTimeField(required=False)
    proof_photo_url = serializers.URLField(max_length=500, required=False, allow_blank=True, default='')
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')

    def validate_completed_at(self, value):
        """Completions can be backdated but never logged ahead of time."""
        if value > timezone.now():
            raise serializers.ValidationError("Completion time cannot be in the future.")
        return value


class StatusQuerySerializer(serializers.Serializer):
    """Validate the optional ``now`` used to evaluate deadlines."""

    now = serializers.DateTimeField(required=False)


class GroupStatusQuerySerializer(StatusQuerySerializer):
    group = serializers.UUIDField(required=True)


class CompletionsByDateQuerySerializer(serializers.Serializer):
    group = serializers.UUIDField(required=True)
    date = serializers.DateField(required=True)


# =============================================================================
# Output Serializers
# =============================================================================

class GoalCompletionSerializer(serializers.ModelSerializer):
    """Serializer for goal completions."""

    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = GoalCompletion
        fields = ['id', 'goal', 'user', 'completed_at', 'proof_photo_url', 'notes', 'created_at']
        read_only_fields = fields


class GoalSerializer(serializers.ModelSerializer):
    """Main serializer for goals."""

    created_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = Goal
        fields = [
            'id',
            'group',
            'name',
            'description',
            'emoji',
            'goal_type',
            'frequency_days',
            'penalty_amount',
            'is_active',
            'created_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class GoalWithCompletionsSerializer(GoalSerializer):
    """Goal together with every member's completions."""

    completions = GoalCompletionSerializer(many=True, read_only=True)

    class Meta(GoalSerializer.Meta):
        fields = GoalSerializer.Meta.fields + ['completions']
        read_only_fields = fields


class GoalStatusSerializer(serializers.Serializer):
    """Serializer for a derived GoalStatus."""

    goal_id = serializers.UUIDField()
    user_id = serializers.UUIDField()
    last_completion = serializers.DateTimeField(allow_null=True)
    next_deadline = serializers.DateTimeField()
    is_overdue = serializers.BooleanField()
    days_remaining = serializers.IntegerField()
    total_completions = serializers.IntegerField()
