from decimal import Decimal
from rest_framework import serializers
from .models import Group, GroupMembership
from apps.accounts.serializers import UserMinimalSerializer


class GroupSerializer(serializers.ModelSerializer):
    """Main serializer for groups."""
    
    created_by = UserMinimalSerializer(read_only=True)
    member_count = serializers.SerializerMethodField()
    user_role = serializers.SerializerMethodField()
    
    class Meta:
        model = Group
        fields = [
            'id',
            'name',
            'description',
            'default_penalty_amount',
            'invite_code',
            'created_by',
            'member_count',
            'user_role',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'invite_code', 'created_by', 'created_at', 'updated_at']
    
    def get_member_count(self, obj):
        """Get number of members in the group."""
        return obj.memberships.count()
    
    def get_user_role(self, obj):
        """Get current user's role in the group."""
        request = self.context.get('request')
        if request and request.user.is_authenticated:
            membership = obj.get_membership(request.user)
            return membership.role if membership else None
        return None


class GroupCreateSerializer(serializers.ModelSerializer):
    """Serializer for creating groups."""
    
    default_penalty_amount = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal('0.00'),
        required=False
    )
    
    class Meta:
        model = Group
        fields = ['name', 'description', 'default_penalty_amount']


class GroupUpdateSerializer(serializers.Serializer):
    """Serializer for updating group details (all fields optional)."""
    
    name = serializers.CharField(max_length=200, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    default_penalty_amount = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal('0.00'),
        required=False
    )


class GroupListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""
    
    member_count = serializers.SerializerMethodField()
    
    class Meta:
        model = Group
        fields = [
            'id',
            'name',
            'description',
            'default_penalty_amount',
            'member_count',
            'created_at',
        ]
        read_only_fields = fields
    
    def get_member_count(self, obj):
        return obj.memberships.count()


class GroupMemberSerializer(serializers.ModelSerializer):
    """Member information with their standing in the group."""
    
    user = UserMinimalSerializer(read_only=True)
    
    class Meta:
        model = GroupMembership
        fields = ['id', 'user', 'role', 'current_balance', 'failure_count', 'joined_at']
        read_only_fields = fields


class JoinGroupSerializer(serializers.Serializer):
    """Serializer for joining a group with invite code."""
    
    invite_code = serializers.CharField(max_length=16, required=True)
