from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""
    
    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'display_name',
            'avatar_url',
            'payment_link',
            'created_at',
            'last_login',
        ]
        read_only_fields = ['id', 'email', 'created_at', 'last_login']


class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization."""
    
    display_name = serializers.SerializerMethodField()
    
    class Meta:
        model = User
        fields = ['id', 'display_name', 'avatar_url', 'payment_link']
        read_only_fields = fields
    
    def get_display_name(self, obj):
        return obj.get_display_name()


class UserRegistrationSerializer(serializers.Serializer):
    """Serializer for user registration."""
    
    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )
    display_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    
    def validate(self, attrs):
        """Validate password confirmation."""
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match'
            })
        return attrs


class EmailTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Exchange email and password for a JWT pair.

    The email is matched case-insensitively. The response carries the
    profile next to the tokens, in the same shape registration returns.
    """

    def validate(self, attrs):
        stored = (
            User.objects
            .filter(email__iexact=attrs[self.username_field])
            .values_list('email', flat=True)
            .first()
        )
        if stored:
            attrs[self.username_field] = stored

        tokens = super().validate(attrs)
        return {
            'message': 'Login successful',
            'user': UserSerializer(self.user).data,
            'tokens': tokens,
        }
