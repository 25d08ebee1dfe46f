from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """User profile including the cached points projection."""

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'display_name',
            'phone',
            'region',
            'role',
            'status',
            'points',
            'level',
            'created_at',
            'last_login',
        ]
        read_only_fields = fields


class InstallerCreateSerializer(serializers.Serializer):
    """Input for admin creation of an installer account."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    display_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    phone = serializers.RegexField(
        regex=r'^\+?[0-9]{8,15}$',
        max_length=20,
        required=False,
        allow_blank=True,
        error_messages={'invalid': 'Enter a phone number of 8-15 digits, optionally prefixed with +.'},
    )
    region = serializers.CharField(max_length=100, required=False, allow_blank=True)


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )

