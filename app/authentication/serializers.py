"""
Serializers for authentication models.

Related files:
    - models.py: User model
    - views.py: Views that use these serializers
    - chat/serializers.py: Nests UserSummarySerializer inside chats and messages

Security:
    - Password fields are never exposed
    - Registration checks email and username uniqueness before creating
"""

import logging

from rest_framework import serializers

from authentication.models import User, validate_username_format

logger = logging.getLogger(__name__)


class UserSerializer(serializers.ModelSerializer):
    """Serializer for the current user (read operations)."""

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "username",
            "avatar",
            "date_joined",
        ]
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    """
    Compact user representation nested inside chats and messages.

    `_id` mirrors `id` because web clients address users by `_id` in
    realtime payloads (`sender._id`, `chat.users[]._id`).
    """

    _id = serializers.CharField(source="id", read_only=True)

    class Meta:
        model = User
        fields = ["id", "_id", "username", "avatar", "email"]
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    """
    Serializer for user registration.

    Handles email/password sign-up. Email and username are both unique,
    compared case-insensitively.
    """

    email = serializers.EmailField(required=True)
    username = serializers.CharField(
        max_length=30,
        validators=[validate_username_format],
        help_text="3-30 characters: letters, digits, _ and -.",
    )
    password1 = serializers.CharField(
        write_only=True,
        min_length=8,
        style={"input_type": "password"},
        help_text="Password must be at least 8 characters.",
    )
    password2 = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
        help_text="Confirm your password.",
    )

    def validate_email(self, value):
        """Validate that email is not already in use."""
        email = value.lower().strip()
        if User.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return email

    def validate_username(self, value):
        """Validate that username is not already taken."""
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError("This username is already taken.")
        return value

    def validate(self, attrs):
        """Validate that passwords match."""
        if attrs["password1"] != attrs["password2"]:
            raise serializers.ValidationError({"password2": "Passwords do not match."})
        return attrs

    def create(self, validated_data):
        user = User.objects.create_user(
            email=validated_data["email"],
            password=validated_data["password1"],
            username=validated_data["username"],
        )
        logger.info(f"User created: {user.email}")
        return user
