"""
Authentication models.

This module defines the user model that chat participants and realtime
sessions are keyed by.

Related files:
    - managers.py: Custom user manager for email-based creation

Security:
    - User passwords hashed with Django's PBKDF2
    - Primary keys are UUIDs, so user ids on the wire are opaque strings
"""

import re

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.core.exceptions import ValidationError
from django.db import models

from authentication.managers import UserManager
from core.model_mixins import UUIDPrimaryKeyMixin


def validate_username_format(value):
    """Validate username format: 3-30 chars, alphanumeric + _ + -."""
    if not re.match(r"^[a-zA-Z0-9_-]{3,30}$", value):
        raise ValidationError(
            "Username must be 3-30 characters and contain only "
            "letters, numbers, underscores, and hyphens."
        )


class User(UUIDPrimaryKeyMixin, AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the login identifier.

    Fields:
        id: UUID primary key, used as the user identity by the realtime core
        email: Login identifier, unique
        username: Display handle shown next to messages
        avatar: URL of the user's avatar image
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        date_joined: When the user account was created
        updated_at: When the user record was last modified

    Usage:
        user = User.objects.create_user(
            email="user@example.com",
            password="securepassword",
            username="user",
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (login identifier)",
    )

    username = models.CharField(
        max_length=30,
        blank=True,
        default="",
        validators=[validate_username_format],
        help_text="Display handle shown in chats",
    )

    avatar = models.URLField(
        blank=True,
        default="",
        help_text="URL of the user's avatar image",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email

    def get_full_name(self):
        return self.username or self.email

    def get_short_name(self):
        return self.username or self.email.split("@")[0]
