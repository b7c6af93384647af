"""
Chat application configuration.

This app provides the persisted chat store with:
- Direct (1:1) and group chats
- Messages with optional file attachments
- Read tracking
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"
