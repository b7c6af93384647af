"""
Django admin configuration for chat models.

Provides admin interfaces for:
- Chat management
- Message moderation
"""

from django.contrib import admin

from chat.models import Chat, Message


@admin.register(Chat)
class ChatAdmin(admin.ModelAdmin):
    """Admin interface for Chat model."""

    list_display = [
        "id",
        "chat_name",
        "is_group_chat",
        "group_admin",
        "created_at",
        "updated_at",
    ]
    list_filter = ["is_group_chat", "created_at"]
    search_fields = ["chat_name", "id"]
    readonly_fields = ["created_at", "updated_at", "latest_message"]
    raw_id_fields = ["group_admin"]
    filter_horizontal = ["users"]
    ordering = ["-updated_at"]


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    """Admin interface for Message model."""

    list_display = [
        "id",
        "chat",
        "sender",
        "is_file_message",
        "created_at",
    ]
    list_filter = ["is_file_message", "created_at"]
    search_fields = ["content", "file_name", "id"]
    readonly_fields = ["created_at", "updated_at"]
    raw_id_fields = ["chat", "sender"]
    ordering = ["-created_at"]
