"""
Serializers for chat API.

This module provides serializers for the chat system:
- Chat serializers (read, direct access, group creation)
- Message serializers (read, create, mark read)

Serializer Hierarchy:
    ChatSerializer: Chat with participants and latest message preview
    DirectChatCreateSerializer: Open a direct chat with another user
    GroupChatCreateSerializer: Create a group chat

    MessageSerializer: Message with sender and attachment metadata
    MessageCreateSerializer: Send new message
    MarkReadSerializer: Mark messages as read

Design Decisions:
    - Read and write serializers are separate for clarity
    - `_id` fields mirror `id` so REST responses have the same shape as the
      realtime `receive_message` payload
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from authentication.serializers import UserSummarySerializer
from chat.constants import CHAT_CONFIG, MESSAGE_CONFIG
from chat.models import Chat, Message

User = get_user_model()


# =============================================================================
# Message Serializers
# =============================================================================


class MessagePreviewSerializer(serializers.ModelSerializer):
    """Minimal message serializer for chat list preview."""

    _id = serializers.CharField(source="id", read_only=True)
    sender = UserSummarySerializer(read_only=True)

    class Meta:
        model = Message
        fields = [
            "id",
            "_id",
            "sender",
            "content",
            "is_file_message",
            "file_name",
            "created_at",
        ]
        read_only_fields = fields


class MessageSerializer(serializers.ModelSerializer):
    """
    Full message serializer for read operations.

    `chat` is the chat id; `readBy` lists ids of users who read the message.
    """

    _id = serializers.CharField(source="id", read_only=True)
    sender = UserSummarySerializer(read_only=True)
    chat = serializers.CharField(source="chat_id", read_only=True)
    readBy = serializers.SerializerMethodField(
        help_text="Ids of users who have read this message"
    )

    class Meta:
        model = Message
        fields = [
            "id",
            "_id",
            "chat",
            "sender",
            "content",
            "is_file_message",
            "file_url",
            "file_type",
            "file_name",
            "attachments",
            "readBy",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_readBy(self, obj: Message) -> list[str]:
        return [str(user.pk) for user in obj.read_by.all()]


class MessageCreateSerializer(serializers.Serializer):
    """
    Serializer for sending a message.

    Either content or file_url must be present; the service enforces it.
    """

    content = serializers.CharField(
        required=False,
        allow_blank=True,
        default="",
        max_length=MESSAGE_CONFIG.MAX_CONTENT_LENGTH,
        trim_whitespace=False,
    )
    file_url = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=500
    )
    file_type = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=100
    )
    file_name = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=255
    )
    attachments = serializers.ListField(
        child=serializers.CharField(max_length=500),
        required=False,
        default=list,
        max_length=MESSAGE_CONFIG.MAX_ATTACHMENTS_PER_MESSAGE,
    )


class MarkReadSerializer(serializers.Serializer):
    """Optional explicit list of message ids to mark as read."""

    message_ids = serializers.ListField(
        child=serializers.UUIDField(),
        required=False,
        allow_null=True,
        default=None,
    )


# =============================================================================
# Chat Serializers
# =============================================================================


class ChatSerializer(serializers.ModelSerializer):
    """Chat with participants, admin and latest message preview."""

    _id = serializers.CharField(source="id", read_only=True)
    users = UserSummarySerializer(many=True, read_only=True)
    group_admin = UserSummarySerializer(read_only=True)
    latest_message = MessagePreviewSerializer(read_only=True)

    class Meta:
        model = Chat
        fields = [
            "id",
            "_id",
            "chat_name",
            "is_group_chat",
            "users",
            "group_admin",
            "latest_message",
            "avatar",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class DirectChatCreateSerializer(serializers.Serializer):
    """Open (get or create) a direct chat with another user."""

    user_id = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(is_active=True),
        help_text="The other participant",
    )


class GroupChatCreateSerializer(serializers.Serializer):
    """Create a group chat; the requesting user becomes its admin."""

    chat_name = serializers.CharField(max_length=CHAT_CONFIG.MAX_NAME_LENGTH)
    user_ids = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(is_active=True),
        many=True,
        help_text="Members besides the creator",
    )
    avatar = serializers.URLField(required=False, allow_blank=True, default="")


class GroupRenameSerializer(serializers.Serializer):
    """Rename a group chat."""

    chat_name = serializers.CharField(max_length=CHAT_CONFIG.MAX_NAME_LENGTH)


class GroupMemberSerializer(serializers.Serializer):
    """Add or remove one member of a group chat."""

    user_id = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(is_active=True),
        help_text="The member to add or remove",
    )
