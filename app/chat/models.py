"""
Chat system models.

This module defines the persisted store the realtime core reads from:
- Direct (1:1) chats between exactly two users
- Group chats with a single admin

Models:
    Chat: Container for messages between its users
    Message: Individual message within a chat, optionally carrying a file

Design Decisions:
    - Participants are a plain many-to-many on Chat; the realtime relay only
      needs the set of user ids to compute fan-out
    - Chat.latest_message points at the most recent message so chat lists can
      render a preview without a second query
    - Attachment storage is external; a message only records the file URL and
      descriptive metadata
    - Read receipts are tracked per message through read_by
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel

if TYPE_CHECKING:
    from authentication.models import User


class Chat(UUIDPrimaryKeyMixin, BaseModel):
    """
    A chat between two or more users.

    Chat Types:
        Direct: is_group_chat=False, exactly two users, no admin.
        Group: is_group_chat=True, two or more users, group_admin manages
            membership.

    Fields:
        chat_name: Display name (the other user's name for direct chats is
            resolved client-side; the stored value is informational)
        is_group_chat: Group/direct flag
        users: Participants; the relay fans out to their live connections
        group_admin: Admin of a group chat (null for direct chats)
        latest_message: Most recent message, updated on every send
        avatar: Optional group avatar URL
    """

    chat_name = models.CharField(
        max_length=100,
        help_text="Display name of the chat",
    )

    is_group_chat = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Whether this is a group chat",
    )

    users = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name="chats",
        help_text="Users participating in this chat",
    )

    group_admin = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="administered_chats",
        help_text="Admin of the group chat (null for direct chats)",
    )

    latest_message = models.ForeignKey(
        "Message",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        help_text="Most recent message in this chat",
    )

    avatar = models.URLField(
        blank=True,
        default="",
        help_text="Avatar URL for group chats",
    )

    class Meta:
        db_table = "chat_chat"
        ordering = ["-updated_at"]

    def __str__(self) -> str:
        kind = "Group" if self.is_group_chat else "Direct"
        return f"{kind}: {self.chat_name}"

    def has_user(self, user: User) -> bool:
        """Check whether user participates in this chat."""
        return self.users.filter(pk=user.pk).exists()

    def participant_ids(self) -> list[str]:
        """Return participant user ids as strings, in a stable order."""
        return [
            str(pk) for pk in self.users.order_by("pk").values_list("pk", flat=True)
        ]


class Message(UUIDPrimaryKeyMixin, BaseModel):
    """
    A message within a chat.

    Fields:
        chat: Chat this message belongs to
        sender: User who sent the message
        content: Message text (may be empty for file-only messages)
        read_by: Users who have read this message
        is_file_message: Whether the message carries a file
        file_url / file_type / file_name: Primary attachment metadata
        attachments: Additional attachment URLs
    """

    chat = models.ForeignKey(
        Chat,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="Chat this message belongs to",
    )

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_messages",
        help_text="User who sent this message",
    )

    content = models.TextField(
        blank=True,
        default="",
        help_text="Message text",
    )

    read_by = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        blank=True,
        related_name="read_messages",
        help_text="Users who have read this message",
    )

    is_file_message = models.BooleanField(
        default=False,
        help_text="Whether this message carries a file",
    )
    file_url = models.CharField(
        max_length=500,
        blank=True,
        default="",
        help_text="URL of the attached file",
    )
    file_type = models.CharField(
        max_length=100,
        blank=True,
        default="",
        help_text="MIME type of the attached file",
    )
    file_name = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Original name of the attached file",
    )
    attachments = models.JSONField(
        default=list,
        blank=True,
        help_text="Additional attachment URLs",
    )

    class Meta:
        db_table = "chat_message"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["chat", "-created_at"],
                name="chat_msg_chat_created_idx",
            ),
            models.Index(
                fields=["sender"],
                name="chat_msg_sender_idx",
            ),
        ]

    def __str__(self) -> str:
        preview = self.content[:50] + "..." if len(self.content) > 50 else self.content
        if self.is_file_message and not preview:
            preview = f"[file] {self.file_name}"
        return f"User {self.sender_id}: {preview}"
