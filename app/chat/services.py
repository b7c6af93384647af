"""
Chat system service layer.

This module provides the business logic for the persisted chat store.

Services:
    ChatService: Chat lifecycle (direct access, groups and membership, lookups)
    MessageService: Message operations (send, mark as read, history)

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return ServiceResult.failure()
    - Unexpected failures raise exceptions
    - A message write notifies listeners only after its transaction commits,
      so nothing is relayed for a write that rolled back

Usage:
    from chat.services import ChatService, MessageService

    # Get or create a direct chat
    result = ChatService.access_direct(user, other_user)
    if result.success:
        chat = result.data

    # Create a group chat
    result = ChatService.create_group(
        admin=user,
        chat_name="Project Team",
        members=[user2, user3],
    )

    # Send a message
    result = MessageService.send_message(
        chat=chat,
        sender=user,
        content="Hello everyone!",
    )
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import QuerySet

from core.services import BaseService, ServiceResult

from chat.constants import CHAT_CONFIG, MESSAGE_CONFIG
from chat.models import Chat, Message
from chat.signals import message_created

if TYPE_CHECKING:
    from authentication.models import User

logger = logging.getLogger(__name__)


class ChatService(BaseService):
    """
    Service for chat lifecycle operations.

    Methods:
        access_direct: Get or create the direct chat between two users
        create_group: Create a new group chat
        rename_group: Rename a group chat
        add_member: Add a user to a group (admin only)
        remove_member: Remove a user from a group (admin, or self)
        get_user_chats: List chats the user participates in
        participant_ids: Participant user ids of a chat
    """

    @classmethod
    def access_direct(cls, user: User, other: User) -> ServiceResult[Chat]:
        """
        Get or create the direct chat between two users.

        Direct chats are unique per user pair. If one already exists it is
        returned instead of creating a duplicate.

        Error codes:
            SAME_USER: Cannot open a direct chat with yourself
        """
        if user.pk == other.pk:
            return ServiceResult.failure(
                "Cannot create a direct chat with yourself",
                error_code="SAME_USER",
            )

        existing = (
            Chat.objects.filter(is_group_chat=False, users=user)
            .filter(users=other)
            .select_related("latest_message")
            .first()
        )
        if existing is not None:
            cls.get_logger().debug(
                f"Found existing direct chat {existing.id} "
                f"between users {user.pk} and {other.pk}"
            )
            return ServiceResult.success(existing)

        with cls.atomic():
            chat = Chat.objects.create(chat_name="sender", is_group_chat=False)
            chat.users.add(user, other)

        cls.get_logger().info(
            f"Created direct chat {chat.id} between users {user.pk} and {other.pk}"
        )
        return ServiceResult.success(chat)

    @classmethod
    def create_group(
        cls,
        admin: User,
        chat_name: str,
        members: list[User],
        avatar: str = "",
    ) -> ServiceResult[Chat]:
        """
        Create a new group chat with admin as its group admin.

        The admin is always a participant; duplicates in members are ignored.

        Error codes:
            INVALID_NAME: Name is empty or too long
            TOO_FEW_MEMBERS: A group needs at least two users besides the admin
        """
        chat_name = (chat_name or "").strip()
        if not chat_name or len(chat_name) > CHAT_CONFIG.MAX_NAME_LENGTH:
            return ServiceResult.failure(
                f"Group name must be between 1 and "
                f"{CHAT_CONFIG.MAX_NAME_LENGTH} characters",
                error_code="INVALID_NAME",
            )

        others = {member.pk: member for member in members if member.pk != admin.pk}
        if len(others) < CHAT_CONFIG.MIN_GROUP_OTHER_MEMBERS:
            return ServiceResult.failure(
                "More than 2 users are required to form a group chat",
                error_code="TOO_FEW_MEMBERS",
            )

        with cls.atomic():
            chat = Chat.objects.create(
                chat_name=chat_name,
                is_group_chat=True,
                group_admin=admin,
                avatar=avatar or "",
            )
            chat.users.add(admin, *others.values())

        cls.get_logger().info(
            f"User {admin.pk} created group chat {chat.id} "
            f"with {len(others) + 1} members"
        )
        return ServiceResult.success(chat)

    @classmethod
    def rename_group(
        cls, chat: Chat, actor: User, chat_name: str
    ) -> ServiceResult[Chat]:
        """
        Rename a group chat. Any participant may rename it.

        Error codes:
            NOT_GROUP: Direct chats have no editable name
            NOT_PARTICIPANT: Actor is not in the chat
            INVALID_NAME: Name is empty or too long
        """
        failure = cls._check_group(chat, actor)
        if failure is not None:
            return failure

        chat_name = (chat_name or "").strip()
        if not chat_name or len(chat_name) > CHAT_CONFIG.MAX_NAME_LENGTH:
            return ServiceResult.failure(
                f"Group name must be between 1 and "
                f"{CHAT_CONFIG.MAX_NAME_LENGTH} characters",
                error_code="INVALID_NAME",
            )

        chat.chat_name = chat_name
        chat.save(update_fields=["chat_name", "updated_at"])

        cls.get_logger().info(f"User {actor.pk} renamed group chat {chat.id}")
        return ServiceResult.success(chat)

    @classmethod
    def add_member(cls, chat: Chat, actor: User, user: User) -> ServiceResult[Chat]:
        """
        Add a user to a group chat. Only the group admin may add members.

        Error codes:
            NOT_GROUP: Direct chats have fixed participants
            NOT_PARTICIPANT: Actor is not in the chat
            NOT_ADMIN: Actor is not the group admin
            ALREADY_MEMBER: User already participates
        """
        failure = cls._check_group(chat, actor)
        if failure is not None:
            return failure

        if chat.group_admin_id != actor.pk:
            return ServiceResult.failure(
                "Only the group admin can add members",
                error_code="NOT_ADMIN",
            )

        if chat.has_user(user):
            return ServiceResult.failure(
                "User is already a member of this group",
                error_code="ALREADY_MEMBER",
            )

        with cls.atomic():
            chat.users.add(user)
            chat.save(update_fields=["updated_at"])

        cls.get_logger().info(
            f"User {actor.pk} added user {user.pk} to group chat {chat.id}"
        )
        return ServiceResult.success(chat)

    @classmethod
    def remove_member(
        cls, chat: Chat, actor: User, user: User
    ) -> ServiceResult[Chat]:
        """
        Remove a user from a group chat.

        The group admin may remove any other member; any member may remove
        themselves. The admin cannot leave their own group.

        Error codes:
            NOT_GROUP: Direct chats have fixed participants
            NOT_PARTICIPANT: Actor is not in the chat
            NOT_ADMIN: Actor removes someone else without being admin
            ADMIN_CANNOT_LEAVE: The admin tried to remove themselves
            NOT_MEMBER: User does not participate
        """
        failure = cls._check_group(chat, actor)
        if failure is not None:
            return failure

        is_admin = chat.group_admin_id == actor.pk
        if user.pk != actor.pk and not is_admin:
            return ServiceResult.failure(
                "Only the group admin can remove other members",
                error_code="NOT_ADMIN",
            )

        if user.pk == chat.group_admin_id:
            return ServiceResult.failure(
                "The group admin cannot leave the group",
                error_code="ADMIN_CANNOT_LEAVE",
            )

        if not chat.has_user(user):
            return ServiceResult.failure(
                "User is not a member of this group",
                error_code="NOT_MEMBER",
            )

        with cls.atomic():
            chat.users.remove(user)
            chat.save(update_fields=["updated_at"])

        cls.get_logger().info(
            f"User {actor.pk} removed user {user.pk} from group chat {chat.id}"
        )
        return ServiceResult.success(chat)

    @classmethod
    def _check_group(cls, chat: Chat, actor: User) -> ServiceResult | None:
        """Return a failure unless chat is a group and actor participates."""
        if not chat.is_group_chat:
            return ServiceResult.failure(
                "This operation is only available for group chats",
                error_code="NOT_GROUP",
            )
        if not chat.has_user(actor):
            return ServiceResult.failure(
                "You are not a participant in this chat",
                error_code="NOT_PARTICIPANT",
            )
        return None

    @classmethod
    def get_user_chats(cls, user: User) -> QuerySet[Chat]:
        """Return chats the user participates in, most recently active first."""
        return (
            Chat.objects.filter(users=user)
            .select_related("group_admin", "latest_message", "latest_message__sender")
            .prefetch_related("users")
            .order_by("-updated_at")
        )

    @classmethod
    def participant_ids(cls, chat_id) -> list[str]:
        """
        Return participant user ids of a chat as strings.

        An unknown chat has no participants.
        """
        try:
            chat = Chat.objects.get(pk=chat_id)
        except (Chat.DoesNotExist, DjangoValidationError, ValueError):
            return []
        return chat.participant_ids()


class MessageService(BaseService):
    """
    Service for message operations.

    Methods:
        send_message: Persist a message and notify listeners after commit
        mark_as_read: Record that a user read messages in a chat
        history: Messages of a chat, oldest first
    """

    @classmethod
    def send_message(
        cls,
        chat: Chat,
        sender: User,
        content: str = "",
        file_url: str = "",
        file_type: str = "",
        file_name: str = "",
        attachments: list[str] | None = None,
    ) -> ServiceResult[Message]:
        """
        Send a message to a chat.

        The chat's latest_message pointer is updated in the same
        transaction. Once the transaction commits, the message_created
        signal is sent with the persisted message.

        Args:
            chat: Target chat
            sender: User sending the message
            content: Message text (optional when a file is attached)
            file_url: URL of the primary attachment
            file_type: MIME type of the primary attachment
            file_name: Original file name of the primary attachment
            attachments: Additional attachment URLs

        Returns:
            ServiceResult with the new Message

        Error codes:
            NOT_PARTICIPANT: Sender is not in this chat
            EMPTY_CONTENT: Neither content nor a file was given
            CONTENT_TOO_LONG: Content exceeds the maximum length
            TOO_MANY_ATTACHMENTS: Attachment list exceeds the maximum
        """
        if not chat.has_user(sender):
            return ServiceResult.failure(
                "You are not a participant in this chat",
                error_code="NOT_PARTICIPANT",
            )

        content = content.strip() if content else ""
        attachments = list(attachments or [])
        is_file_message = bool(file_url)

        if not content and not is_file_message:
            return ServiceResult.failure(
                "Message content cannot be empty",
                error_code="EMPTY_CONTENT",
            )

        if len(content) > MESSAGE_CONFIG.MAX_CONTENT_LENGTH:
            return ServiceResult.failure(
                f"Message cannot exceed {MESSAGE_CONFIG.MAX_CONTENT_LENGTH} characters",
                error_code="CONTENT_TOO_LONG",
            )

        if len(attachments) > MESSAGE_CONFIG.MAX_ATTACHMENTS_PER_MESSAGE:
            return ServiceResult.failure(
                f"A message cannot carry more than "
                f"{MESSAGE_CONFIG.MAX_ATTACHMENTS_PER_MESSAGE} attachments",
                error_code="TOO_MANY_ATTACHMENTS",
            )

        with cls.atomic():
            message = Message.objects.create(
                chat=chat,
                sender=sender,
                content=content,
                is_file_message=is_file_message,
                file_url=file_url or "",
                file_type=file_type or "",
                file_name=file_name or "",
                attachments=attachments,
            )

            chat.latest_message = message
            chat.save(update_fields=["latest_message", "updated_at"])

            transaction.on_commit(
                lambda: message_created.send(sender=Message, message=message)
            )

        cls.get_logger().debug(
            f"User {sender.pk} sent message {message.id} to chat {chat.id}"
        )

        return ServiceResult.success(message)

    @classmethod
    def mark_as_read(
        cls,
        chat: Chat,
        user: User,
        message_ids: list | None = None,
    ) -> ServiceResult[int]:
        """
        Mark messages in a chat as read by user.

        Only messages sent by other participants are marked. When
        message_ids is given, marking is limited to those messages.

        Returns:
            ServiceResult with the number of messages newly marked

        Error codes:
            NOT_PARTICIPANT: User is not in this chat
        """
        if not chat.has_user(user):
            return ServiceResult.failure(
                "You are not a participant in this chat",
                error_code="NOT_PARTICIPANT",
            )

        unread = chat.messages.exclude(sender=user).exclude(read_by=user)
        if message_ids is not None:
            unread = unread.filter(pk__in=message_ids)

        through = Message.read_by.through
        rows = [
            through(message_id=message_pk, user_id=user.pk)
            for message_pk in unread.values_list("pk", flat=True)
        ]
        through.objects.bulk_create(rows, ignore_conflicts=True)

        if rows:
            cls.get_logger().debug(
                f"User {user.pk} read {len(rows)} messages in chat {chat.id}"
            )

        return ServiceResult.success(len(rows))

    @classmethod
    def history(cls, chat: Chat, user: User) -> ServiceResult[QuerySet[Message]]:
        """
        Return the messages of a chat, oldest first.

        This is the pull path clients use to catch up on anything the
        real-time relay did not push to them.

        Error codes:
            NOT_PARTICIPANT: User is not in this chat
        """
        if not chat.has_user(user):
            return ServiceResult.failure(
                "You are not a participant in this chat",
                error_code="NOT_PARTICIPANT",
            )

        messages = (
            chat.messages.select_related("sender")
            .prefetch_related("read_by")
            .order_by("created_at", "id")
        )
        return ServiceResult.success(messages)
