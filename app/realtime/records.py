"""
Read-only views of persisted chats and messages, as the core sees them.

The relay never touches ORM instances directly: a MessageRecord is built
once, either from a committed Message row (server-authoritative path) or
from a client ``new_message`` payload, and handed to deliver() by
reference.

Records:
    ChatRecord: Participants and flags of a chat
    MessageRecord: Sender, chat, wire payload and optional participant list

Wire shape:
    A relayed message is the REST MessageSerializer representation with
    ``chat`` expanded to ``{"_id": ..., "users": [...]}`` so clients can
    route it without another request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from chat.serializers import MessageSerializer
from core.exceptions import ValidationError

if TYPE_CHECKING:
    from chat.models import Chat, Message


def coerce_id(value: Any, field_name: str) -> str:
    """
    Normalise an identifier to a non-empty string.

    Accepts strings and integers; dicts are read through ``_id``/``id``.

    Raises:
        ValidationError: If no usable identifier is present
    """
    if isinstance(value, dict):
        value = value.get("_id", value.get("id"))
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ValidationError(f"{field_name} must be an id", error_code="INVALID_ID")

    value = str(value).strip()
    if not value:
        raise ValidationError(f"{field_name} is required", error_code="MISSING_FIELD")
    return value


@dataclass(frozen=True)
class ChatRecord:
    """Participants and flags of a persisted chat."""

    id: str
    participant_ids: tuple[str, ...]
    is_group_chat: bool = False
    latest_message_id: str | None = None

    @classmethod
    def from_chat(cls, chat: Chat) -> ChatRecord:
        return cls(
            id=str(chat.pk),
            participant_ids=tuple(chat.participant_ids()),
            is_group_chat=chat.is_group_chat,
            latest_message_id=(
                str(chat.latest_message_id) if chat.latest_message_id else None
            ),
        )


@dataclass(frozen=True)
class MessageRecord:
    """
    A persisted message as handed to the relay.

    Attributes:
        id: Message id; None when a client payload carries none
        chat_id: Chat the message belongs to
        sender_id: User who sent it
        payload: Message object pushed to clients as receive_message
        participant_ids: Chat participants if known; the relay looks them
            up in the chat store otherwise
    """

    id: str | None
    chat_id: str
    sender_id: str
    payload: dict[str, Any] = field(default_factory=dict, compare=False)
    participant_ids: tuple[str, ...] | None = None

    @classmethod
    def from_message(cls, message: Message) -> MessageRecord:
        """Build a record from a committed Message row. Runs queries."""
        chat = ChatRecord.from_chat(message.chat)
        payload = dict(MessageSerializer(message).data)
        payload["chat"] = {
            "_id": chat.id,
            "users": list(chat.participant_ids),
            "is_group_chat": chat.is_group_chat,
        }
        return cls(
            id=str(message.pk),
            chat_id=chat.id,
            sender_id=str(message.sender_id),
            payload=payload,
            participant_ids=chat.participant_ids,
        )

    @classmethod
    def from_payload(cls, data: Any) -> MessageRecord:
        """
        Build a record from a client new_message payload.

        ``chat`` may be an id or ``{_id, users: [...]}`` and ``sender`` an
        id or ``{_id}``. Users listed in the payload become the participant
        list; without them the relay asks the chat store.

        Raises:
            ValidationError: If chat or sender is missing or malformed
        """
        if not isinstance(data, dict):
            raise ValidationError(
                "new_message payload must be an object", error_code="INVALID_PAYLOAD"
            )

        chat = data.get("chat")
        chat_id = coerce_id(chat, "chat")
        sender_id = coerce_id(data.get("sender"), "sender")

        participant_ids = None
        if isinstance(chat, dict) and isinstance(chat.get("users"), list):
            participant_ids = tuple(
                dict.fromkeys(coerce_id(user, "chat.users") for user in chat["users"])
            )

        message_id = data.get("_id", data.get("id"))
        return cls(
            id=coerce_id(message_id, "_id") if message_id is not None else None,
            chat_id=chat_id,
            sender_id=sender_id,
            payload=dict(data),
            participant_ids=participant_ids,
        )

    def to_wire(self) -> dict[str, Any]:
        return self.payload
