"""
Client and server event vocabulary of the realtime WebSocket.

Frames in both directions are JSON objects::

    {"type": "<event name>", "data": <payload>}

Client events form a closed set of frozen dataclasses. parse_event() turns
a raw frame into one of them, or None when the kind is unknown or the
payload is malformed; such frames are ignored without replying, since
the protocol is fire-and-forget.

Client events:
    setup            {userId} | {_id} | id
    join_chat        chatId | {chatId}
    leave_chat       chatId | {chatId}
    new_message      message object with chat and sender
    typing           {chatId, userId}
    stop_typing      {chatId, userId}
    message_read     {messageId, chatId, userId}
    get_online_users (no payload)

Server events are listed in ServerEvent.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Final, Union

from core.exceptions import ValidationError

from realtime.records import MessageRecord, coerce_id

logger = logging.getLogger(__name__)


class ServerEvent:
    """Event names pushed to clients."""

    CONNECTED: Final[str] = "connected"
    JOINED_CHAT: Final[str] = "joined_chat"
    USER_CONNECTED: Final[str] = "user_connected"
    USER_DISCONNECTED: Final[str] = "user_disconnected"
    ONLINE_USERS: Final[str] = "online_users"
    RECEIVE_MESSAGE: Final[str] = "receive_message"
    TYPING: Final[str] = "typing"
    STOP_TYPING: Final[str] = "stop_typing"
    MESSAGE_READ: Final[str] = "message_read"


# =============================================================================
# Client Events
# =============================================================================


@dataclass(frozen=True)
class Setup:
    user_id: str


@dataclass(frozen=True)
class JoinChat:
    chat_id: str


@dataclass(frozen=True)
class LeaveChat:
    chat_id: str


@dataclass(frozen=True)
class NewMessage:
    record: MessageRecord


@dataclass(frozen=True)
class Typing:
    chat_id: str
    user_id: str | None = None


@dataclass(frozen=True)
class StopTyping:
    chat_id: str
    user_id: str | None = None


@dataclass(frozen=True)
class MessageRead:
    chat_id: str
    message_id: str
    user_id: str | None = None


@dataclass(frozen=True)
class GetOnlineUsers:
    pass


ClientEvent = Union[
    Setup,
    JoinChat,
    LeaveChat,
    NewMessage,
    Typing,
    StopTyping,
    MessageRead,
    GetOnlineUsers,
]


# =============================================================================
# Payload Parsers
# =============================================================================


def _field(data: Any, *names: str) -> Any:
    if not isinstance(data, dict):
        return None
    for name in names:
        if data.get(name) is not None:
            return data[name]
    return None


def _optional_user(data: Any) -> str | None:
    user = _field(data, "userId", "user_id")
    return coerce_id(user, "userId") if user is not None else None


def _chat_id(data: Any) -> str:
    if isinstance(data, dict):
        return coerce_id(_field(data, "chatId", "chat_id"), "chatId")
    return coerce_id(data, "chatId")


def _parse_setup(data: Any) -> Setup:
    if isinstance(data, dict):
        data = _field(data, "userId", "_id", "id")
    return Setup(user_id=coerce_id(data, "userId"))


def _parse_typing(data: Any) -> Typing:
    return Typing(chat_id=_chat_id(data), user_id=_optional_user(data))


def _parse_stop_typing(data: Any) -> StopTyping:
    return StopTyping(chat_id=_chat_id(data), user_id=_optional_user(data))


def _parse_message_read(data: Any) -> MessageRead:
    return MessageRead(
        chat_id=_chat_id(data),
        message_id=coerce_id(_field(data, "messageId", "message_id"), "messageId"),
        user_id=_optional_user(data),
    )


PARSERS: dict[str, Callable[[Any], ClientEvent]] = {
    "setup": _parse_setup,
    "join_chat": lambda data: JoinChat(chat_id=_chat_id(data)),
    "leave_chat": lambda data: LeaveChat(chat_id=_chat_id(data)),
    "new_message": lambda data: NewMessage(record=MessageRecord.from_payload(data)),
    "typing": _parse_typing,
    "stop_typing": _parse_stop_typing,
    "message_read": _parse_message_read,
    "get_online_users": lambda data: GetOnlineUsers(),
}


def parse_event(frame: Any) -> ClientEvent | None:
    """
    Validate a raw client frame.

    Returns:
        The matching client event, or None for unknown kinds and
        malformed payloads
    """
    if not isinstance(frame, dict):
        logger.debug(f"Ignoring non-object frame: {type(frame).__name__}")
        return None

    kind = frame.get("type")
    parser = PARSERS.get(kind) if isinstance(kind, str) else None
    if parser is None:
        logger.debug(f"Ignoring unknown event {kind!r}")
        return None

    try:
        return parser(frame.get("data"))
    except ValidationError as e:
        logger.debug(f"Ignoring malformed {kind} event: {e}")
        return None
