"""
Connection lifecycle controller.

Owns every open connection and wires the session registry, presence
tracker, room membership, typing tracker and message relay together.
One controller exists per process (see apps.get_controller()).

Connection states:
    Open (unidentified) --setup--> Open (identified) --close--> Closed

A connection can reach Closed from either Open state, gracefully or by
network loss; close() handles both the same way and is safe to call more
than once.

Teardown order on close():
    1. Leave every room
    2. If this was the user's last connection, clear the user's typing
       state and tell room peers they stopped typing
    3. Unregister the connection from the session registry
    4. If the user has no connection left, mark them offline and broadcast

Step 2 asks the registry before step 3 removes the connection, so the
"last connection" check sees the state before removal.

Concurrency:
    Handlers run on one event loop. Each handler mutates registry state
    synchronously and collects the events to send; awaiting the transport
    happens only after the state is consistent.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from realtime.constants import get_setting
from realtime.events import (
    GetOnlineUsers,
    JoinChat,
    LeaveChat,
    MessageRead,
    NewMessage,
    ServerEvent,
    Setup,
    StopTyping,
    Typing,
)
from realtime.presence import PresenceTracker
from realtime.relay import MessageRelay
from realtime.rooms import RoomMembership
from realtime.sessions import SessionRegistry
from realtime.typing_state import TypingTracker

if TYPE_CHECKING:
    from realtime.events import ClientEvent
    from realtime.protocols import ChatStore, Transport
    from realtime.records import MessageRecord
    from realtime.relay import DeliveryReport

logger = logging.getLogger(__name__)

Outgoing = list[tuple[str, str, Any]]


@dataclass
class Connection:
    """
    One open transport connection.

    Attributes:
        id: Connection identifier (the Channels channel name)
        user_id: Identity bound by setup; None while unidentified
        authenticated_user_id: Identity proven at handshake, if any
        opened_at: Monotonic time the connection opened
    """

    id: str
    user_id: str | None = None
    authenticated_user_id: str | None = None
    opened_at: float = field(default_factory=time.monotonic)

    @property
    def is_identified(self) -> bool:
        return self.user_id is not None


class ConnectionLifecycleController:
    """
    Orchestrates setup, client events and teardown of connections.

    Usage:
        controller = ConnectionLifecycleController(transport=ChannelLayerTransport())
        await controller.open(channel_name)
        await controller.handle(channel_name, parse_event(frame))
        await controller.close(channel_name)
    """

    def __init__(
        self,
        transport: Transport,
        sessions: SessionRegistry | None = None,
        presence: PresenceTracker | None = None,
        rooms: RoomMembership | None = None,
        typing: TypingTracker | None = None,
        relay: MessageRelay | None = None,
        chat_store: ChatStore | None = None,
        connections: dict[str, Connection] | None = None,
        sweep_interval: float | None = None,
    ):
        self.transport = transport
        self.sessions = sessions if sessions is not None else SessionRegistry()
        self.presence = presence if presence is not None else PresenceTracker()
        self.rooms = rooms if rooms is not None else RoomMembership()
        self.typing = (
            typing
            if typing is not None
            else TypingTracker(ttl=get_setting("TYPING_TTL_SECONDS"))
        )
        self.relay = (
            relay
            if relay is not None
            else MessageRelay(self.sessions, transport, chat_store=chat_store)
        )
        self.connections = connections if connections is not None else {}
        self.sweep_interval = (
            get_setting("TYPING_SWEEP_INTERVAL_SECONDS")
            if sweep_interval is None
            else sweep_interval
        )
        self._sweeper: asyncio.Task | None = None
        self._handlers = {
            Setup: lambda cid, e: self.setup(cid, e.user_id),
            JoinChat: lambda cid, e: self.join_chat(cid, e.chat_id),
            LeaveChat: lambda cid, e: self.leave_chat(cid, e.chat_id),
            NewMessage: lambda cid, e: self.new_message(cid, e.record),
            Typing: lambda cid, e: self.typing_started(cid, e.chat_id, e.user_id),
            StopTyping: lambda cid, e: self.typing_stopped(cid, e.chat_id, e.user_id),
            MessageRead: lambda cid, e: self.message_read(
                cid, e.chat_id, e.message_id, e.user_id
            ),
            GetOnlineUsers: lambda cid, e: self.get_online_users(cid),
        }

    # =========================================================================
    # Connection lifecycle
    # =========================================================================

    async def open(
        self, connection_id: str, authenticated_user_id: str | None = None
    ) -> Connection:
        """Register a freshly accepted connection. Idempotent."""
        connection = self.connections.get(connection_id)
        if connection is None:
            connection = Connection(
                id=connection_id, authenticated_user_id=authenticated_user_id
            )
            self.connections[connection_id] = connection
            logger.info(f"Connection {connection_id} opened")
        self._ensure_sweeper()
        return connection

    async def setup(self, connection_id: str, user_id: str) -> bool:
        """
        Bind a user identity to a connection and bring the user online.

        An authenticated connection always binds its authenticated user. A
        connection already bound to another user ignores the request.

        Returns:
            True if the connection is identified as the user afterwards
        """
        connection = self.connections.get(connection_id)
        if connection is None:
            logger.debug(f"Ignoring setup on unknown connection {connection_id}")
            return False

        if connection.authenticated_user_id is not None:
            if user_id != connection.authenticated_user_id:
                logger.warning(
                    f"Connection {connection_id} claimed user {user_id}, "
                    f"binding authenticated user {connection.authenticated_user_id}"
                )
            user_id = connection.authenticated_user_id

        if connection.user_id is not None and connection.user_id != user_id:
            logger.warning(
                f"Connection {connection_id} is already set up as "
                f"user {connection.user_id}, ignoring setup as {user_id}"
            )
            return False

        connection.user_id = user_id
        self.sessions.register_connection(connection_id, user_id)
        came_online = self.presence.mark_online(user_id)
        logger.info(f"Connection {connection_id} set up as user {user_id}")

        outgoing: Outgoing = [(connection_id, ServerEvent.CONNECTED, {"userId": user_id})]
        if came_online:
            outgoing += self._to_everyone_but(
                user_id, ServerEvent.USER_CONNECTED, {"_id": user_id}
            )
        await self._dispatch(outgoing)
        return True

    async def close(self, connection_id: str) -> None:
        """
        Tear a connection down. Unknown connections are a no-op.

        See the module docstring for the order of steps.
        """
        connection = self.connections.pop(connection_id, None)
        if connection is None:
            logger.debug(f"Ignoring close of unknown connection {connection_id}")
            return

        outgoing: Outgoing = []
        self.rooms.leave_all(connection_id)

        user_id = connection.user_id or connection.authenticated_user_id
        if user_id is not None:
            if not self.sessions.has_other_connections(user_id, connection_id):
                for chat_id in self.typing.clear_all_for(user_id):
                    outgoing += self._to_room_peers(
                        chat_id,
                        user_id,
                        ServerEvent.STOP_TYPING,
                        {"chatId": chat_id, "userId": user_id},
                    )

            self.sessions.unregister_connection(connection_id)

            if not self.sessions.is_connected(user_id) and self.presence.mark_offline(
                user_id
            ):
                outgoing += self._to_everyone_but(
                    user_id, ServerEvent.USER_DISCONNECTED, user_id
                )

        logger.info(f"Connection {connection_id} closed (user {user_id})")

        if not self.connections:
            self._stop_sweeper()

        await self._dispatch(outgoing)

    # =========================================================================
    # Client events
    # =========================================================================

    async def handle(self, connection_id: str, event: ClientEvent | None) -> Any:
        """Route a parsed client event to its handler. None is ignored."""
        if event is None:
            return None
        handler = self._handlers.get(type(event))
        if handler is None:
            logger.debug(f"No handler for {type(event).__name__}")
            return None
        return await handler(connection_id, event)

    async def join_chat(self, connection_id: str, chat_id: str) -> bool:
        """Subscribe a connection to a chat room and acknowledge it."""
        if connection_id not in self.connections:
            logger.debug(f"Ignoring join_chat on unknown connection {connection_id}")
            return False

        self.rooms.join(connection_id, chat_id)
        logger.debug(f"Connection {connection_id} joined chat {chat_id}")
        await self._dispatch(
            [(connection_id, ServerEvent.JOINED_CHAT, {"chatId": chat_id})]
        )
        return True

    async def leave_chat(self, connection_id: str, chat_id: str) -> bool:
        if connection_id not in self.connections:
            return False
        return self.rooms.leave(connection_id, chat_id)

    async def new_message(
        self, connection_id: str, record: MessageRecord
    ) -> DeliveryReport | None:
        """
        Relay a message a client announced after persisting it.

        The announced sender must be the connection's own user. On an
        authenticated connection the recipients come from the chat store,
        never from the announced payload, and the sender must be one of
        the chat's participants.
        """
        actor = self._actor(connection_id, record.sender_id)
        if actor is None or actor != record.sender_id:
            logger.warning(
                f"Ignoring new_message from connection {connection_id}: "
                f"sender {record.sender_id} does not match connection user"
            )
            return None

        connection = self.connections[connection_id]
        if connection.authenticated_user_id is not None:
            chat_store = self.relay.chat_store
            if chat_store is None:
                logger.warning(
                    f"Ignoring new_message from connection {connection_id}: "
                    f"no chat store to resolve chat {record.chat_id}"
                )
                return None

            participants = tuple(await chat_store.participant_ids(record.chat_id))
            if record.sender_id not in participants:
                logger.warning(
                    f"Ignoring new_message from connection {connection_id}: "
                    f"user {record.sender_id} is not a participant of chat "
                    f"{record.chat_id}"
                )
                return None
            record = replace(record, participant_ids=participants)

        return await self.relay.deliver(record, origin_connection_id=connection_id)

    async def typing_started(
        self, connection_id: str, chat_id: str, user_id: str | None = None
    ) -> bool:
        """Mark the connection's user as typing and tell room peers."""
        actor = self._actor(connection_id, user_id)
        if actor is None:
            return False

        self.typing.set_typing(chat_id, actor)
        await self._dispatch(
            self._to_room_peers(
                chat_id,
                actor,
                ServerEvent.TYPING,
                {"chatId": chat_id, "userId": actor},
                origin=connection_id,
            )
        )
        return True

    async def typing_stopped(
        self, connection_id: str, chat_id: str, user_id: str | None = None
    ) -> bool:
        """Clear the connection's user typing state and tell room peers."""
        actor = self._actor(connection_id, user_id)
        if actor is None:
            return False

        self.typing.clear_typing(chat_id, actor)
        await self._dispatch(
            self._to_room_peers(
                chat_id,
                actor,
                ServerEvent.STOP_TYPING,
                {"chatId": chat_id, "userId": actor},
                origin=connection_id,
            )
        )
        return True

    async def message_read(
        self,
        connection_id: str,
        chat_id: str,
        message_id: str,
        user_id: str | None = None,
    ) -> bool:
        """Tell room peers that the connection's user read a message."""
        actor = self._actor(connection_id, user_id)
        if actor is None:
            return False

        await self._dispatch(
            self._to_room_peers(
                chat_id,
                actor,
                ServerEvent.MESSAGE_READ,
                {"messageId": message_id, "chatId": chat_id, "userId": actor},
                origin=connection_id,
            )
        )
        return True

    async def get_online_users(self, connection_id: str) -> list[str] | None:
        """Send the full presence snapshot to one connection."""
        if connection_id not in self.connections:
            return None

        snapshot = self.presence.snapshot()
        await self._dispatch([(connection_id, ServerEvent.ONLINE_USERS, snapshot)])
        return snapshot

    # =========================================================================
    # Typing expiry
    # =========================================================================

    async def sweep_typing(self, now: float | None = None) -> list[tuple[str, str]]:
        """Expire stale typing indicators and tell room peers they stopped."""
        expired = self.typing.expire(now)
        outgoing: Outgoing = []
        for chat_id, user_id in expired:
            outgoing += self._to_room_peers(
                chat_id,
                user_id,
                ServerEvent.STOP_TYPING,
                {"chatId": chat_id, "userId": user_id},
            )
        await self._dispatch(outgoing)
        return expired

    def _ensure_sweeper(self) -> None:
        if not self.sweep_interval or self.typing.ttl is None:
            return
        loop = asyncio.get_running_loop()
        if (
            self._sweeper is not None
            and not self._sweeper.done()
            and self._sweeper.get_loop() is loop
        ):
            return
        self._sweeper = loop.create_task(self._sweep_forever())

    def _stop_sweeper(self) -> None:
        if self._sweeper is not None and not self._sweeper.done():
            self._sweeper.cancel()
        self._sweeper = None

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval)
            try:
                await self.sweep_typing()
            except Exception:
                logger.exception("Typing sweep failed")

    # =========================================================================
    # Helpers
    # =========================================================================

    def connection_count(self) -> int:
        return len(self.connections)

    def _actor(self, connection_id: str, claimed_user_id: str | None) -> str | None:
        """
        Resolve who is acting on a connection.

        A bound or authenticated identity wins over the payload's claim.
        Unknown connections have no actor.
        """
        connection = self.connections.get(connection_id)
        if connection is None:
            return None
        return connection.user_id or connection.authenticated_user_id or claimed_user_id

    def _to_room_peers(
        self,
        chat_id: str,
        user_id: str,
        event: str,
        data: Any,
        origin: str | None = None,
    ) -> Outgoing:
        excluded = self.sessions.listeners(user_id) | {origin}
        return [
            (connection_id, event, data)
            for connection_id in sorted(self.rooms.members_of(chat_id) - excluded)
        ]

    def _to_everyone_but(self, user_id: str, event: str, data: Any) -> Outgoing:
        excluded = self.sessions.listeners(user_id)
        return [
            (connection_id, event, data)
            for connection_id in sorted(self.connections)
            if connection_id not in excluded
        ]

    async def _dispatch(self, outgoing: Outgoing) -> None:
        for connection_id, event, data in outgoing:
            await self.transport.send(connection_id, event, data)
