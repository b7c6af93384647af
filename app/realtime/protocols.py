"""
Protocol definitions for the collaborators of the realtime core.

Protocols define the contracts the lifecycle controller and relay depend
on, so tests can pass in recording fakes instead of a channel layer or
database.

Available Protocols:
    Transport: Pushes one event to one connection
    ChatStore: Looks up the participants of a chat

Usage:
    from realtime.protocols import Transport

    class RecordingTransport:
        def __init__(self):
            self.sent = []

        async def send(self, connection_id, event, data):
            self.sent.append((connection_id, event, data))
            return True

    # RecordingTransport is a valid Transport without inheriting from it
    transport: Transport = RecordingTransport()
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from typing import Any


@runtime_checkable
class Transport(Protocol):
    """
    Protocol for pushing server events to live connections.

    send() returns False when the event could not be handed to the
    connection. Delivery is best-effort and never raises for a single
    unreachable connection.
    """

    async def send(self, connection_id: str, event: str, data: Any) -> bool:
        """Push event with data to a single connection."""
        ...


@runtime_checkable
class ChatStore(Protocol):
    """Protocol for the persisted chat store, read-only."""

    async def participant_ids(self, chat_id: str) -> tuple[str, ...]:
        """Return participant user ids of a chat; empty if unknown."""
        ...
