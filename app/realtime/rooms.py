"""
Room membership: which chat rooms each connection is subscribed to.

A room is keyed by chat id. Membership is tracked per connection, not per
user, so two tabs of the same user can view different chats. Rooms scope
typing indicators and read receipts; message fan-out goes by participant
instead (see relay.py).

Design Decisions:
    - Both directions are indexed so leave_all is proportional to the
      rooms of one connection, not to all rooms
    - Empty rooms are deleted so the index does not grow with every chat
      ever opened
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class RoomMembership:
    """
    Two-way index between connection ids and room ids.

    Attributes:
        members: room id -> set of connection ids
        subscriptions: connection id -> set of room ids
    """

    def __init__(
        self,
        members: dict[str, set[str]] | None = None,
        subscriptions: dict[str, set[str]] | None = None,
    ):
        self.members = members if members is not None else {}
        self.subscriptions = subscriptions if subscriptions is not None else {}

    def join(self, connection_id: str, room_id: str) -> bool:
        """Subscribe connection_id to room_id. Returns False if already in it."""
        rooms = self.subscriptions.setdefault(connection_id, set())
        if room_id in rooms:
            return False

        rooms.add(room_id)
        self.members.setdefault(room_id, set()).add(connection_id)
        logger.debug(f"Connection {connection_id} joined room {room_id}")
        return True

    def leave(self, connection_id: str, room_id: str) -> bool:
        """Unsubscribe connection_id from room_id. Returns False if it was not in it."""
        rooms = self.subscriptions.get(connection_id)
        if not rooms or room_id not in rooms:
            return False

        rooms.discard(room_id)
        if not rooms:
            del self.subscriptions[connection_id]
        self._discard_member(room_id, connection_id)
        logger.debug(f"Connection {connection_id} left room {room_id}")
        return True

    def leave_all(self, connection_id: str) -> frozenset[str]:
        """Unsubscribe connection_id from every room and return those rooms."""
        rooms = self.subscriptions.pop(connection_id, set())
        for room_id in rooms:
            self._discard_member(room_id, connection_id)
        if rooms:
            logger.debug(f"Connection {connection_id} left {len(rooms)} rooms")
        return frozenset(rooms)

    def members_of(self, room_id: str) -> frozenset[str]:
        """Connection ids currently in room_id."""
        return frozenset(self.members.get(room_id, ()))

    def rooms_of(self, connection_id: str) -> frozenset[str]:
        return frozenset(self.subscriptions.get(connection_id, ()))

    def _discard_member(self, room_id: str, connection_id: str) -> None:
        connections = self.members.get(room_id)
        if connections is None:
            return
        connections.discard(connection_id)
        if not connections:
            del self.members[room_id]
