"""
Session registry: which connections belong to which user.

A user may hold several connections at once (tabs, devices). The registry
keeps both directions of that mapping so teardown can find the owner of a
connection and the relay can find every connection of a user.

Design Decisions:
    - Storage is injected (plain dicts by default) and owned by the
      lifecycle controller; there is no module-level state
    - Unknown connection ids are no-ops, never errors; teardown may run
      more than once for the same connection
    - Accessors return copies so callers can iterate while the registry
      keeps changing
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    Two-way index between connection ids and user ids.

    Attributes:
        owners: connection id -> user id
        connections: user id -> set of connection ids
    """

    def __init__(
        self,
        owners: dict[str, str] | None = None,
        connections: dict[str, set[str]] | None = None,
    ):
        self.owners = owners if owners is not None else {}
        self.connections = connections if connections is not None else {}

    def register_connection(self, connection_id: str, user_id: str) -> None:
        """
        Bind connection_id to user_id.

        Re-registering overwrites: a connection bound to another user is moved.
        """
        previous = self.owners.get(connection_id)
        if previous == user_id:
            return
        if previous is not None:
            self._discard(previous, connection_id)

        self.owners[connection_id] = user_id
        self.connections.setdefault(user_id, set()).add(connection_id)
        logger.debug(f"Registered connection {connection_id} for user {user_id}")

    def unregister_connection(self, connection_id: str) -> str | None:
        """
        Remove connection_id and return the user that owned it.

        Returns None if the connection was unknown.
        """
        user_id = self.owners.pop(connection_id, None)
        if user_id is None:
            return None

        self._discard(user_id, connection_id)
        logger.debug(f"Unregistered connection {connection_id} of user {user_id}")
        return user_id

    def has_other_connections(self, user_id: str, excluding_connection_id: str) -> bool:
        """Whether user_id has a live connection other than the excluded one."""
        return bool(self.connections.get(user_id, set()) - {excluding_connection_id})

    def listeners(self, user_id: str) -> frozenset[str]:
        """Live connection ids of user_id; empty if the user has none."""
        return frozenset(self.connections.get(user_id, ()))

    def user_for(self, connection_id: str) -> str | None:
        return self.owners.get(connection_id)

    def is_connected(self, user_id: str) -> bool:
        return bool(self.connections.get(user_id))

    def connection_count(self) -> int:
        return len(self.owners)

    def _discard(self, user_id: str, connection_id: str) -> None:
        remaining = self.connections.get(user_id)
        if remaining is None:
            return
        remaining.discard(connection_id)
        if not remaining:
            del self.connections[user_id]
