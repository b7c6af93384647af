"""
In-memory stand-ins for the realtime core's collaborators.

- RecordingTransport: Transport that records every event instead of sending
- StaticChatStore: Chat store answering from a dict
- FakeClock: Manually advanced monotonic clock
"""

from __future__ import annotations


class RecordingTransport:
    """Transport that records (connection_id, event, data) tuples."""

    def __init__(self, unreachable=()):
        self.sent = []
        self.unreachable = set(unreachable)

    async def send(self, connection_id, event, data):
        if connection_id in self.unreachable:
            return False
        self.sent.append((connection_id, event, data))
        return True

    def events_for(self, connection_id, event=None):
        """(event, data) pairs sent to one connection, optionally filtered."""
        return [
            (name, data)
            for conn, name, data in self.sent
            if conn == connection_id and (event is None or name == event)
        ]

    def recipients(self, event):
        """Connection ids that received event, in send order."""
        return [conn for conn, name, _ in self.sent if name == event]

    def clear(self):
        self.sent.clear()


class StaticChatStore:
    """
    Chat store answering from a dict.

    on_lookup, if set, runs while the lookup is suspended, to simulate the
    registries changing during the await.
    """

    def __init__(self, participants=None, on_lookup=None):
        self.participants = participants or {}
        self.on_lookup = on_lookup
        self.lookups = []

    async def participant_ids(self, chat_id):
        self.lookups.append(chat_id)
        if self.on_lookup is not None:
            self.on_lookup()
        return tuple(self.participants.get(chat_id, ()))


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds
