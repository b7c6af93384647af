"""
Typing-state tracker: who is typing in which chat.

Entries are keyed by (chat id, user id) and hold the monotonic time of the
last typing event. An entry ends on an explicit stop, when the user's last
connection closes, or when it has not been refreshed for ``ttl`` seconds.
Expiry covers a stop event lost in transit; expire() is driven by the
lifecycle controller's sweeper.

Design Decisions:
    - Clock is injectable so expiry is testable without sleeping
    - ttl of 0 or None disables expiry
    - A by-user index keeps clear_all_for proportional to one user's chats
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)


class TypingTracker:
    """
    Tracks ephemeral typing indicators.

    Usage:
        typing = TypingTracker(ttl=8)
        typing.set_typing("chat-1", "u1")
        typing.typing_in("chat-1")   # {"u1"}
        typing.clear_all_for("u1")   # ["chat-1"]
    """

    def __init__(
        self,
        ttl: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        states: dict[tuple[str, str], float] | None = None,
    ):
        self.ttl = ttl or None
        self.clock = clock
        self.states = states if states is not None else {}
        self._by_user: dict[str, set[str]] = {}
        for chat_id, user_id in self.states:
            self._by_user.setdefault(user_id, set()).add(chat_id)

    def set_typing(self, chat_id: str, user_id: str) -> bool:
        """
        Record user_id as typing in chat_id, refreshing its expiry.

        Returns:
            True if the user was not already typing there
        """
        key = (chat_id, user_id)
        started = key not in self.states or self._expired(self.states[key], self.clock())
        self.states[key] = self.clock()
        self._by_user.setdefault(user_id, set()).add(chat_id)
        return started

    def clear_typing(self, chat_id: str, user_id: str) -> bool:
        """
        Record user_id as not typing in chat_id.

        Returns:
            True if the user was typing there
        """
        if self.states.pop((chat_id, user_id), None) is None:
            return False
        self._unindex(chat_id, user_id)
        return True

    def clear_all_for(self, user_id: str) -> list[str]:
        """Clear every typing entry of user_id and return the affected chat ids."""
        chat_ids = sorted(self._by_user.pop(user_id, set()))
        for chat_id in chat_ids:
            self.states.pop((chat_id, user_id), None)
        if chat_ids:
            logger.debug(f"Cleared typing state of user {user_id} in {len(chat_ids)} chats")
        return chat_ids

    def is_typing(self, chat_id: str, user_id: str) -> bool:
        started = self.states.get((chat_id, user_id))
        return started is not None and not self._expired(started, self.clock())

    def typing_in(self, chat_id: str) -> set[str]:
        """Users currently typing in chat_id."""
        now = self.clock()
        return {
            user_id
            for (room, user_id), started in self.states.items()
            if room == chat_id and not self._expired(started, now)
        }

    def expire(self, now: float | None = None) -> list[tuple[str, str]]:
        """
        Drop entries not refreshed within ttl.

        Returns:
            (chat id, user id) pairs that expired, in a stable order
        """
        if self.ttl is None:
            return []

        now = self.clock() if now is None else now
        expired = sorted(
            key for key, started in self.states.items() if self._expired(started, now)
        )
        for chat_id, user_id in expired:
            del self.states[(chat_id, user_id)]
            self._unindex(chat_id, user_id)

        if expired:
            logger.debug(f"Expired {len(expired)} typing indicators")
        return expired

    def _expired(self, started: float, now: float) -> bool:
        return self.ttl is not None and now - started >= self.ttl

    def _unindex(self, chat_id: str, user_id: str) -> None:
        chats = self._by_user.get(user_id)
        if chats is None:
            return
        chats.discard(chat_id)
        if not chats:
            del self._by_user[user_id]
