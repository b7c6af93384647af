"""
Presence tracker: online/offline state per user.

Per user the state machine is Offline -> Online -> Offline. Transitions
are edge-triggered: marking an online user online again (a second tab, a
fast reconnect) changes nothing and notifies nobody.

Every transition is published through the presence_changed signal; the
lifecycle controller additionally broadcasts it to open connections.

Design Decisions:
    - State lives in memory only; a restart resets everyone to offline
    - The tracker does not count connections itself; the controller asks
      the session registry and calls mark_online/mark_offline accordingly
    - last_seen records when a user last went offline (or came online)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from django.utils import timezone

from realtime.signals import presence_changed

logger = logging.getLogger(__name__)


class PresenceTracker:
    """
    Tracks which users are online.

    Usage:
        presence = PresenceTracker()
        presence.mark_online("u1")   # True, notifies
        presence.mark_online("u1")   # False, already online
        presence.snapshot()          # ["u1"]
    """

    def __init__(
        self,
        online: dict[str, datetime] | None = None,
        seen: dict[str, datetime] | None = None,
        clock: Callable[[], datetime] = timezone.now,
    ):
        self.online = online if online is not None else {}
        self.seen = seen if seen is not None else {}
        self.clock = clock

    def mark_online(self, user_id: str) -> bool:
        """
        Transition user_id to online.

        Returns:
            True if this call made the transition, False if already online
        """
        if user_id in self.online:
            return False

        now = self.clock()
        self.online[user_id] = now
        self.seen[user_id] = now
        logger.info(f"User {user_id} is online")
        presence_changed.send(sender=self.__class__, user_id=user_id, online=True)
        return True

    def mark_offline(self, user_id: str) -> bool:
        """
        Transition user_id to offline.

        Returns:
            True if this call made the transition, False if already offline
        """
        if self.online.pop(user_id, None) is None:
            return False

        self.seen[user_id] = self.clock()
        logger.info(f"User {user_id} is offline")
        presence_changed.send(sender=self.__class__, user_id=user_id, online=False)
        return True

    def snapshot(self) -> list[str]:
        """Ids of all online users, sorted."""
        return sorted(self.online)

    def is_online(self, user_id: str) -> bool:
        return user_id in self.online

    def last_seen(self, user_id: str) -> datetime | None:
        return self.seen.get(user_id)
