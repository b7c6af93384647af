"""
Chat store backed by the Django ORM.

The relay calls participant_ids() from async code when a message record
arrives without a participant list. The query runs through
database_sync_to_async so the event loop is not blocked.
"""

from __future__ import annotations

from channels.db import database_sync_to_async

from chat.services import ChatService


class DjangoChatStore:
    """Reads chat participants from the chat app."""

    async def participant_ids(self, chat_id: str) -> tuple[str, ...]:
        ids = await database_sync_to_async(ChatService.participant_ids)(chat_id)
        return tuple(ids)
