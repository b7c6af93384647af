"""
Signal receivers connecting the chat store to the relay.

relay_created_message runs after a message write commits and pushes the
message to the live connections of the other participants. A relay
failure is logged and never propagates into the write path: the message
is already durable and reachable through history.
"""

from __future__ import annotations

import logging

from asgiref.sync import async_to_sync
from django.dispatch import receiver

from chat.signals import message_created
from realtime.apps import get_controller
from realtime.records import MessageRecord

logger = logging.getLogger(__name__)


@receiver(message_created, dispatch_uid="realtime.relay_created_message")
def relay_created_message(sender, message, **kwargs):
    """Relay a committed message to live connections."""
    try:
        record = MessageRecord.from_message(message)
        async_to_sync(get_controller().relay.deliver)(record)
    except Exception:
        logger.exception(f"Failed to relay message {message.pk}")
