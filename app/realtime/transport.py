"""
Channel layer transport.

Each WebSocket connection is identified by its Channels channel name. An
outgoing event is sent to that single channel as a ``realtime.event``
message, which RealtimeConsumer.realtime_event writes to the socket.

Design Decisions:
    - Best-effort: a full channel is logged and the event dropped, since
      missed events self-heal on the next snapshot or history fetch
    - The channel layer is resolved lazily so the transport can be built
      during app loading
"""

from __future__ import annotations

import logging
from typing import Any

from channels.exceptions import ChannelFull
from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)

CHANNEL_MESSAGE_TYPE = "realtime.event"


class ChannelLayerTransport:
    """Pushes events to connections through a Channels layer."""

    def __init__(self, channel_layer=None, alias: str | None = None):
        self._channel_layer = channel_layer
        self.alias = alias

    @property
    def channel_layer(self):
        if self._channel_layer is None:
            if self.alias:
                self._channel_layer = get_channel_layer(self.alias)
            else:
                self._channel_layer = get_channel_layer()
        return self._channel_layer

    async def send(self, connection_id: str, event: str, data: Any) -> bool:
        """
        Send one event to one connection.

        Returns:
            False if the channel was full and the event was dropped
        """
        try:
            await self.channel_layer.send(
                connection_id,
                {"type": CHANNEL_MESSAGE_TYPE, "event": event, "data": data},
            )
        except ChannelFull:
            logger.warning(f"Dropped {event} for connection {connection_id}: channel full")
            return False
        return True
