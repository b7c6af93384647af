"""
WebSocket consumer for the realtime core.

One RealtimeConsumer instance serves one connection. Its channel name is
the connection id used by every registry. The consumer only translates
between the socket and the lifecycle controller:

    connect     -> controller.open()
    receive     -> parse_event() -> controller.handle()
    disconnect  -> controller.close()
    realtime.event (channel layer) -> JSON frame to the client

Authentication:
    JWTAuthMiddleware puts the user on scope["user"]. With
    REALTIME_REQUIRE_AUTHENTICATION enabled, anonymous handshakes are
    closed with code 4001.

Frames:
    {"type": "<event>", "data": <payload>} in both directions. Frames that
    are not JSON, unknown or malformed are ignored.
"""

from __future__ import annotations

import json
import logging

from channels.generic.websocket import AsyncJsonWebsocketConsumer

from realtime.apps import get_controller
from realtime.constants import CLOSE_CODES, get_setting
from realtime.events import parse_event

logger = logging.getLogger(__name__)


class RealtimeConsumer(AsyncJsonWebsocketConsumer):
    """
    WebSocket consumer for presence, rooms, typing and message relay.

    Attributes:
        controller: The process-wide lifecycle controller, once accepted
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.controller = None

    async def connect(self):
        user = self.scope.get("user")
        authenticated = user is not None and user.is_authenticated

        if not authenticated and get_setting("REQUIRE_AUTHENTICATION"):
            logger.warning("Rejected unauthenticated realtime connection")
            await self.close(code=CLOSE_CODES.UNAUTHENTICATED)
            return

        self.controller = get_controller()
        subprotocols = self.scope.get("subprotocols") or []
        await self.accept("jwt" if "jwt" in subprotocols else None)
        await self.controller.open(
            self.channel_name, str(user.pk) if authenticated else None
        )

    async def disconnect(self, close_code):
        if self.controller is not None:
            await self.controller.close(self.channel_name)

    async def receive(self, text_data=None, bytes_data=None, **kwargs):
        if not text_data:
            logger.debug(f"Ignoring frame without text on {self.channel_name}")
            return
        await super().receive(text_data=text_data, bytes_data=bytes_data, **kwargs)

    async def receive_json(self, content, **kwargs):
        if self.controller is None:
            return
        await self.controller.handle(self.channel_name, parse_event(content))

    @classmethod
    async def decode_json(cls, text_data):
        try:
            return json.loads(text_data)
        except ValueError:
            logger.debug("Ignoring frame that is not valid JSON")
            return None

    async def realtime_event(self, message):
        """Handle realtime.event messages from the channel layer."""
        await self.send_json({"type": message["event"], "data": message["data"]})
