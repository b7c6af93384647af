"""
Tests for JWT authentication of WebSocket handshakes.

These run the full websocket stack (JWTAuthMiddleware in front of the
realtime routes) with real access tokens from simplejwt.
"""

import pytest
from channels.db import database_sync_to_async
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from rest_framework_simplejwt.tokens import AccessToken

from authentication.tests.factories import UserFactory
from realtime.constants import CLOSE_CODES
from realtime.lifecycle import ConnectionLifecycleController
from realtime.middleware import JWTAuthMiddleware
from realtime.routing import websocket_urlpatterns
from realtime.transport import ChannelLayerTransport

application = JWTAuthMiddleware(URLRouter(websocket_urlpatterns))


@pytest.fixture(autouse=True)
def live_controller(settings, monkeypatch):
    settings.REALTIME_REQUIRE_AUTHENTICATION = True
    controller = ConnectionLifecycleController(
        transport=ChannelLayerTransport(), sweep_interval=0
    )
    monkeypatch.setattr("realtime.consumers.get_controller", lambda: controller)
    return controller


@database_sync_to_async
def create_user(**kwargs):
    return UserFactory(**kwargs)


@database_sync_to_async
def access_token_for(user):
    return str(AccessToken.for_user(user))


@pytest.mark.asyncio
@pytest.mark.django_db(transaction=True)
class TestJWTAuthMiddleware:
    """Tests for token extraction and validation."""

    async def test_query_string_token(self, live_controller):
        user = await create_user()
        token = await access_token_for(user)
        comm = WebsocketCommunicator(application, f"/ws/realtime/?token={token}")

        connected, _ = await comm.connect()
        await comm.send_json_to({"type": "setup", "data": {"userId": str(user.pk)}})
        response = await comm.receive_json_from()

        assert connected is True
        assert response == {"type": "connected", "data": {"userId": str(user.pk)}}
        assert live_controller.presence.is_online(str(user.pk)) is True
        await comm.disconnect()

    async def test_subprotocol_token(self):
        """
        Browsers cannot set headers on WebSocket handshakes.

        Why it matters: The subprotocol keeps the token out of URLs and
        access logs.
        """
        user = await create_user()
        token = await access_token_for(user)
        comm = WebsocketCommunicator(
            application, "/ws/realtime/", subprotocols=["jwt", token]
        )

        connected, subprotocol = await comm.connect()

        assert connected is True
        assert subprotocol == "jwt"
        await comm.disconnect()

    async def test_missing_token_is_rejected(self):
        comm = WebsocketCommunicator(application, "/ws/realtime/")

        connected, code = await comm.connect()

        assert connected is False
        assert code == CLOSE_CODES.UNAUTHENTICATED

    async def test_invalid_token_is_rejected(self):
        comm = WebsocketCommunicator(application, "/ws/realtime/?token=not-a-jwt")

        connected, code = await comm.connect()

        assert connected is False
        assert code == CLOSE_CODES.UNAUTHENTICATED

    async def test_inactive_user_is_rejected(self):
        user = await create_user(is_active=False)
        token = await access_token_for(user)
        comm = WebsocketCommunicator(application, f"/ws/realtime/?token={token}")

        connected, code = await comm.connect()

        assert connected is False
        assert code == CLOSE_CODES.UNAUTHENTICATED
