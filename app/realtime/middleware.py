"""
WebSocket authentication middleware.

Provides JWT authentication for WebSocket connections using the same
access tokens djangorestframework-simplejwt issues for the REST API.

Token Passing Methods:
    1. Query string: ws://host/ws/realtime/?token=<jwt_token>
    2. Subprotocol: Sec-WebSocket-Protocol: jwt, <jwt_token>

Usage in config/asgi.py:
    from realtime.middleware import JWTAuthMiddleware

    application = ProtocolTypeRouter({
        "websocket": JWTAuthMiddleware(
            URLRouter(websocket_urlpatterns)
        ),
    })
"""

from __future__ import annotations

import logging
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

logger = logging.getLogger(__name__)


class JWTAuthMiddleware(BaseMiddleware):
    """
    JWT authentication middleware for WebSocket connections.

    Extracts a JWT from the query string or subprotocol, validates it,
    and attaches the user to the scope. Missing or invalid tokens yield
    AnonymousUser; the consumer decides whether to accept those.
    """

    async def __call__(self, scope, receive, send):
        token = self._get_token_from_query(scope) or self._get_token_from_subprotocol(
            scope
        )

        scope = dict(scope)
        if token:
            scope["user"] = await self._get_user_from_token(token)
        else:
            scope["user"] = AnonymousUser()

        return await super().__call__(scope, receive, send)

    def _get_token_from_query(self, scope) -> str | None:
        query_string = scope.get("query_string", b"").decode()
        token_list = parse_qs(query_string).get("token", [])
        return token_list[0] if token_list else None

    def _get_token_from_subprotocol(self, scope) -> str | None:
        """Expects: Sec-WebSocket-Protocol: jwt, <token>"""
        subprotocols = scope.get("subprotocols", [])
        if len(subprotocols) >= 2 and subprotocols[0] == "jwt":
            return subprotocols[1]
        return None

    @database_sync_to_async
    def _get_user_from_token(self, token: str):
        """Validate an access token and return its active user, or AnonymousUser."""
        User = get_user_model()

        try:
            access_token = AccessToken(token)
            user_id = access_token[api_settings.USER_ID_CLAIM]
            user = User.objects.get(**{api_settings.USER_ID_FIELD: user_id})
        except TokenError as e:
            logger.warning(f"Invalid JWT token on WebSocket: {e}")
            return AnonymousUser()
        except (KeyError, User.DoesNotExist):
            logger.warning("No user found for WebSocket JWT token")
            return AnonymousUser()

        if not user.is_active:
            logger.warning(f"Inactive user attempted WebSocket connection: {user.pk}")
            return AnonymousUser()

        return user
