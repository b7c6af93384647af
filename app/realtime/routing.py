"""
WebSocket URL routing for the realtime application.

URL Patterns:
    ws/realtime/ - The single realtime connection of a client

Authentication:
    The JWT access token is passed as ?token=<jwt> (or as the "jwt"
    subprotocol); JWTAuthMiddleware attaches the user to the scope.
"""

from django.urls import path

from realtime import consumers

websocket_urlpatterns = [
    path("ws/realtime/", consumers.RealtimeConsumer.as_asgi()),
]
