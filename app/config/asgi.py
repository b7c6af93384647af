"""
ASGI config for the Django application.

This file exposes the ASGI callable as a module-level variable named
`application`. It serves:
- HTTP requests via Django
- The realtime WebSocket (ws/realtime/) via Django Channels

Run a single server process: presence, rooms and typing state live in that
process's memory.

For more information on this file, see:
https://docs.djangoproject.com/en/5.2/howto/deployment/asgi/
"""

import os

from django.core.asgi import get_asgi_application

# Set the default Django settings module for the ASGI application
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

# Initialize Django ASGI application early to ensure settings are loaded
# before importing any models or other Django components
django_asgi_app = get_asgi_application()

# Import Channels components after Django is initialized
from channels.routing import ProtocolTypeRouter, URLRouter  # noqa: E402
from channels.security.websocket import AllowedHostsOriginValidator  # noqa: E402

from realtime.middleware import JWTAuthMiddleware  # noqa: E402
from realtime.routing import websocket_urlpatterns  # noqa: E402

# ASGI application that routes HTTP and WebSocket protocols
application = ProtocolTypeRouter(
    {
        # HTTP requests are handled by Django's ASGI application
        "http": django_asgi_app,
        # WebSocket connections are routed through:
        # 1. AllowedHostsOriginValidator - ensures origin matches ALLOWED_HOSTS
        # 2. JWTAuthMiddleware - authenticates user via JWT token
        # 3. URLRouter - routes to the realtime consumer
        "websocket": AllowedHostsOriginValidator(
            JWTAuthMiddleware(URLRouter(websocket_urlpatterns))
        ),
    }
)
