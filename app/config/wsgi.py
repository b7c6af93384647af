"""
WSGI entry point.

Serves the REST API only. WebSocket connections, and with them presence,
typing and live message relay, need the ASGI application in config/asgi.py
(run it with uvicorn). Messages written through a WSGI worker are still
relayed, but only to sockets held by that same process, which a WSGI
worker never has.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
