"""
Realtime application configuration.

The app owns one ConnectionLifecycleController per process. It is built
in ready() and reached through get_controller() by the WebSocket consumer,
the message_created receiver and the presence endpoint.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.apps import AppConfig, apps

if TYPE_CHECKING:
    from realtime.lifecycle import ConnectionLifecycleController


class RealtimeConfig(AppConfig):
    """Configuration for the realtime application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "realtime"
    verbose_name = "Realtime"

    controller: ConnectionLifecycleController | None = None

    def ready(self):
        """Connect signal receivers and build the process-wide controller."""
        import realtime.receivers  # noqa: F401

        self.controller = build_controller()


def build_controller() -> ConnectionLifecycleController:
    """Build a controller on the default channel layer and the Django chat store."""
    from realtime.lifecycle import ConnectionLifecycleController
    from realtime.stores import DjangoChatStore
    from realtime.transport import ChannelLayerTransport

    return ConnectionLifecycleController(
        transport=ChannelLayerTransport(),
        chat_store=DjangoChatStore(),
    )


def get_controller() -> ConnectionLifecycleController:
    """Return the process-wide controller."""
    config = apps.get_app_config("realtime")
    if config.controller is None:
        config.controller = build_controller()
    return config.controller
