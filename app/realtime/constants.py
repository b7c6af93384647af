"""
Constants and configuration for the realtime module.

Defaults below can be overridden through Django settings prefixed with
``REALTIME_`` (e.g. ``REALTIME_TYPING_TTL_SECONDS``). Read them through
get_setting() so overrides apply.

Import example:
    from realtime.constants import REALTIME_CONFIG, get_setting

    ttl = get_setting("TYPING_TTL_SECONDS")
"""

from typing import Any, Final

from django.conf import settings


# =============================================================================
# Realtime Configuration
# =============================================================================


class REALTIME_CONFIG:
    """Defaults for the realtime core."""

    # Close anonymous handshakes instead of trusting the setup payload
    REQUIRE_AUTHENTICATION: Final[bool] = True

    # Typing indicators are dropped if not refreshed within this window
    TYPING_TTL_SECONDS: Final[float] = 8.0

    # How often expired typing indicators are swept (0 disables the sweeper)
    TYPING_SWEEP_INTERVAL_SECONDS: Final[float] = 2.0

    # Number of recently relayed message ids remembered for de-duplication
    RELAY_DEDUP_WINDOW: Final[int] = 1024

    # Also push a relayed message to the sender's other connections
    ECHO_TO_SENDER_DEVICES: Final[bool] = False


# =============================================================================
# WebSocket Close Codes
# =============================================================================


class CLOSE_CODES:
    """Application close codes sent to clients."""

    UNAUTHENTICATED: Final[int] = 4001


def get_setting(name: str) -> Any:
    """Return REALTIME_<name> from settings, falling back to the default."""
    return getattr(settings, f"REALTIME_{name}", getattr(REALTIME_CONFIG, name))
