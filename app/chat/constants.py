"""
Constants and configuration for the chat module.

This module centralizes configuration values for:
- Message content limits
- Attachment limits
- Chat creation rules

Import example:
    from chat.constants import MESSAGE_CONFIG, CHAT_CONFIG
"""

from typing import Final


# =============================================================================
# Message Configuration
# =============================================================================


class MESSAGE_CONFIG:
    """Configuration for message operations."""

    # Content limits
    MAX_CONTENT_LENGTH: Final[int] = 10000  # Characters

    # Attachments
    MAX_ATTACHMENTS_PER_MESSAGE: Final[int] = 10

    # History
    HISTORY_DEFAULT_LIMIT: Final[int] = 50
    HISTORY_MAX_LIMIT: Final[int] = 100


# =============================================================================
# Chat Configuration
# =============================================================================


class CHAT_CONFIG:
    """Configuration for chat creation."""

    MAX_NAME_LENGTH: Final[int] = 100

    # A group needs the admin plus at least this many other users
    MIN_GROUP_OTHER_MEMBERS: Final[int] = 2
