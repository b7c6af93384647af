"""
Pagination classes for chat API.

Cursor-based pagination keeps message history stable while new messages
are being inserted.

Design Decisions:
    - Messages ordered oldest-first for natural reading flow
    - Cursors encode (created_at, id) for stability
"""

from rest_framework.pagination import CursorPagination


class MessageCursorPagination(CursorPagination):
    """
    Cursor pagination for message lists.

    Default: 50 messages per page
    Maximum: 100 messages per page

    Query parameters:
        cursor: Encoded cursor for position
        page_size: Number of messages (optional override)
    """

    page_size = 50
    max_page_size = 100
    page_size_query_param = "page_size"
    ordering = ("created_at", "id")
    cursor_query_param = "cursor"
