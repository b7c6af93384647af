"""
Permission classes for chat API.

- IsChatParticipant: User participates in the chat

Design Decisions:
    - Object-level only; list querysets are already scoped to the user
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework import permissions

from chat.models import Chat, Message

if TYPE_CHECKING:
    from rest_framework.request import Request
    from rest_framework.views import APIView


class IsChatParticipant(permissions.BasePermission):
    """Allows access only to users participating in the chat."""

    message = "You are not a participant in this chat."

    def has_object_permission(
        self, request: Request, view: APIView, obj: Chat | Message
    ) -> bool:
        if not request.user.is_authenticated:
            return False

        chat = obj.chat if isinstance(obj, Message) else obj
        return chat.has_user(request.user)
