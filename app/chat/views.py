"""
ViewSets for chat API.

This module provides REST API endpoints for the chat system:
- ChatViewSet: Chat listing, direct/group creation, group membership,
  read receipts
- MessageViewSet: Message history and sending (nested under chat)

URL Structure:
    /api/v1/chat/chats/                    GET, POST (direct)
    /api/v1/chat/chats/group/              POST
    /api/v1/chat/chats/{id}/               GET
    /api/v1/chat/chats/{id}/read/          POST
    /api/v1/chat/chats/{id}/rename/        POST
    /api/v1/chat/chats/{id}/add/           POST
    /api/v1/chat/chats/{id}/remove/        POST
    /api/v1/chat/chats/{id}/messages/      GET, POST

Design Decisions:
    - All operations use the service layer for business logic
    - Sending a message is the authenticated write path; the realtime relay
      is triggered from the service after commit, never from the view
"""

from __future__ import annotations

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from chat.models import Chat
from chat.pagination import MessageCursorPagination
from chat.permissions import IsChatParticipant
from chat.serializers import (
    ChatSerializer,
    DirectChatCreateSerializer,
    GroupChatCreateSerializer,
    GroupMemberSerializer,
    GroupRenameSerializer,
    MarkReadSerializer,
    MessageCreateSerializer,
    MessageSerializer,
)
from chat.services import ChatService, MessageService

ERROR_STATUS = {
    "NOT_PARTICIPANT": status.HTTP_403_FORBIDDEN,
    "NOT_ADMIN": status.HTTP_403_FORBIDDEN,
    "CHAT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
}


def error_response(result) -> Response:
    """Turn a failed ServiceResult into an error response."""
    return Response(
        result.to_response(),
        status=ERROR_STATUS.get(result.error_code, status.HTTP_400_BAD_REQUEST),
    )


@extend_schema_view(
    list=extend_schema(
        operation_id="list_chats",
        summary="List chats",
        tags=["Chat - Chats"],
    ),
    create=extend_schema(
        operation_id="access_direct_chat",
        summary="Open direct chat",
        request=DirectChatCreateSerializer,
        responses={200: ChatSerializer, 201: ChatSerializer},
        tags=["Chat - Chats"],
    ),
    retrieve=extend_schema(
        operation_id="get_chat",
        summary="Get chat",
        tags=["Chat - Chats"],
    ),
)
class ChatViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    ViewSet for chat operations.

    list:
        Get all chats of the current user, most recently active first.

    create:
        Open the direct chat with another user (returns existing if found).

    group:
        Create a group chat with the current user as admin.

    read:
        Mark messages in the chat as read.

    rename, add_member, remove_member:
        Manage a group chat. Adding and removing others is admin only.
    """

    serializer_class = ChatSerializer
    pagination_class = None

    def get_queryset(self):
        """Filter to chats where the user participates."""
        if not self.request.user.is_authenticated:
            return Chat.objects.none()
        return ChatService.get_user_chats(self.request.user)

    def get_permissions(self):
        if self.action in ("retrieve", "read"):
            return [IsAuthenticated(), IsChatParticipant()]
        return [IsAuthenticated()]

    def create(self, request):
        """Get or create the direct chat with another user."""
        serializer = DirectChatCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        other = serializer.validated_data["user_id"]
        existed = Chat.objects.filter(is_group_chat=False, users=request.user).filter(
            users=other
        ).exists()

        result = ChatService.access_direct(request.user, other)
        if not result.success:
            return error_response(result)

        return Response(
            ChatSerializer(result.data).data,
            status=status.HTTP_200_OK if existed else status.HTTP_201_CREATED,
        )

    @extend_schema(
        operation_id="create_group_chat",
        summary="Create group chat",
        request=GroupChatCreateSerializer,
        responses={201: ChatSerializer},
        tags=["Chat - Chats"],
    )
    @action(detail=False, methods=["post"])
    def group(self, request):
        """Create a group chat."""
        serializer = GroupChatCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = serializer.validated_data
        result = ChatService.create_group(
            admin=request.user,
            chat_name=data["chat_name"],
            members=data["user_ids"],
            avatar=data.get("avatar", ""),
        )
        if not result.success:
            return error_response(result)

        return Response(ChatSerializer(result.data).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="mark_chat_read",
        summary="Mark chat as read",
        request=MarkReadSerializer,
        tags=["Chat - Chats"],
    )
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        """Mark messages in the chat as read."""
        chat = self.get_object()
        serializer = MarkReadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MessageService.mark_as_read(
            chat=chat,
            user=request.user,
            message_ids=serializer.validated_data.get("message_ids"),
        )
        if not result.success:
            return error_response(result)

        return Response({"status": "read", "marked": result.data})

    @extend_schema(
        operation_id="rename_group_chat",
        summary="Rename group chat",
        request=GroupRenameSerializer,
        responses={200: ChatSerializer},
        tags=["Chat - Groups"],
    )
    @action(detail=True, methods=["post"])
    def rename(self, request, pk=None):
        """Rename a group chat."""
        chat = self.get_object()
        serializer = GroupRenameSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ChatService.rename_group(
            chat, request.user, serializer.validated_data["chat_name"]
        )
        if not result.success:
            return error_response(result)

        return Response(ChatSerializer(result.data).data)

    @extend_schema(
        operation_id="add_group_member",
        summary="Add group member",
        request=GroupMemberSerializer,
        responses={200: ChatSerializer},
        tags=["Chat - Groups"],
    )
    @action(detail=True, methods=["post"], url_path="add")
    def add_member(self, request, pk=None):
        """Add a member to a group chat (admin only)."""
        chat = self.get_object()
        serializer = GroupMemberSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ChatService.add_member(
            chat, request.user, serializer.validated_data["user_id"]
        )
        if not result.success:
            return error_response(result)

        return Response(ChatSerializer(result.data).data)

    @extend_schema(
        operation_id="remove_group_member",
        summary="Remove group member",
        request=GroupMemberSerializer,
        responses={200: ChatSerializer},
        tags=["Chat - Groups"],
    )
    @action(detail=True, methods=["post"], url_path="remove")
    def remove_member(self, request, pk=None):
        """Remove a member from a group chat (admin, or the member themselves)."""
        chat = self.get_object()
        serializer = GroupMemberSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ChatService.remove_member(
            chat, request.user, serializer.validated_data["user_id"]
        )
        if not result.success:
            return error_response(result)

        return Response(ChatSerializer(result.data).data)


@extend_schema_view(
    list=extend_schema(
        operation_id="list_messages",
        summary="List messages",
        tags=["Chat - Messages"],
    ),
    create=extend_schema(
        operation_id="send_message",
        summary="Send message",
        request=MessageCreateSerializer,
        responses={201: MessageSerializer},
        tags=["Chat - Messages"],
    ),
)
class MessageViewSet(
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """
    ViewSet for message operations within a chat.

    list:
        Message history, oldest first, cursor paginated. This is the pull
        path for anything the realtime relay did not push.

    create:
        Persist a message. Live participants receive it over the realtime
        connection once the write commits.
    """

    permission_classes = [IsAuthenticated]
    pagination_class = MessageCursorPagination
    serializer_class = MessageSerializer

    def get_chat(self) -> Chat:
        """Get the parent chat from URL."""
        return get_object_or_404(Chat, pk=self.kwargs.get("chat_pk"))

    def list(self, request, chat_pk=None):
        result = MessageService.history(chat=self.get_chat(), user=request.user)
        if not result.success:
            return error_response(result)

        page = self.paginate_queryset(result.data)
        if page is not None:
            serializer = MessageSerializer(page, many=True)
            return self.get_paginated_response(serializer.data)

        return Response(MessageSerializer(result.data, many=True).data)

    def create(self, request, chat_pk=None):
        chat = self.get_chat()

        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MessageService.send_message(
            chat=chat,
            sender=request.user,
            **serializer.validated_data,
        )
        if not result.success:
            return error_response(result)

        return Response(
            MessageSerializer(result.data).data, status=status.HTTP_201_CREATED
        )
