"""
URL configuration for chat API.

URL Structure:
    Chats:
        /chats/                  GET, POST
        /chats/group/            POST
        /chats/{id}/             GET
        /chats/{id}/read/        POST
        /chats/{id}/rename/      POST
        /chats/{id}/add/         POST
        /chats/{id}/remove/      POST

    Messages:
        /chats/{id}/messages/    GET, POST

All URLs are prefixed with /api/v1/chat/ in the main URL configuration.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from chat.views import ChatViewSet, MessageViewSet

router = DefaultRouter()
router.register(r"chats", ChatViewSet, basename="chat")

app_name = "chat"

urlpatterns = [
    path("", include(router.urls)),
    path(
        "chats/<uuid:chat_pk>/messages/",
        MessageViewSet.as_view({"get": "list", "post": "create"}),
        name="chat-message-list",
    ),
]
