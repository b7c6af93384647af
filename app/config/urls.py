"""
URL configuration for the Django application.

The `urlpatterns` list routes URLs to views. This is the root URL configuration
that includes all app-specific routes.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/auth/                  - Authentication endpoints
        login/                     - Obtain JWT pair
        token/refresh/             - Refresh access token
        user/                      - Current user
    /api/v1/chat/                  - Chat endpoints
        chats/                     - Chat list / open direct chat
        chats/group/               - Create group chat
        chats/{id}/                - Chat detail
        chats/{id}/read/           - Mark chat as read
        chats/{id}/messages/       - Message history / send
    /api/v1/realtime/              - Realtime endpoints
        presence/                  - Online users snapshot

WebSocket routes are declared in realtime/routing.py (see config/asgi.py).

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    # Authentication (simplejwt)
    path("auth/", include("authentication.urls")),
    # Chat
    path("chat/", include("chat.urls")),
    # Realtime
    path("realtime/", include("realtime.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Chat Admin"
admin.site.site_title = "Admin Portal"
admin.site.index_title = "Welcome to the Admin Portal"
