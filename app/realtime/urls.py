"""
URL configuration for realtime REST endpoints.

URL structure:
    /api/v1/realtime/presence/   - Online users snapshot (GET)
"""

from django.urls import path

from realtime.views import PresenceView

app_name = "realtime"

urlpatterns = [
    path("presence/", PresenceView.as_view(), name="presence"),
]
