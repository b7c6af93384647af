"""
Tests for the presence endpoint.
"""

import pytest
from rest_framework.test import APIClient

from authentication.tests.factories import UserFactory

PRESENCE_URL = "/api/v1/realtime/presence/"


@pytest.fixture
def wired_controller(controller, monkeypatch):
    monkeypatch.setattr("realtime.views.get_controller", lambda: controller)
    return controller


@pytest.mark.django_db
class TestPresenceView:
    """Tests for GET /api/v1/realtime/presence/."""

    def test_returns_online_users(self, wired_controller):
        wired_controller.presence.mark_online("bob")
        wired_controller.presence.mark_online("alice")
        client = APIClient()
        client.force_authenticate(user=UserFactory())

        response = client.get(PRESENCE_URL)

        assert response.status_code == 200
        assert response.data == {"online_users": ["alice", "bob"], "count": 2}

    def test_requires_authentication(self, wired_controller):
        response = APIClient().get(PRESENCE_URL)

        assert response.status_code == 401
