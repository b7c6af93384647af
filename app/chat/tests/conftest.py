"""
Test configuration and fixtures for chat tests.

This module provides:
- Users participating in (and outside of) test chats
- Direct and group chat fixtures
- API client helpers for authenticated requests

Usage:
    def test_example(direct_chat, alice_client):
        response = alice_client.get(f"/api/v1/chat/chats/{direct_chat.id}/")
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient

from authentication.tests.factories import UserFactory
from chat.tests.factories import DirectChatFactory, GroupChatFactory


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def alice(db):
    return UserFactory(username="alice")


@pytest.fixture
def bob(db):
    return UserFactory(username="bob")


@pytest.fixture
def carol(db):
    return UserFactory(username="carol")


@pytest.fixture
def outsider(db):
    """A user who is not a participant in any test chat."""
    return UserFactory(username="outsider")


# =============================================================================
# Chat Fixtures
# =============================================================================


@pytest.fixture
def direct_chat(alice, bob):
    """Direct chat between alice and bob."""
    return DirectChatFactory(users=[alice, bob])


@pytest.fixture
def group_chat(alice, bob, carol):
    """Group chat administered by alice with bob and carol."""
    return GroupChatFactory(group_admin=alice, users=[bob, carol])


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def alice_client(alice):
    client = APIClient()
    client.force_authenticate(user=alice)
    return client


@pytest.fixture
def outsider_client(outsider):
    client = APIClient()
    client.force_authenticate(user=outsider)
    return client
