"""
Test configuration and fixtures for authentication tests.

Usage:
    def test_example(authenticated_client):
        response = authenticated_client.get("/api/v1/auth/user/")
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient

from authentication.models import User
from authentication.tests.factories import UserFactory


@pytest.fixture
def user(db):
    """Create a basic active user."""
    return UserFactory()


@pytest.fixture
def superuser(db):
    """Create a superuser with admin privileges."""
    return User.objects.create_superuser(
        email="admin@example.com", password="AdminPass123!"
    )


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def authenticated_client(api_client, user):
    """API client authenticated as `user`."""
    api_client.force_authenticate(user=user)
    return api_client
