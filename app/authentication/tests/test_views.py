"""
Tests for authentication endpoints.

Covers sign-up, JWT login, the current-user endpoint that clients use to
learn the identity they announce on the realtime socket, and user search.
"""

import pytest

from authentication.models import User
from authentication.tests.factories import UserFactory


@pytest.mark.django_db
class TestLoginView:
    """POST /api/v1/auth/login/"""

    def test_returns_token_pair_for_valid_credentials(self, api_client, user):
        response = api_client.post(
            "/api/v1/auth/login/",
            {"email": user.email, "password": "TestPass123!"},
            format="json",
        )

        assert response.status_code == 200
        assert "access" in response.data
        assert "refresh" in response.data

    def test_rejects_wrong_password(self, api_client, user):
        response = api_client.post(
            "/api/v1/auth/login/",
            {"email": user.email, "password": "wrong"},
            format="json",
        )

        assert response.status_code == 401


@pytest.mark.django_db
class TestCurrentUserView:
    """GET /api/v1/auth/user/"""

    def test_returns_current_user(self, authenticated_client, user):
        response = authenticated_client.get("/api/v1/auth/user/")

        assert response.status_code == 200
        assert response.data["id"] == str(user.id)
        assert response.data["email"] == user.email

    def test_requires_authentication(self, api_client):
        response = api_client.get("/api/v1/auth/user/")

        assert response.status_code == 401


@pytest.mark.django_db
class TestRegisterView:
    """POST /api/v1/auth/register/"""

    def payload(self, **overrides):
        data = {
            "email": "New.User@Example.com",
            "username": "newuser",
            "password1": "TestPass123!",
            "password2": "TestPass123!",
        }
        data.update(overrides)
        return data

    def test_creates_user_and_returns_tokens(self, api_client):
        response = api_client.post(
            "/api/v1/auth/register/", self.payload(), format="json"
        )

        assert response.status_code == 201
        assert response.data["user"]["email"] == "new.user@example.com"
        assert response.data["user"]["username"] == "newuser"
        assert "access" in response.data
        assert "refresh" in response.data
        assert User.objects.get(email="new.user@example.com").check_password(
            "TestPass123!"
        )

    def test_rejects_duplicate_email(self, api_client, user):
        """
        Why it matters: Email is the login identifier, so a second account
        with the same address (in any case) would be unreachable.
        """
        response = api_client.post(
            "/api/v1/auth/register/",
            self.payload(email=user.email.upper()),
            format="json",
        )

        assert response.status_code == 400
        assert "email" in response.data

    def test_rejects_duplicate_username(self, api_client, user):
        response = api_client.post(
            "/api/v1/auth/register/",
            self.payload(username=user.username.upper()),
            format="json",
        )

        assert response.status_code == 400
        assert "username" in response.data

    def test_rejects_mismatched_passwords(self, api_client):
        response = api_client.post(
            "/api/v1/auth/register/",
            self.payload(password2="Different123!"),
            format="json",
        )

        assert response.status_code == 400
        assert "password2" in response.data
        assert User.objects.count() == 0

    def test_rejects_malformed_username(self, api_client):
        response = api_client.post(
            "/api/v1/auth/register/",
            self.payload(username="no spaces"),
            format="json",
        )

        assert response.status_code == 400
        assert "username" in response.data


@pytest.mark.django_db
class TestUserSearchView:
    """GET /api/v1/auth/users/?search="""

    def test_matches_username_or_email_case_insensitively(
        self, authenticated_client
    ):
        dana = UserFactory(username="dana", email="dana@example.com")
        erin = UserFactory(username="erin", email="erin@DanaCorp.io")
        UserFactory(username="frank", email="frank@example.com")

        response = authenticated_client.get("/api/v1/auth/users/?search=DANA")

        assert response.status_code == 200
        assert {row["_id"] for row in response.data} == {str(dana.pk), str(erin.pk)}

    def test_excludes_requesting_user(self, authenticated_client, user):
        """
        Why it matters: Search feeds "start a chat", and a chat with
        yourself is rejected.
        """
        UserFactory(username="other")

        response = authenticated_client.get(
            f"/api/v1/auth/users/?search={user.username}"
        )

        assert str(user.pk) not in {row["_id"] for row in response.data}

    def test_excludes_inactive_users(self, authenticated_client):
        UserFactory(username="ghost", is_active=False)

        response = authenticated_client.get("/api/v1/auth/users/?search=ghost")

        assert response.data == []

    def test_requires_authentication(self, api_client):
        response = api_client.get("/api/v1/auth/users/")

        assert response.status_code == 401
