"""
API tests for authentication endpoints.

Test Classes:
    TestTokenObtain: POST /api/v1/auth/token/
    TestCurrentUser: GET /api/v1/auth/me/
"""

from django.urls import reverse
from rest_framework import status

from authentication.tests.factories import UserFactory


class TestTokenObtain:
    """Tests for JWT issuance."""

    def test_returns_token_pair_for_valid_credentials(self, db, api_client):
        UserFactory(email="login@example.com", password="LoginPass123!")

        response = api_client.post(
            reverse("authentication:token-obtain"),
            {"email": "login@example.com", "password": "LoginPass123!"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert "access" in response.data
        assert "refresh" in response.data

    def test_rejects_wrong_password(self, db, api_client):
        UserFactory(email="login@example.com", password="LoginPass123!")

        response = api_client.post(
            reverse("authentication:token-obtain"),
            {"email": "login@example.com", "password": "wrong"},
            format="json",
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestCurrentUser:
    """Tests for the current-user endpoint."""

    def test_returns_current_user_with_role(self, authenticated_client, user):
        response = authenticated_client.get(reverse("authentication:me"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["email"] == user.email
        assert response.data["role"] == user.role

    def test_requires_authentication(self, db, api_client):
        response = api_client.get(reverse("authentication:me"))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
