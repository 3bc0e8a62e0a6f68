import pytest
from django.urls import reverse
from rest_framework import status


# =============================================================================
# Token Tests
# =============================================================================

@pytest.mark.django_db
class TestToken:
    """Tests for POST /api/auth/token/"""

    def test_obtain_token_with_email(self, api_client, user):
        """Email and password return an access/refresh pair."""
        url = reverse('token_obtain_pair')
        response = api_client.post(url, {'email': user.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data
        assert 'refresh' in response.data

    def test_obtain_token_wrong_password(self, api_client, user):
        """Wrong password is rejected."""
        url = reverse('token_obtain_pair')
        response = api_client.post(url, {'email': user.email, 'password': 'nope'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_refresh_token(self, api_client, user):
        """A refresh token yields a new access token."""
        tokens = api_client.post(
            reverse('token_obtain_pair'),
            {'email': user.email, 'password': 'TestPass123!'},
        ).data

        response = api_client.post(reverse('token_refresh'), {'refresh': tokens['refresh']})

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data


# =============================================================================
# Current User Tests
# =============================================================================

@pytest.mark.django_db
class TestCurrentUser:
    """Tests for GET /api/auth/user/"""

    def test_get_current_user(self, authenticated_client, user):
        """Returns the caller's profile with handle."""
        url = reverse('users:current-user')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == user.email
        assert response.data['handle'] == 'janedoe'
        assert response.data['user_type'] == 'buyer'

    def test_get_current_user_unauthenticated(self, api_client):
        """Unauthenticated requests are rejected."""
        url = reverse('users:current-user')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Candidate Search Tests
# =============================================================================

@pytest.mark.django_db
class TestUserSearch:
    """Tests for GET /api/auth/users/search/"""

    def test_search_returns_candidates(self, authenticated_client, buyer_alice):
        """Matching buyers are listed with camelCase fields."""
        url = reverse('users:user-search')
        response = authenticated_client.get(url, {'query': 'alice'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        result = response.data['results'][0]
        assert result['username'] == 'alicegreen'
        assert result['firstName'] == 'Alice'
        assert result['lastName'] == 'Green'
        assert result['profileImage'] == 'https://cdn.example.com/alice.png'
        assert result['email'] == 'alice@example.com'

    def test_search_excludes_caller(self, authenticated_client, user):
        """The caller is never offered as their own receiver."""
        url = reverse('users:user-search')
        response = authenticated_client.get(url, {'query': user.username})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['results'] == []

    def test_search_limit_too_large(self, authenticated_client):
        """Limits above the configured maximum are rejected."""
        url = reverse('users:user-search')
        response = authenticated_client.get(url, {'query': 'a', 'limit': 1000})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_search_unauthenticated(self, api_client):
        """Search requires authentication."""
        url = reverse('users:user-search')
        response = api_client.get(url, {'query': 'alice'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
