import pytest
from unittest.mock import patch
from django.db import DatabaseError
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient


@pytest.mark.django_db
class TestHealthCheck:
    """Tests for GET /api/health/"""

    def test_health_ok(self):
        response = APIClient().get(reverse('health-check'))

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'status': 'ok', 'database': True}

    def test_health_database_down(self):
        """A failing database turns the probe red."""
        with patch('config.views.connection.cursor', side_effect=DatabaseError('down')):
            response = APIClient().get(reverse('health-check'))

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()['database'] is False


@pytest.mark.django_db
class TestErrorHandlers:
    """Unknown routes answer with JSON."""

    def test_not_found(self):
        response = APIClient().get('/api/does-not-exist/')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()['error'] == 'Not found'
