import pytest
from datetime import timedelta
from django.utils import timezone
from rest_framework.test import APIClient
from apps.accounts.models import User, UserType
from apps.buddies.models import BuddyRequest
from apps.buddies.services import submit_request, approve_request, request_cancel
from .helpers import client_for, open_cycle_in


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def joiner(db):
    """Create and return the buyer asking to join."""
    return User.objects.create_user(
        email='alice@example.com',
        password='TestPass123!',
        username='alice',
        first_name='Alice',
        last_name='Green',
    )


@pytest.fixture
def receiver(db):
    """Create and return the buyer receiving shipments."""
    return User.objects.create_user(
        email='bob@example.com',
        password='TestPass123!',
        username='bob',
        first_name='Bob',
    )


@pytest.fixture
def third_buyer(db):
    """Create and return another buyer."""
    return User.objects.create_user(
        email='carol@example.com',
        password='TestPass123!',
        username='carol',
    )


@pytest.fixture
def outsider(db):
    """Create and return a buyer with no part in any request."""
    return User.objects.create_user(
        email='dave@example.com',
        password='TestPass123!',
        username='dave',
    )


@pytest.fixture
def seller(db):
    """Create and return a seller account."""
    return User.objects.create_user(
        email='shop@example.com',
        password='TestPass123!',
        username='plantshop',
        user_type=UserType.SELLER,
    )


@pytest.fixture
def receiver_cycle(receiver):
    """Active cycle for the receiver with a cutoff ten days out."""
    return open_cycle_in(receiver, 10)


@pytest.fixture
def third_buyer_cycle(third_buyer):
    """Active cycle for the third buyer with a cutoff ten days out."""
    return open_cycle_in(third_buyer, 10)


@pytest.fixture
def pending_request(joiner, receiver, receiver_cycle):
    """Joiner's pending request to the receiver."""
    return submit_request(joiner=joiner, receiver_username=receiver.username)


@pytest.fixture
def approved_request(pending_request, receiver):
    """Approved relationship between joiner and receiver."""
    return approve_request(request_id=pending_request.id, acting_receiver=receiver)


@pytest.fixture
def pending_cancel_request(approved_request, joiner):
    """Approved relationship the joiner asked to cancel."""
    return request_cancel(request_id=approved_request.id, acting_joiner=joiner)


@pytest.fixture
def expire():
    """Return a function that moves a request's cutoff into the past."""
    def _expire(buddy_request):
        past = timezone.now() - timedelta(hours=1)
        BuddyRequest.objects.filter(id=buddy_request.id).update(cutoff_date=past)
        buddy_request.refresh_from_db()
        return buddy_request
    return _expire


@pytest.fixture
def joiner_client(joiner):
    return client_for(joiner)


@pytest.fixture
def receiver_client(receiver):
    return client_for(receiver)


@pytest.fixture
def outsider_client(outsider):
    return client_for(outsider)
