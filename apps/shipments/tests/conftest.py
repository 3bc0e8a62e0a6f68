import pytest
from datetime import timedelta
from django.utils import timezone
from apps.accounts.models import User
from apps.shipments.models import ShipmentCycle


@pytest.fixture
def buyer(db):
    """Create and return a buyer who runs shipment cycles."""
    return User.objects.create_user(
        email='receiver@example.com',
        password='TestPass123!',
        username='plantreceiver',
    )


@pytest.fixture
def other_buyer(db):
    """Create and return a second buyer."""
    return User.objects.create_user(
        email='joiner@example.com',
        password='TestPass123!',
        username='plantjoiner',
    )


@pytest.fixture
def active_cycle(db, buyer):
    """Create and return an active cycle ten days out."""
    cutoff = timezone.now() + timedelta(days=10)
    return ShipmentCycle.objects.create(
        buyer=buyer,
        cutoff_date=cutoff,
        flight_date=(cutoff + timedelta(days=2)).date(),
        shipping_address='1 Greenhouse Way, Honolulu, HI',
    )
