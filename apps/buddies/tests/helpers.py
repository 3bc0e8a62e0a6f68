from datetime import timedelta
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.shipments.services import open_cycle


def client_for(user):
    """Return an API client authenticated as the given user."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


def open_cycle_in(buyer, days):
    """Open a shipment cycle whose cutoff is the given number of days out."""
    cutoff = timezone.now() + timedelta(days=days)
    return open_cycle(
        buyer=buyer,
        cutoff_date=cutoff,
        flight_date=(cutoff + timedelta(days=1)).date(),
        ups_next_day=True,
        shipping_address=f'{buyer.get_handle()} greenhouse, Honolulu, HI',
    )
