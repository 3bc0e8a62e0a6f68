"""
Shipment cycle service.

Read access to a buyer's active Plant Flight and its orders, plus
opening a new cycle (which retires the previous one).
"""

from datetime import date, datetime
from typing import Optional

from django.db import transaction

from apps.accounts.models import User
from apps.shipments.models import ShipmentCycle, CycleOrder

from .exceptions import InvalidCycleError


def get_active_cycle(*, buyer: User) -> Optional[ShipmentCycle]:
    """
    Get the buyer's active shipment cycle.

    Args:
        buyer: Cycle owner

    Returns:
        The active ShipmentCycle, or None if the buyer has none
    """
    return (
        ShipmentCycle.objects
        .filter(buyer=buyer, is_active=True)
        .first()
    )


def count_cycle_orders(*, buyer: User, cycle: Optional[ShipmentCycle]) -> int:
    """Count the buyer's non-cancelled orders attached to a cycle."""
    if cycle is None:
        return 0
    return CycleOrder.objects.filter(cycle=cycle, buyer=buyer, is_cancelled=False).count()


@transaction.atomic
def open_cycle(
    *,
    buyer: User,
    cutoff_date: datetime,
    flight_date: Optional[date] = None,
    ups_next_day: bool = False,
    shipping_address: str = ''
) -> ShipmentCycle:
    """
    Open a new shipment cycle for a buyer.

    Any currently active cycle is deactivated first, so the buyer keeps
    at most one active cycle.

    Args:
        buyer: Cycle owner
        cutoff_date: Checkout cutoff (timezone-aware)
        flight_date: Departure date, if known
        ups_next_day: Whether the cycle ships UPS Next Day
        shipping_address: Delivery address shown to joiners

    Returns:
        Created ShipmentCycle

    Raises:
        InvalidCycleError: If the flight departs before the cutoff
    """
    if flight_date is not None and flight_date < cutoff_date.date():
        raise InvalidCycleError("Flight date cannot be earlier than the cutoff date")

    ShipmentCycle.objects.filter(buyer=buyer, is_active=True).update(is_active=False)

    return ShipmentCycle.objects.create(
        buyer=buyer,
        cutoff_date=cutoff_date,
        flight_date=flight_date,
        ups_next_day=ups_next_day,
        shipping_address=shipping_address,
        is_active=True,
    )
