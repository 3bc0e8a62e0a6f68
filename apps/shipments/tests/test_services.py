"""
Service layer unit tests for shipments app.
"""

import pytest
from datetime import timedelta
from django.utils import timezone

from apps.shipments.models import ShipmentCycle, CycleOrder
from apps.shipments.services import (
    get_active_cycle,
    count_cycle_orders,
    open_cycle,
)
from apps.shipments.services.exceptions import InvalidCycleError


@pytest.mark.django_db
class TestShipmentCycles:
    """Tests for cycles.py service functions."""

    def test_get_active_cycle(self, buyer, active_cycle):
        """Returns the buyer's active cycle."""
        assert get_active_cycle(buyer=buyer) == active_cycle

    def test_get_active_cycle_none(self, buyer):
        """Returns None when the buyer has no cycle."""
        assert get_active_cycle(buyer=buyer) is None

    def test_open_cycle_replaces_active(self, buyer, active_cycle):
        """Opening a cycle retires the previous one."""
        cutoff = timezone.now() + timedelta(days=20)
        cycle = open_cycle(buyer=buyer, cutoff_date=cutoff, ups_next_day=True)

        active_cycle.refresh_from_db()
        assert active_cycle.is_active is False
        assert cycle.is_active is True
        assert cycle.ups_next_day is True
        assert get_active_cycle(buyer=buyer) == cycle
        assert ShipmentCycle.objects.filter(buyer=buyer, is_active=True).count() == 1

    def test_open_cycle_flight_before_cutoff(self, buyer):
        """Flight date must not precede the cutoff."""
        cutoff = timezone.now() + timedelta(days=10)

        with pytest.raises(InvalidCycleError):
            open_cycle(buyer=buyer, cutoff_date=cutoff, flight_date=(cutoff - timedelta(days=1)).date())

        assert not ShipmentCycle.objects.filter(buyer=buyer).exists()

    def test_count_cycle_orders(self, buyer, other_buyer, active_cycle):
        """Counts the buyer's live orders on the cycle."""
        CycleOrder.objects.create(buyer=other_buyer, cycle=active_cycle, reference='A-1')
        CycleOrder.objects.create(buyer=other_buyer, cycle=active_cycle, reference='A-2')
        CycleOrder.objects.create(buyer=other_buyer, cycle=active_cycle, reference='A-3', is_cancelled=True)
        CycleOrder.objects.create(buyer=buyer, cycle=active_cycle, reference='B-1')

        assert count_cycle_orders(buyer=other_buyer, cycle=active_cycle) == 2
        assert count_cycle_orders(buyer=buyer, cycle=active_cycle) == 1

    def test_count_cycle_orders_without_cycle(self, buyer):
        """No cycle means no orders."""
        assert count_cycle_orders(buyer=buyer, cycle=None) == 0

    def test_is_past_cutoff(self, buyer):
        """Cycles report whether their cutoff has passed."""
        past = ShipmentCycle.objects.create(
            buyer=buyer,
            cutoff_date=timezone.now() - timedelta(hours=1),
            is_active=False,
        )
        assert past.is_past_cutoff is True
