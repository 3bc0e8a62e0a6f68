# ==========================================
# apps/shipments/models.py
# ==========================================

from django.db import models
from django.utils import timezone
import uuid


class ShipmentCycle(models.Model):
    """A buyer's Plant Flight: orders placed before the cutoff ship together."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    buyer = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='shipment_cycles')
    cutoff_date = models.DateTimeField(help_text='Checkout cutoff; joiners lapse after this moment')
    flight_date = models.DateField(null=True, blank=True)
    ups_next_day = models.BooleanField(default=False)
    shipping_address = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'shipment_cycles'
        constraints = [
            models.UniqueConstraint(
                fields=['buyer'],
                condition=models.Q(is_active=True),
                name='uniq_active_cycle_per_buyer',
            ),
        ]
        indexes = [
            models.Index(fields=['buyer', 'is_active'], name='shipment_cy_buyer_i_3d1f6c_idx'),
        ]
        ordering = ['-cutoff_date']

    def __str__(self):
        return f"{self.buyer} cutoff {self.cutoff_date:%Y-%m-%d}"

    @property
    def is_past_cutoff(self):
        return self.cutoff_date < timezone.now()


class CycleOrder(models.Model):
    """An order a buyer attached to a shipment cycle."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    buyer = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='cycle_orders')
    cycle = models.ForeignKey(ShipmentCycle, on_delete=models.CASCADE, related_name='orders')
    reference = models.CharField(max_length=64, blank=True)
    is_cancelled = models.BooleanField(default=False)
    placed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'cycle_orders'
        indexes = [
            models.Index(fields=['cycle', 'buyer'], name='cycle_order_cycle_i_8a2b4e_idx'),
        ]
        ordering = ['-placed_at']

    def __str__(self):
        return f"{self.reference or self.id} ({self.buyer})"
