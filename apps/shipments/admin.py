# ==========================================
# apps/shipments/admin.py
# ==========================================

from django.contrib import admin
from apps.shipments.models import ShipmentCycle, CycleOrder


class CycleOrderInline(admin.TabularInline):
    """Inline admin for orders attached to a cycle."""
    model = CycleOrder
    extra = 0
    fields = ['buyer', 'reference', 'is_cancelled', 'placed_at']
    readonly_fields = ['placed_at']


@admin.register(ShipmentCycle)
class ShipmentCycleAdmin(admin.ModelAdmin):
    """Admin interface for shipment cycles."""

    list_display = [
        'buyer',
        'cutoff_date',
        'flight_date',
        'ups_next_day',
        'is_active',
        'order_count',
    ]
    list_filter = ['is_active', 'ups_next_day', 'cutoff_date']
    search_fields = ['buyer__email', 'buyer__username', 'shipping_address']
    readonly_fields = ['created_at']
    inlines = [CycleOrderInline]
    date_hierarchy = 'cutoff_date'
    ordering = ['-cutoff_date']

    def order_count(self, obj):
        """Show number of live orders."""
        return obj.orders.filter(is_cancelled=False).count()
    order_count.short_description = 'Orders'
