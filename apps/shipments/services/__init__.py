"""
Shipments app services layer.

Shipment cycles are read by the buddies app to snapshot a receiver's
cutoff date and to count a joiner's orders.
"""

from .exceptions import (
    ShipmentsServiceError,
    InvalidCycleError,
)

from .cycles import (
    get_active_cycle,
    count_cycle_orders,
    open_cycle,
)


__all__ = [
    # Exceptions
    'ShipmentsServiceError',
    'InvalidCycleError',

    # Cycles
    'get_active_cycle',
    'count_cycle_orders',
    'open_cycle',
]
