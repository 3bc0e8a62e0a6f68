"""
Domain-specific exceptions for shipments app.

These exceptions represent business rule violations and should be
caught in callers and converted to appropriate responses.
"""


class ShipmentsServiceError(Exception):
    """Base exception for all shipments service errors."""
    pass


class InvalidCycleError(ShipmentsServiceError):
    """Raised when cycle dates are inconsistent."""
    pass
