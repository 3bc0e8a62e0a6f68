# ==========================================
# apps/buddies/models.py
# ==========================================

from django.db import models
from django.utils import timezone
import uuid


class BuddyRequestStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'
    PENDING_CANCEL = 'pending_cancel', 'Pending cancel'
    CANCELLED = 'cancelled', 'Cancelled'


NON_TERMINAL_STATUSES = (
    BuddyRequestStatus.PENDING,
    BuddyRequestStatus.APPROVED,
    BuddyRequestStatus.PENDING_CANCEL,
)
TERMINAL_STATUSES = (
    BuddyRequestStatus.REJECTED,
    BuddyRequestStatus.CANCELLED,
)

# Reported for non-terminal rows whose cutoff has passed; never stored
EXPIRED = 'expired'


class BuddyRequest(models.Model):
    """A joiner's request to ship through a receiver for one cycle."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    joiner = models.ForeignKey('accounts.User', on_delete=models.PROTECT, related_name='buddy_requests_sent')
    receiver = models.ForeignKey('accounts.User', on_delete=models.PROTECT, related_name='buddy_requests_received')
    status = models.CharField(
        max_length=20,
        choices=BuddyRequestStatus.choices,
        default=BuddyRequestStatus.PENDING,
    )

    # Snapshot of the receiver's shipment cycle
    cutoff_date = models.DateTimeField()
    flight_date = models.DateField(null=True, blank=True)
    ups_next_day = models.BooleanField(default=False)
    shipping_address_snapshot = models.TextField(blank=True)

    # Denormalized, refreshed on read
    order_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    decided_at = models.DateTimeField(null=True, blank=True)
    cancel_requested_at = models.DateTimeField(null=True, blank=True)
    closed_at = models.DateTimeField(null=True, blank=True)
    closed_reason = models.CharField(max_length=20, blank=True)

    class Meta:
        db_table = 'buddy_requests'
        constraints = [
            models.UniqueConstraint(
                fields=['joiner'],
                condition=models.Q(status__in=['pending', 'approved', 'pending_cancel']),
                name='uniq_open_buddy_request_per_joiner',
            ),
        ]
        indexes = [
            models.Index(fields=['receiver', 'status'], name='buddy_reque_receive_5c0d2a_idx'),
            models.Index(fields=['joiner', 'status'], name='buddy_reque_joiner__9e41b7_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.joiner} -> {self.receiver} ({self.status})"

    @property
    def is_terminal(self):
        return self.status in TERMINAL_STATUSES

    @property
    def is_expired(self):
        """Non-terminal but past the cutoff of the cycle it was made for."""
        return not self.is_terminal and self.cutoff_date < timezone.now()

    @property
    def effective_status(self):
        return EXPIRED if self.is_expired else self.status
