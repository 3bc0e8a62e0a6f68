# ==========================================
# apps/buddies/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from apps.buddies.models import BuddyRequest, BuddyRequestStatus


@admin.register(BuddyRequest)
class BuddyRequestAdmin(admin.ModelAdmin):
    """
    Read-only admin for buddy requests.

    Status only changes through the lifecycle services, so every field
    is read-only here.
    """

    list_display = [
        'joiner',
        'receiver',
        'status_badge',
        'cutoff_date',
        'order_count',
        'created_at',
    ]
    list_filter = ['status', 'ups_next_day', 'cutoff_date', 'created_at']
    search_fields = [
        'joiner__email',
        'joiner__username',
        'receiver__email',
        'receiver__username',
    ]
    readonly_fields = [
        'id',
        'joiner',
        'receiver',
        'status',
        'cutoff_date',
        'flight_date',
        'ups_next_day',
        'shipping_address_snapshot',
        'order_count',
        'created_at',
        'updated_at',
        'decided_at',
        'cancel_requested_at',
        'closed_at',
        'closed_reason',
    ]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    def status_badge(self, obj):
        """Display status with color, lapsed requests shown as expired."""
        colors = {
            BuddyRequestStatus.PENDING: '#f0ad4e',
            BuddyRequestStatus.APPROVED: '#28a745',
            BuddyRequestStatus.PENDING_CANCEL: '#17a2b8',
            BuddyRequestStatus.REJECTED: '#dc3545',
            BuddyRequestStatus.CANCELLED: '#6c757d',
        }
        color = '#6c757d' if obj.is_expired else colors.get(obj.status, '#6c757d')
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 10px; '
            'border-radius: 3px;">{}</span>',
            color,
            obj.effective_status,
        )
    status_badge.short_description = 'Status'

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
