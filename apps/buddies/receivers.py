import logging

from django.dispatch import receiver

from .models import BuddyRequest
from .signals import buddy_request_changed

logger = logging.getLogger(__name__)


@receiver(buddy_request_changed, sender=BuddyRequest, dispatch_uid='buddies.log_buddy_request_change')
def log_buddy_request_change(sender, event, **kwargs):
    logger.info(
        "buddy request %s %s: %s -> %s (actor %s)",
        event.request_id,
        event.transition,
        event.previous_status or '-',
        event.status,
        event.actor_id or 'system',
    )
