"""
Change notifications for buddy requests.

Every applied transition sends ``buddy_request_changed`` once the
surrounding transaction commits. Receivers get a ``BuddyRequestChanged``
event as the ``event`` keyword argument.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.dispatch import Signal
from django.utils import timezone


buddy_request_changed = Signal()


@dataclass(frozen=True)
class BuddyRequestChanged:
    request_id: UUID
    joiner_id: UUID
    receiver_id: UUID
    previous_status: Optional[str]
    status: str
    transition: str
    actor_id: Optional[UUID]
    occurred_at: datetime


def emit_change(buddy_request, *, previous_status, transition, actor=None) -> BuddyRequestChanged:
    """Queue a change event for delivery after commit."""
    event = BuddyRequestChanged(
        request_id=buddy_request.id,
        joiner_id=buddy_request.joiner_id,
        receiver_id=buddy_request.receiver_id,
        previous_status=previous_status,
        status=buddy_request.status,
        transition=transition,
        actor_id=actor.id if actor is not None else None,
        occurred_at=timezone.now(),
    )
    transaction.on_commit(
        lambda: buddy_request_changed.send(sender=buddy_request.__class__, event=event)
    )
    return event
