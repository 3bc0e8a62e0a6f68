"""
Buddy request lifecycle service.

The only writer of BuddyRequest status. Each operation runs in one
transaction: lock, check preconditions, compare-and-set the status, then
queue a change event for after commit.

    submit  -> pending
    pending -> approved            (receiver approves)
    pending -> rejected            (receiver rejects the join)
    approved -> pending_cancel     (joiner asks to cancel)
    pending_cancel -> cancelled    (receiver confirms the cancel)
    pending_cancel -> approved     (receiver declines the cancel)

Retrying a transition that already landed returns the record unchanged.
Rejected and cancelled are final.
"""

import logging
from datetime import timedelta
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.buddies.models import BuddyRequest, BuddyRequestStatus
from apps.buddies.signals import emit_change
from apps.shipments.models import ShipmentCycle
from apps.shipments.services import get_active_cycle

from . import relationship_store as store
from .exceptions import (
    ValidationError,
    NotFoundError,
    NotPartyError,
    StaleStateError,
    DuplicateActiveRequestError,
    ReceiverNotEligibleError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Helpers
# =============================================================================

def _cycle_snapshot(cycle: ShipmentCycle) -> dict:
    return {
        'cutoff_date': cycle.cutoff_date,
        'flight_date': cycle.flight_date,
        'ups_next_day': cycle.ups_next_day,
        'shipping_address_snapshot': cycle.shipping_address,
    }


def _resolve_receiver(receiver_id: Optional[UUID], receiver_username: str) -> User:
    """Find the receiver by id, else by handle (username or email prefix)."""
    buyers = User.objects.filter(is_active=True)

    if receiver_id:
        try:
            receiver = buyers.filter(id=receiver_id).first()
        except DjangoValidationError:
            raise ValidationError("Receiver ID is not valid")
        if receiver is None or not receiver.is_buyer:
            raise NotFoundError("No buyer found for that receiver")
        return receiver

    receiver = buyers.filter(username__iexact=receiver_username).first()
    if receiver is None:
        matches = list(
            buyers.filter(username__isnull=True, email__istartswith=f"{receiver_username}@")[:2]
        )
        if len(matches) > 1:
            raise ValidationError(f"@{receiver_username} matches more than one buyer, pick one from search")
        receiver = matches[0] if matches else None

    if receiver is None or not receiver.is_buyer:
        raise NotFoundError(f"No buyer found with username @{receiver_username}")
    return receiver


def _not_eligible(joiner: User, message: str) -> ReceiverNotEligibleError:
    logger.warning("submit by %s refused: %s", joiner.id, message)
    return ReceiverNotEligibleError(message)


def _ensure_open(buddy_request: BuddyRequest, action: str) -> None:
    if buddy_request.is_terminal or buddy_request.is_expired:
        logger.warning(
            "%s refused on request %s: %s", action, buddy_request.id, buddy_request.effective_status
        )
        raise StaleStateError(
            f"Cannot {action}: request is {buddy_request.effective_status}",
            current_status=buddy_request.effective_status,
        )


def _require_status(buddy_request: BuddyRequest, expected: str, action: str) -> None:
    if buddy_request.status != expected:
        logger.warning(
            "%s refused on request %s: %s, expected %s",
            action, buddy_request.id, buddy_request.status, expected,
        )
        raise StaleStateError(
            f"Cannot {action}: request is {buddy_request.status}",
            current_status=buddy_request.effective_status,
        )


def _lock_as_receiver(request_id: UUID, acting_receiver: User, action: str) -> BuddyRequest:
    buddy_request = store.lock_request(request_id)
    if buddy_request.receiver_id != acting_receiver.id:
        raise NotPartyError(f"Only the receiver can {action}")
    _ensure_open(buddy_request, action)
    return buddy_request


def _lock_as_joiner(request_id: UUID, acting_joiner: User, action: str) -> BuddyRequest:
    buddy_request = store.lock_request(request_id)
    if buddy_request.joiner_id != acting_joiner.id:
        raise NotPartyError(f"Only the joiner can {action}")
    _ensure_open(buddy_request, action)
    return buddy_request


def _apply(
    buddy_request: BuddyRequest,
    status: str,
    *,
    transition: str,
    actor: User,
    **fields
) -> BuddyRequest:
    previous_status = buddy_request.status
    store.save_transition(buddy_request, expected=previous_status, status=status, **fields)
    emit_change(buddy_request, previous_status=previous_status, transition=transition, actor=actor)
    return buddy_request


# =============================================================================
# Joiner operations
# =============================================================================

@store.translate_storage_errors
@transaction.atomic
def submit_request(
    *,
    joiner: User,
    receiver_username: Optional[str] = None,
    receiver_id: Optional[UUID] = None
) -> BuddyRequest:
    """
    Ask a receiver to consolidate the joiner's shipments.

    The joiner and receiver rows are locked for the whole check-and-insert,
    and the open request constraint rejects anything that slips past the
    locks.

    Args:
        joiner: Buyer making the request
        receiver_username: Receiver handle, with or without leading ``@``
        receiver_id: Receiver user ID (takes precedence over the handle)

    Returns:
        Created BuddyRequest in ``pending``

    Raises:
        ValidationError: If no receiver is given or it is the joiner
        NotFoundError: If the receiver is not an active buyer
        DuplicateActiveRequestError: If the joiner already has a live request
        ReceiverNotEligibleError: If the joiner has joiners of their own, the
            receiver is a joiner, or the receiver's cutoff is too close
    """
    receiver_username = (receiver_username or '').strip().lstrip('@')
    if not receiver_username and not receiver_id:
        raise ValidationError("Receiver username or ID is required")

    receiver = _resolve_receiver(receiver_id, receiver_username)
    if receiver.id == joiner.id:
        raise ValidationError("You cannot be your own receiver")

    # Both roles are checked below, so both users stay locked until commit.
    # Sorted order keeps crossed submits (A to B, B to A) from deadlocking.
    store.lock_buyers(joiner.id, receiver.id)

    existing = store.joiner_request(joiner)
    if existing is not None:
        raise DuplicateActiveRequestError(
            "You already have an active receiver request",
            current_status=existing.effective_status,
        )

    if store.has_live_joiners(joiner):
        raise _not_eligible(
            joiner,
            "You can request a receiver only when you have no joiners of your own."
        )

    if store.joiner_request(receiver) is not None:
        raise _not_eligible(
            joiner,
            f"@{receiver.get_handle()} is shipping with another receiver on this "
            f"Plant Flight and cannot receive for you."
        )

    cycle = get_active_cycle(buyer=receiver)
    lead_days = settings.BUDDY_MIN_LEAD_DAYS
    if cycle is None:
        raise _not_eligible(
            joiner,
            f"A receiver needs an upcoming Plant Flight before joiners can ship with them. "
            f"@{receiver.get_handle()} has none yet."
        )
    if cycle.cutoff_date < timezone.now() + timedelta(days=lead_days):
        raise _not_eligible(
            joiner,
            f"A receiver needs a checkout cutoff date at least {lead_days} days away. "
            f"@{receiver.get_handle()}'s cutoff date is {cycle.cutoff_date:%b %d, %Y}."
        )

    for lapsed, previous_status in store.settle_lapsed(joiner):
        emit_change(lapsed, previous_status=previous_status, transition='expire')

    buddy_request = store.insert_request(
        joiner=joiner,
        receiver=receiver,
        status=BuddyRequestStatus.PENDING,
        **_cycle_snapshot(cycle),
    )
    emit_change(buddy_request, previous_status=None, transition='submit', actor=joiner)
    return buddy_request


@store.translate_storage_errors
@transaction.atomic
def request_cancel(*, request_id: UUID, acting_joiner: User) -> BuddyRequest:
    """
    Ask the receiver to release an approved relationship.

    Raises:
        NotFoundError: If the request does not exist
        NotPartyError: If the caller is not the joiner
        StaleStateError: If the request is not approved
    """
    buddy_request = _lock_as_joiner(request_id, acting_joiner, 'request a cancel')

    if buddy_request.status == BuddyRequestStatus.PENDING_CANCEL:
        return buddy_request
    _require_status(buddy_request, BuddyRequestStatus.APPROVED, 'request a cancel')

    return _apply(
        buddy_request,
        BuddyRequestStatus.PENDING_CANCEL,
        transition='request_cancel',
        actor=acting_joiner,
        cancel_requested_at=timezone.now(),
    )


@store.translate_storage_errors
@transaction.atomic
def cancel_my_request(*, acting_joiner: User) -> BuddyRequest:
    """
    Cancel the joiner's live request without knowing its ID.

    A pending request is withdrawn at once; an approved one needs the
    receiver's consent and moves to ``pending_cancel``.

    Raises:
        NotFoundError: If the joiner has no live request
    """
    buddy_request = store.joiner_request(acting_joiner, for_update=True)
    if buddy_request is None:
        raise NotFoundError("You have no active receiver request")

    if buddy_request.status == BuddyRequestStatus.PENDING:
        now = timezone.now()
        return _apply(
            buddy_request,
            BuddyRequestStatus.CANCELLED,
            transition='withdraw',
            actor=acting_joiner,
            closed_at=now,
            closed_reason='withdrawn',
        )

    if buddy_request.status == BuddyRequestStatus.PENDING_CANCEL:
        return buddy_request

    return _apply(
        buddy_request,
        BuddyRequestStatus.PENDING_CANCEL,
        transition='request_cancel',
        actor=acting_joiner,
        cancel_requested_at=timezone.now(),
    )


# =============================================================================
# Receiver operations
# =============================================================================

def _reject(buddy_request: BuddyRequest, actor: User) -> BuddyRequest:
    _require_status(buddy_request, BuddyRequestStatus.PENDING, 'reject')
    now = timezone.now()
    return _apply(
        buddy_request,
        BuddyRequestStatus.REJECTED,
        transition='reject',
        actor=actor,
        decided_at=now,
        closed_at=now,
        closed_reason='rejected',
    )


def _decline_cancel(buddy_request: BuddyRequest, actor: User) -> BuddyRequest:
    if buddy_request.status == BuddyRequestStatus.APPROVED:
        return buddy_request
    _require_status(buddy_request, BuddyRequestStatus.PENDING_CANCEL, 'decline the cancel')
    return _apply(
        buddy_request,
        BuddyRequestStatus.APPROVED,
        transition='decline_cancel',
        actor=actor,
        cancel_requested_at=None,
    )


@store.translate_storage_errors
@transaction.atomic
def approve_request(*, request_id: UUID, acting_receiver: User) -> BuddyRequest:
    """
    Approve a pending request.

    The cycle snapshot is refreshed from the receiver's current active
    cycle, so the joiner sees the cutoff they will actually ship under.

    Raises:
        NotFoundError: If the request does not exist
        NotPartyError: If the caller is not the receiver
        StaleStateError: If the request is not pending
    """
    # Same lock a submit naming this receiver takes, users before requests
    store.lock_buyer(acting_receiver.id)
    buddy_request = _lock_as_receiver(request_id, acting_receiver, 'approve')

    if buddy_request.status == BuddyRequestStatus.APPROVED:
        return buddy_request
    _require_status(buddy_request, BuddyRequestStatus.PENDING, 'approve')

    fields = {'decided_at': timezone.now()}
    cycle = get_active_cycle(buyer=acting_receiver)
    if cycle is not None and not cycle.is_past_cutoff:
        fields.update(_cycle_snapshot(cycle))

    return _apply(
        buddy_request,
        BuddyRequestStatus.APPROVED,
        transition='approve',
        actor=acting_receiver,
        **fields,
    )


@store.translate_storage_errors
@transaction.atomic
def reject_request(*, request_id: UUID, acting_receiver: User) -> BuddyRequest:
    """
    Reject a pending join request. Final.

    Raises:
        NotFoundError: If the request does not exist
        NotPartyError: If the caller is not the receiver
        StaleStateError: If the request is not pending
    """
    buddy_request = _lock_as_receiver(request_id, acting_receiver, 'reject')
    return _reject(buddy_request, acting_receiver)


@store.translate_storage_errors
@transaction.atomic
def decline_cancel(*, request_id: UUID, acting_receiver: User) -> BuddyRequest:
    """
    Keep the relationship: turn down the joiner's cancel request.

    Raises:
        NotFoundError: If the request does not exist
        NotPartyError: If the caller is not the receiver
        StaleStateError: If no cancel is pending
    """
    buddy_request = _lock_as_receiver(request_id, acting_receiver, 'decline the cancel')
    return _decline_cancel(buddy_request, acting_receiver)


@store.translate_storage_errors
@transaction.atomic
def deny_request(*, request_id: UUID, acting_receiver: User) -> BuddyRequest:
    """
    Receiver's "reject" button.

    Rejects the join while pending, declines the cancel while a cancel is
    pending. The branch is chosen under the row lock; on an approved
    request it is a repeated decline and returns the record unchanged.

    Raises:
        NotFoundError: If the request does not exist
        NotPartyError: If the caller is not the receiver
        StaleStateError: If there is nothing to deny
    """
    buddy_request = _lock_as_receiver(request_id, acting_receiver, 'reject')

    if buddy_request.status == BuddyRequestStatus.PENDING:
        return _reject(buddy_request, acting_receiver)
    return _decline_cancel(buddy_request, acting_receiver)


@store.translate_storage_errors
@transaction.atomic
def confirm_cancel(*, request_id: UUID, acting_receiver: User) -> BuddyRequest:
    """
    Release the joiner. Final.

    Raises:
        NotFoundError: If the request does not exist
        NotPartyError: If the caller is not the receiver
        StaleStateError: If no cancel is pending
    """
    buddy_request = _lock_as_receiver(request_id, acting_receiver, 'confirm the cancel')
    _require_status(buddy_request, BuddyRequestStatus.PENDING_CANCEL, 'confirm the cancel')

    return _apply(
        buddy_request,
        BuddyRequestStatus.CANCELLED,
        transition='confirm_cancel',
        actor=acting_receiver,
        closed_at=timezone.now(),
        closed_reason='cancelled',
    )
