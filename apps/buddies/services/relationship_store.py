"""
Relationship store.

Keyed access to BuddyRequest rows by joiner (at most one live row) and by
receiver (any number). Status writes are compare-and-set on ``status`` so a
transition only lands on the state it was validated against.

A row is *live* when its status is non-terminal and its cutoff has not
passed. Lapsed rows keep their stored status; they are only reported as
expired.
"""

import functools
import logging
from typing import List, Optional, Tuple
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Q, QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.buddies.models import (
    BuddyRequest,
    BuddyRequestStatus,
    NON_TERMINAL_STATUSES,
)

from .exceptions import (
    NotFoundError,
    StaleStateError,
    DuplicateActiveRequestError,
    TransientError,
)

logger = logging.getLogger(__name__)

EXPIRED_REASON = 'expired'


def translate_storage_errors(func):
    """Map database failures raised by ``func`` (including at commit) to TransientError."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except IntegrityError:
            raise
        except DatabaseError as e:
            logger.error("storage failure in %s: %s", func.__name__, e)
            raise TransientError("Storage is temporarily unavailable, please retry") from e

    return wrapper


def _live_q(now=None) -> Q:
    now = now or timezone.now()
    return Q(status__in=NON_TERMINAL_STATUSES, cutoff_date__gte=now)


def live_requests() -> QuerySet[BuddyRequest]:
    return BuddyRequest.objects.filter(_live_q())


def get_request(request_id: UUID) -> BuddyRequest:
    """
    Get a request by ID.

    Raises:
        NotFoundError: If the request does not exist
    """
    try:
        return BuddyRequest.objects.select_related('joiner', 'receiver').get(id=request_id)
    except (BuddyRequest.DoesNotExist, DjangoValidationError):
        raise NotFoundError(f"Buddy request {request_id} not found")


def lock_request(request_id: UUID) -> BuddyRequest:
    """
    Get a request by ID with a row lock for the rest of the transaction.

    Raises:
        NotFoundError: If the request does not exist
    """
    try:
        return BuddyRequest.objects.select_for_update().get(id=request_id)
    except (BuddyRequest.DoesNotExist, DjangoValidationError):
        raise NotFoundError(f"Buddy request {request_id} not found")


def lock_buyer(user_id: UUID) -> User:
    """
    Lock a user row; serializes submissions by the same joiner.

    Raises:
        NotFoundError: If the user does not exist
    """
    try:
        return User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise NotFoundError(f"User {user_id} not found")


def lock_buyers(*user_ids: UUID) -> List[User]:
    """Lock several user rows, always in the same (sorted by id) order."""
    return [lock_buyer(user_id) for user_id in sorted(set(user_ids), key=str)]


def joiner_request(user: User, *, for_update: bool = False) -> Optional[BuddyRequest]:
    """Get the user's live request as a joiner, if any."""
    queryset = live_requests().filter(joiner=user)
    if for_update:
        queryset = queryset.select_for_update()
    else:
        queryset = queryset.select_related('receiver')
    return queryset.first()


def receiver_joiners(user: User) -> QuerySet[BuddyRequest]:
    """Get live requests where the user is the receiver, oldest first."""
    return (
        live_requests()
        .filter(receiver=user)
        .select_related('joiner')
        .order_by('created_at')
    )


def has_live_joiners(user: User) -> bool:
    return live_requests().filter(receiver=user).exists()


def requests_for_user(user: User) -> QuerySet[BuddyRequest]:
    """Get every request the user is a party to, terminal ones included."""
    return (
        BuddyRequest.objects
        .filter(Q(joiner=user) | Q(receiver=user))
        .select_related('joiner', 'receiver')
        .order_by('-created_at')
    )


def settle_lapsed(joiner: User) -> List[Tuple[BuddyRequest, str]]:
    """
    Close the joiner's non-terminal rows whose cutoff has passed.

    The open-request constraint cannot see time, so a lapsed row has to be
    closed before the joiner can open a new one.

    Returns:
        (request, previous status) for each row that was closed
    """
    now = timezone.now()
    lapsed = list(
        BuddyRequest.objects
        .select_for_update()
        .filter(joiner=joiner, status__in=NON_TERMINAL_STATUSES, cutoff_date__lt=now)
    )
    settled = []
    for buddy_request in lapsed:
        previous_status = buddy_request.status
        save_transition(
            buddy_request,
            expected=previous_status,
            status=BuddyRequestStatus.CANCELLED,
            closed_at=now,
            closed_reason=EXPIRED_REASON,
        )
        settled.append((buddy_request, previous_status))
    return settled


def insert_request(**fields) -> BuddyRequest:
    """
    Insert a new request.

    Raises:
        DuplicateActiveRequestError: If the joiner already holds an open row
    """
    try:
        # Savepoint, so the open row can still be read after a constraint hit
        with transaction.atomic():
            return BuddyRequest.objects.create(**fields)
    except IntegrityError:
        joiner = fields.get('joiner')
        logger.warning("open request constraint rejected insert for joiner %s", joiner)
        existing = (
            BuddyRequest.objects
            .filter(joiner=joiner, status__in=NON_TERMINAL_STATUSES)
            .order_by('-created_at')
            .first()
        )
        raise DuplicateActiveRequestError(
            "You already have an active receiver request",
            current_status=existing.effective_status if existing else BuddyRequestStatus.PENDING,
        )


def save_transition(buddy_request: BuddyRequest, *, expected: str, status: str, **fields) -> BuddyRequest:
    """
    Move a request from ``expected`` to ``status``.

    Writes only if the stored status still equals ``expected`` and updates
    the instance in place.

    Raises:
        StaleStateError: If another actor changed the status first
    """
    now = timezone.now()
    updated = (
        BuddyRequest.objects
        .filter(id=buddy_request.id, status=expected)
        .update(status=status, updated_at=now, **fields)
    )
    if updated == 0:
        current = BuddyRequest.objects.get(id=buddy_request.id)
        raise StaleStateError(
            f"Request is no longer {expected}",
            current_status=current.effective_status,
        )

    buddy_request.status = status
    buddy_request.updated_at = now
    for name, value in fields.items():
        setattr(buddy_request, name, value)
    return buddy_request


def refresh_order_count(buddy_request: BuddyRequest, order_count: int) -> BuddyRequest:
    """Store a recomputed order count if it changed."""
    if buddy_request.order_count != order_count:
        BuddyRequest.objects.filter(id=buddy_request.id).update(order_count=order_count)
        buddy_request.order_count = order_count
    return buddy_request
