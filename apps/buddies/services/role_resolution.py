"""
Role resolution.

A buyer is a *receiver* while anyone ships through them, otherwise a
*joiner* (with or without a live request). Both views are read in one
transaction so the answer never mixes two moments.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from django.db import transaction

from apps.accounts.models import User
from apps.buddies.models import BuddyRequest
from apps.shipments.services import get_active_cycle, count_cycle_orders

from . import relationship_store as store


@dataclass(frozen=True)
class ReceiverRole:
    joiners: List[BuddyRequest] = field(default_factory=list)

    role = 'receiver'

    @property
    def request(self) -> Optional[BuddyRequest]:
        return None


@dataclass(frozen=True)
class JoinerRole:
    request: Optional[BuddyRequest] = None

    role = 'joiner'

    @property
    def joiners(self) -> List[BuddyRequest]:
        return []


BuddyRole = Union[ReceiverRole, JoinerRole]


def _with_order_count(buddy_request: BuddyRequest, receiver_cycle) -> BuddyRequest:
    order_count = count_cycle_orders(buyer=buddy_request.joiner, cycle=receiver_cycle)
    return store.refresh_order_count(buddy_request, order_count)


@store.translate_storage_errors
@transaction.atomic
def resolve_role(*, user: User) -> BuddyRole:
    """
    Work out whether a buyer is currently a receiver or a joiner.

    Order counts on the returned requests are recomputed from the
    receiver's active cycle.

    Args:
        user: Buyer to resolve

    Returns:
        ReceiverRole with live joiners oldest first, or JoinerRole with the
        buyer's live request (None when there is none)
    """
    joiners = list(store.receiver_joiners(user))
    if joiners:
        cycle = get_active_cycle(buyer=user)
        return ReceiverRole(joiners=[_with_order_count(r, cycle) for r in joiners])

    buddy_request = store.joiner_request(user)
    if buddy_request is not None:
        cycle = get_active_cycle(buyer=buddy_request.receiver)
        buddy_request = _with_order_count(buddy_request, cycle)
    return JoinerRole(request=buddy_request)
