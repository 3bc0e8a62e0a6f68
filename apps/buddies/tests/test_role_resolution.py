import pytest

from apps.buddies.models import BuddyRequest
from apps.buddies.services import (
    submit_request,
    reject_request,
    resolve_role,
    ReceiverRole,
    JoinerRole,
)
from apps.shipments.models import CycleOrder


@pytest.mark.django_db
class TestResolveRole:
    """Tests for role_resolution.resolve_role."""

    def test_new_buyer_is_joiner_without_request(self, joiner):
        role = resolve_role(user=joiner)

        assert isinstance(role, JoinerRole)
        assert role.role == 'joiner'
        assert role.request is None
        assert role.joiners == []

    def test_joiner_sees_own_request(self, pending_request, joiner):
        role = resolve_role(user=joiner)

        assert isinstance(role, JoinerRole)
        assert role.request.id == pending_request.id

    def test_receiver_sees_joiners(self, pending_request, receiver):
        """A buyer with a live joiner resolves as receiver."""
        role = resolve_role(user=receiver)

        assert isinstance(role, ReceiverRole)
        assert role.role == 'receiver'
        assert [r.id for r in role.joiners] == [pending_request.id]
        assert role.request is None

    def test_receiver_joiners_oldest_first(self, pending_request, receiver, third_buyer):
        second = submit_request(joiner=third_buyer, receiver_username='bob')

        role = resolve_role(user=receiver)

        assert [r.id for r in role.joiners] == [pending_request.id, second.id]

    def test_terminal_requests_are_ignored(self, pending_request, joiner, receiver):
        """A rejected joiner leaves both buyers without a relationship."""
        reject_request(request_id=pending_request.id, acting_receiver=receiver)

        assert isinstance(resolve_role(user=receiver), JoinerRole)
        assert resolve_role(user=joiner).request is None

    def test_lapsed_requests_are_ignored(self, pending_request, joiner, receiver, expire):
        expire(pending_request)

        receiver_role = resolve_role(user=receiver)
        assert isinstance(receiver_role, JoinerRole)
        assert receiver_role.request is None
        assert resolve_role(user=joiner).request is None

    def test_order_count_refreshed(self, approved_request, joiner, receiver, receiver_cycle):
        """Order counts come from the receiver's active cycle."""
        CycleOrder.objects.create(buyer=joiner, cycle=receiver_cycle, reference='P-100')
        CycleOrder.objects.create(buyer=joiner, cycle=receiver_cycle, reference='P-101')
        CycleOrder.objects.create(buyer=joiner, cycle=receiver_cycle, reference='P-102', is_cancelled=True)

        receiver_role = resolve_role(user=receiver)
        joiner_role = resolve_role(user=joiner)

        assert receiver_role.joiners[0].order_count == 2
        assert joiner_role.request.order_count == 2
        assert BuddyRequest.objects.get(id=approved_request.id).order_count == 2
