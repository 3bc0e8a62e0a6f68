"""
Buddies app services layer.

This module provides business logic for the receiver/joiner
relationship between buyers who consolidate shipments.
"""

from .exceptions import (
    BuddiesServiceError,
    ValidationError,
    NotFoundError,
    NotPartyError,
    StaleStateError,
    DuplicateActiveRequestError,
    ReceiverNotEligibleError,
    TransientError,
)

from .relationship_store import (
    get_request,
    requests_for_user,
    receiver_joiners,
    joiner_request,
)

from .request_lifecycle import (
    submit_request,
    approve_request,
    reject_request,
    deny_request,
    request_cancel,
    confirm_cancel,
    decline_cancel,
    cancel_my_request,
)

from .role_resolution import (
    ReceiverRole,
    JoinerRole,
    resolve_role,
)


__all__ = [
    # Exceptions
    'BuddiesServiceError',
    'ValidationError',
    'NotFoundError',
    'NotPartyError',
    'StaleStateError',
    'DuplicateActiveRequestError',
    'ReceiverNotEligibleError',
    'TransientError',

    # Relationship store
    'get_request',
    'requests_for_user',
    'receiver_joiners',
    'joiner_request',

    # Request lifecycle
    'submit_request',
    'approve_request',
    'reject_request',
    'deny_request',
    'request_cancel',
    'confirm_cancel',
    'decline_cancel',
    'cancel_my_request',

    # Role resolution
    'ReceiverRole',
    'JoinerRole',
    'resolve_role',
]
