"""
Domain-specific exceptions for buddies app.

Every rejected transition raises one of these instead of mutating state.
Each class carries the HTTP status and machine code views respond with, and
whether the client should present it as a dedicated dialog or a toast.
"""

from django.conf import settings


class BuddiesServiceError(Exception):
    """Base exception for all buddies service errors."""

    code = 'buddies_error'
    http_status = 400
    presentation = 'toast'


class ValidationError(BuddiesServiceError):
    """Raised when input is missing or malformed."""

    code = 'validation_error'
    http_status = 400


class NotFoundError(BuddiesServiceError):
    """Raised when a referenced request or user does not exist."""

    code = 'not_found'
    http_status = 404


class NotPartyError(BuddiesServiceError):
    """Raised when the caller is not the party allowed to perform an action."""

    code = 'not_party'
    http_status = 403


class StaleStateError(BuddiesServiceError):
    """
    Raised when a request is not in the status an operation requires.

    Carries the current (effective) status so the client can resynchronize.
    """

    code = 'stale_state'
    http_status = 409

    def __init__(self, message: str, *, current_status: str):
        super().__init__(message)
        self.current_status = current_status


class DuplicateActiveRequestError(StaleStateError):
    """Raised when a joiner already has a live request."""

    code = 'duplicate_active_request'


class ReceiverNotEligibleError(BuddiesServiceError):
    """
    Raised when business rules prevent a receiver relationship.

    The message is user-facing and is meant for a dedicated dialog.
    """

    code = 'receiver_not_eligible'
    http_status = 422
    presentation = 'dialog'


class TransientError(BuddiesServiceError):
    """Raised when storage fails in a way that is safe to retry."""

    code = 'transient'
    http_status = 503

    @property
    def retry_after(self) -> int:
        return settings.BUDDY_RETRY_AFTER_SECONDS
