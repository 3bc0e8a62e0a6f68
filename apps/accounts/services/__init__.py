"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    InvalidSearchError,
)
from .candidate_directory import Candidate, search_candidates

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'InvalidSearchError',
    # Services
    'Candidate',
    'search_candidates',
]
