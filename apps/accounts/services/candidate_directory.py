"""
Candidate directory service.

Read-only buyer search used to pick a receiver. The caller is never
returned as a candidate, whether matched by id, email or handle.
"""

from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID

from django.conf import settings
from django.db.models import Q
from fuzzywuzzy import fuzz

from apps.accounts.models import User, UserType

from .exceptions import InvalidSearchError


@dataclass(frozen=True)
class Candidate:
    id: UUID
    username: str
    first_name: str
    last_name: str
    email: str
    profile_image: Optional[str]

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


def _email_prefix(email: str) -> str:
    return email.split('@')[0].lower() if email else ''


def _caller_q(user: User) -> Q:
    """Match the caller under any of its identities, including derived handles."""
    email = (user.email or '').lower()
    username = (user.username or '').lower()

    q = Q(id=user.id)
    if email:
        q |= Q(email__iexact=email)
        q |= Q(username__iexact=_email_prefix(email))
    if username:
        q |= Q(username__iexact=username)
        q |= Q(email__istartswith=f'{username}@')
    return q


def _to_candidate(user: User) -> Candidate:
    return Candidate(
        id=user.id,
        username=user.username or _email_prefix(user.email),
        first_name=user.first_name or '',
        last_name=user.last_name or '',
        email=user.email or '',
        profile_image=user.profile_image or None,
    )


def _score(query: str, candidate: Candidate) -> int:
    return max(
        fuzz.partial_ratio(query, candidate.username.lower()),
        fuzz.partial_ratio(query, candidate.full_name.lower()) if candidate.full_name else 0,
    )


def search_candidates(
    *,
    query: str,
    exclude_user: User,
    limit: int = 5,
    offset: int = 0
) -> List[Candidate]:
    """
    Search active buyers who could act as a receiver.

    Matching is case-insensitive over username, email and name. A leading
    ``@`` in the query is ignored. Results are ranked by fuzzy similarity to
    the query, then by username.

    Args:
        query: Free-text search term (may be empty)
        exclude_user: The caller, removed from results
        limit: Page size
        offset: Page start

    Returns:
        List of Candidate

    Raises:
        InvalidSearchError: If limit or offset are out of range
    """
    max_limit = settings.CANDIDATE_SEARCH_MAX_LIMIT
    if limit < 1 or limit > max_limit:
        raise InvalidSearchError(f"limit must be between 1 and {max_limit}")
    if offset < 0:
        raise InvalidSearchError("offset must not be negative")

    term = (query or '').strip().lstrip('@').lower()

    queryset = (
        User.objects
        .filter(is_active=True, user_type=UserType.BUYER)
        .exclude(_caller_q(exclude_user))
        .order_by('username', 'email')
    )

    if term:
        queryset = queryset.filter(
            Q(username__icontains=term) |
            Q(email__icontains=term) |
            Q(first_name__icontains=term) |
            Q(last_name__icontains=term)
        )

    # Bounded read; ranked results are drawn from a fixed scan window
    window = offset + limit
    if term:
        window = max(window, settings.CANDIDATE_SEARCH_SCAN_LIMIT)

    candidates = [_to_candidate(user) for user in queryset[:window]]

    if term:
        candidates.sort(key=lambda c: (-_score(term, c), c.username))

    return candidates[offset:offset + limit]
