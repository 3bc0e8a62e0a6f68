"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class InvalidSearchError(AccountsServiceError):
    """Raised when candidate search parameters are out of range."""
    pass
