class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConflictError(DomainError):
    """Raised when a write would duplicate an existing fact (PIN, username, absence)."""


class ExistingRecordsWarning(DomainError):
    """Raised when an absence would be recorded over existing activity and force is not set."""


class NotFoundError(DomainError):
    """Raised when the addressed employee does not exist."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class StoreError(Exception):
    """Raised when the database rejects or cannot complete a read/append."""
