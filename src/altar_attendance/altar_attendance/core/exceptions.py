class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class DuplicateNameError(ValidationError):
    """Raised when a group already has a server with the same (case-insensitive) name."""


class NotReadyError(DomainError):
    """Raised when a store is used before its initial load and merge completed."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class SyncError(DomainError):
    """Base exception for remote store failures."""


class LoadFailure(SyncError):
    """Raised when the remote snapshot cannot be loaded."""


class SaveFailure(SyncError):
    """Raised when pending changes cannot be written upstream."""
