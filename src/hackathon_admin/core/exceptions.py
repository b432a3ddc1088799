class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when a required field is missing or malformed."""


class AuthenticationError(DomainError):
    """Raised when credentials or the bearer token are missing or wrong."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a bearer token is present but not acceptable."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when no row matches the requested identifier."""

    status_code = 404


class ConflictError(DomainError):
    """Raised when a unique key is already taken."""

    status_code = 409


class StorageError(DomainError):
    """Raised for any underlying database failure."""

    status_code = 500
