class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when the addressed record does not exist."""

    status_code = 404


class RequestTimeoutError(DomainError):
    """Raised when an upstream service did not answer in time."""

    status_code = 408


class ConflictError(DomainError):
    """Raised when a submission collides with an existing record."""

    status_code = 409


class ServiceError(DomainError):
    """Raised when an upstream service reported a failure."""

    status_code = 500
