class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced account, course or session does not exist."""


class DecodeError(ValidationError):
    """Raised by the token codec for a malformed or foreign payload."""


class SessionStateError(ValidationError):
    """Raised when an operation needs a session in another open/closed state."""
