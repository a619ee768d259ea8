"""Error types raised by the domain and application layers."""


class DomainError(Exception):
    """Base class for expected application failures."""


class ValidationError(DomainError):
    """Raised when input or entity state is malformed."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class AuthError(DomainError):
    """Raised on session or ownership mismatch."""


class AlreadyExistsError(DomainError):
    """Raised when creating an entity that is already stored."""


class InfrastructureError(DomainError):
    """Raised when an adapter is misconfigured or a backend fails."""
