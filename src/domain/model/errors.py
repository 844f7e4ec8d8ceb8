"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist or is not visible to the caller."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class DuplicateEmailError(DuplicateError):
    """A user with this email is already registered."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("Email already registered")


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class InvalidCredentialsError(DomainError):
    """Email/password pair does not match a registered user."""


class InvalidTokenError(DomainError):
    """Token signature, payload, or purpose is not acceptable."""


class AuthenticationError(DomainError):
    """Request is not backed by a live session."""


class RepositoryError(DomainError):
    """The backing store failed while serving the request."""
