from typing import Protocol
from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user and session data access."""
    def create(self, user: User) -> User:
        """Insert a new user with its initial tokens.

        Raises DuplicateEmailError when the email is taken; the store's
        unique constraint decides, not a prior lookup.
        """
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def get_by_token(self, user_id: str, token: str) -> User | None:
        """Find the user with this id whose live token set holds token."""
        ...

    def add_token(self, user_id: str, token: str) -> bool:
        """Append an auth token to the user's sessions. Return True if the user exists."""
        ...

    def remove_token(self, user_id: str, token: str) -> bool:
        """Remove the matching token. Return True if a token was removed."""
        ...
