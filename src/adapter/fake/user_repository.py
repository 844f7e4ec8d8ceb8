"""In-memory implementation of UserRepository for testing."""

import threading
from dataclasses import replace
from datetime import datetime, timezone

from domain.model.errors import DuplicateEmailError
from domain.model.user import SessionToken, User


def _copy(user: User) -> User:
    return replace(user, tokens=list(user.tokens))


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}
        self._lock = threading.Lock()

    # ── write operations ─────────────────────────────────────

    def create(self, user: User) -> User:
        # Lock emulates the unique index: check and insert are one step.
        with self._lock:
            if any(u.email == user.email for u in self.store.values()):
                raise DuplicateEmailError(user.email)
            self.store[user.id] = _copy(user)
        return user

    def add_token(self, user_id: str, token: str) -> bool:
        with self._lock:
            user = self.store.get(user_id)
            if not user:
                return False
            user.tokens.append(SessionToken(token=token))
            user.updated_at = datetime.now(timezone.utc)
            return True

    def remove_token(self, user_id: str, token: str) -> bool:
        with self._lock:
            user = self.store.get(user_id)
            if not user:
                return False
            remaining = [t for t in user.tokens if t.token != token]
            removed = len(remaining) != len(user.tokens)
            user.tokens = remaining
            return removed

    # ── read operations ──────────────────────────────────────
    # Reads hand out copies, as a real store would.

    def get_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return _copy(user)
        return None

    def get_by_id(self, user_id: str) -> User | None:
        user = self.store.get(user_id)
        return _copy(user) if user else None

    def get_by_token(self, user_id: str, token: str) -> User | None:
        user = self.store.get(user_id)
        if user and user.has_token(token):
            return _copy(user)
        return None
