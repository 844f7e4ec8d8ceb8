"""Todo domain models.

A todo is either pending (``completed_at`` is None) or completed
(``completed_at`` holds epoch milliseconds). Only an explicit
``is_completed`` value in a patch moves it between the two states.
"""

import time
from dataclasses import dataclass, replace
from datetime import datetime, timezone

from domain.model.errors import ValidationError
from domain.model.identifiers import new_id


def now_millis() -> int:
    return int(time.time() * 1000)


def validate_text(text: str | None) -> str:
    """Return trimmed todo text.

    Raises:
        ValidationError: text missing, not a string, or blank after trimming
    """
    if not isinstance(text, str):
        raise ValidationError("Text is required")
    text = text.strip()
    if len(text) < 1:
        raise ValidationError("Text must not be empty")
    return text


@dataclass(frozen=True)
class TodoPatch:
    """Partial update; None means "leave unchanged"."""
    text: str | None = None
    is_completed: bool | None = None

    @staticmethod
    def create(text: str | None = None, is_completed: bool | None = None) -> 'TodoPatch':
        """Validate and normalize a patch before it reaches a repository."""
        if text is not None:
            text = validate_text(text)
        return TodoPatch(text=text, is_completed=is_completed)


@dataclass
class Todo:
    """A single todo item owned by one user."""
    id: str
    owner_id: str
    text: str
    created_at: datetime
    is_completed: bool = False
    completed_at: int | None = None

    @staticmethod
    def create(owner_id: str, text: str | None) -> 'Todo':
        return Todo(
            id=new_id(),
            owner_id=owner_id,
            text=validate_text(text),
            created_at=datetime.now(timezone.utc),
        )

    def apply(self, patch: TodoPatch, now: int) -> 'Todo':
        """Return a copy with the patch applied.

        Completing a pending todo stamps ``now``; completing an already
        completed todo keeps its timestamp; un-completing clears it.
        """
        updated = self
        if patch.text is not None:
            updated = replace(updated, text=patch.text)
        if patch.is_completed is True:
            updated = replace(
                updated,
                is_completed=True,
                completed_at=self.completed_at if self.completed_at is not None else now,
            )
        elif patch.is_completed is False:
            updated = replace(updated, is_completed=False, completed_at=None)
        return updated
