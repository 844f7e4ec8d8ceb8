from typing import Protocol
from domain.model.todo import Todo, TodoPatch


class TodoRepository(Protocol):
    """Protocol defining owner-scoped todo persistence.

    Every lookup filters on owner_id; a todo owned by someone else is
    reported exactly like a missing one (None).
    """
    def create(self, todo: Todo) -> Todo:
        ...

    def list_by_owner(self, owner_id: str) -> list[Todo]:
        ...

    def get(self, owner_id: str, todo_id: str) -> Todo | None:
        ...

    def update(self, owner_id: str, todo_id: str, patch: TodoPatch, now: int) -> Todo | None:
        """Apply patch atomically and return the updated todo, or None if not found."""
        ...

    def delete(self, owner_id: str, todo_id: str) -> Todo | None:
        """Delete and return the removed todo, or None if not found."""
        ...
