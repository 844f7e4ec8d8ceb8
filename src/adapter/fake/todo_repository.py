"""In-memory implementation of TodoRepository for testing."""

from domain.model.todo import Todo, TodoPatch


class FakeTodoRepository:
    def __init__(self):
        self.store: dict[str, Todo] = {}

    def _owned(self, owner_id: str, todo_id: str) -> Todo | None:
        todo = self.store.get(todo_id)
        if todo and todo.owner_id == owner_id:
            return todo
        return None

    # ── write operations ─────────────────────────────────────

    def create(self, todo: Todo) -> Todo:
        self.store[todo.id] = todo
        return todo

    def update(self, owner_id: str, todo_id: str, patch: TodoPatch, now: int) -> Todo | None:
        todo = self._owned(owner_id, todo_id)
        if not todo:
            return None
        updated = todo.apply(patch, now)
        self.store[todo_id] = updated
        return updated

    def delete(self, owner_id: str, todo_id: str) -> Todo | None:
        if not self._owned(owner_id, todo_id):
            return None
        return self.store.pop(todo_id)

    # ── read operations ──────────────────────────────────────

    def list_by_owner(self, owner_id: str) -> list[Todo]:
        return [t for t in self.store.values() if t.owner_id == owner_id]

    def get(self, owner_id: str, todo_id: str) -> Todo | None:
        return self._owned(owner_id, todo_id)
