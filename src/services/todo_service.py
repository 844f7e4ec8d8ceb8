"""Todo service — ownership-scoped CRUD rules.

A todo is only visible to its owner. Malformed ids, missing todos, and
todos owned by someone else all raise the same NotFoundError.
"""

import logging

from domain.model.errors import NotFoundError
from domain.model.identifiers import is_valid_id
from domain.model.todo import Todo, TodoPatch, now_millis
from port.todo_repository import TodoRepository

logger = logging.getLogger(__name__)


def _require_id(todo_id: str) -> str:
    if not is_valid_id(todo_id):
        raise NotFoundError("Todo not found")
    return todo_id


def create_todo(repo: TodoRepository, owner_id: str, text: str | None) -> Todo:
    """Raises ValidationError if text is blank after trimming."""
    todo = repo.create(Todo.create(owner_id=owner_id, text=text))
    logger.info("Todo created", extra={"todoId": todo.id, "userId": owner_id})
    return todo


def list_todos(repo: TodoRepository, owner_id: str) -> list[Todo]:
    return repo.list_by_owner(owner_id)


def get_todo(repo: TodoRepository, owner_id: str, todo_id: str) -> Todo:
    todo = repo.get(owner_id, _require_id(todo_id))
    if not todo:
        raise NotFoundError("Todo not found")
    return todo


def update_todo(
    repo: TodoRepository,
    owner_id: str,
    todo_id: str,
    text: str | None = None,
    is_completed: bool | None = None,
) -> Todo:
    """Raises NotFoundError before looking at the patch, ValidationError for blank text."""
    todo_id = _require_id(todo_id)
    patch = TodoPatch.create(text=text, is_completed=is_completed)
    todo = repo.update(owner_id, todo_id, patch, now_millis())
    if not todo:
        raise NotFoundError("Todo not found")
    logger.info("Todo updated", extra={
        "todoId": todo.id,
        "userId": owner_id,
        "isCompleted": todo.is_completed,
    })
    return todo


def delete_todo(repo: TodoRepository, owner_id: str, todo_id: str) -> Todo:
    todo = repo.delete(owner_id, _require_id(todo_id))
    if not todo:
        raise NotFoundError("Todo not found")
    logger.info("Todo deleted", extra={"todoId": todo.id, "userId": owner_id})
    return todo
