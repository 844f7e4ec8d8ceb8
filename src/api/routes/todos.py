"""Todo routes, scoped to the authenticated user.

Endpoints:
- POST /todos: Create a todo
- GET /todos: List the caller's todos
- GET /todos/{id}: Get one todo
- PATCH /todos/{id}: Update text and/or completion
- DELETE /todos/{id}: Delete a todo

A todo owned by another user answers 404, same as a missing todo or a
malformed id.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_todo_repo
from api.models import (
    CreateTodoRequest,
    TodoEnvelope,
    TodoListResponse,
    TodoResponse,
    UpdateTodoRequest,
)
from api.security import get_current_session
from domain.model.errors import NotFoundError, ValidationError
from domain.model.identifiers import is_valid_id
from port.todo_repository import TodoRepository
from services import todo_service
from services.auth_service import AuthSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/todos", tags=["todos"])


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Todo not found")


def valid_todo_id(todo_id: str, session: AuthSession = Depends(get_current_session)) -> str:
    """Path id check; runs after auth and before the request body is parsed."""
    if not is_valid_id(todo_id):
        raise _not_found()
    return todo_id


@router.post("", response_model=TodoResponse, response_model_exclude_none=True)
def create_todo(
    request: CreateTodoRequest,
    session: AuthSession = Depends(get_current_session),
    repo: TodoRepository = Depends(get_todo_repo),
):
    try:
        todo = todo_service.create_todo(repo, session.user.id, request.text)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return TodoResponse.from_domain(todo)


@router.get("", response_model=TodoListResponse, response_model_exclude_none=True)
def list_todos(
    session: AuthSession = Depends(get_current_session),
    repo: TodoRepository = Depends(get_todo_repo),
):
    todos = todo_service.list_todos(repo, session.user.id)
    return TodoListResponse(todos=[TodoResponse.from_domain(t) for t in todos])


@router.get("/{todo_id}", response_model=TodoEnvelope, response_model_exclude_none=True)
def get_todo(
    todo_id: str = Depends(valid_todo_id),
    session: AuthSession = Depends(get_current_session),
    repo: TodoRepository = Depends(get_todo_repo),
):
    try:
        todo = todo_service.get_todo(repo, session.user.id, todo_id)
    except NotFoundError:
        raise _not_found()
    return TodoEnvelope(todo=TodoResponse.from_domain(todo))


@router.patch("/{todo_id}", response_model=TodoEnvelope, response_model_exclude_none=True)
def update_todo(
    request: UpdateTodoRequest,
    todo_id: str = Depends(valid_todo_id),
    session: AuthSession = Depends(get_current_session),
    repo: TodoRepository = Depends(get_todo_repo),
):
    """Update a todo. ``isCompleted: true`` stamps completedAt, ``false`` clears it."""
    try:
        todo = todo_service.update_todo(
            repo,
            session.user.id,
            todo_id,
            text=request.text,
            is_completed=request.is_completed,
        )
    except NotFoundError:
        raise _not_found()
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return TodoEnvelope(todo=TodoResponse.from_domain(todo))


@router.delete("/{todo_id}", response_model=TodoEnvelope, response_model_exclude_none=True)
def delete_todo(
    todo_id: str = Depends(valid_todo_id),
    session: AuthSession = Depends(get_current_session),
    repo: TodoRepository = Depends(get_todo_repo),
):
    try:
        todo = todo_service.delete_todo(repo, session.user.id, todo_id)
    except NotFoundError:
        raise _not_found()
    return TodoEnvelope(todo=TodoResponse.from_domain(todo))
