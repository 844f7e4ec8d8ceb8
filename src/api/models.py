"""Pydantic models for API request/response."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from domain.model.todo import Todo
from domain.model.user import User


class CredentialsRequest(BaseModel):
    """Request body for registration and login.

    Fields are optional here; the auth service decides what is acceptable
    so that missing and malformed values fail the same way.
    """
    email: Optional[str] = Field(None, strict=True)
    password: Optional[str] = Field(None, strict=True)


class CreateTodoRequest(BaseModel):
    text: Optional[str] = Field(None, strict=True)


class UpdateTodoRequest(BaseModel):
    """Partial todo update; omitted fields are left unchanged."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    text: Optional[str] = Field(None, strict=True)
    is_completed: Optional[bool] = Field(None, strict=True)


class UserResponse(BaseModel):
    """Public view of a user (never includes hash or tokens)."""
    id: str
    email: str

    @classmethod
    def from_domain(cls, user: User) -> 'UserResponse':
        return cls(id=user.id, email=user.email)


class TodoResponse(BaseModel):
    """Response model for a todo. Serialized with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    text: str
    is_completed: bool
    completed_at: Optional[int] = Field(None, description="Epoch milliseconds; omitted while pending")
    owner_id: str

    @classmethod
    def from_domain(cls, todo: Todo) -> 'TodoResponse':
        return cls(
            id=todo.id,
            text=todo.text,
            is_completed=todo.is_completed,
            completed_at=todo.completed_at,
            owner_id=todo.owner_id,
        )


class TodoEnvelope(BaseModel):
    todo: TodoResponse


class TodoListResponse(BaseModel):
    todos: list[TodoResponse]
