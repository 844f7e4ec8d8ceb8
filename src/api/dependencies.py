from fastapi import HTTPException, Request
from pymongo.database import Database

from adapter.mongodb.todo_repository import MongoTodoRepository
from adapter.mongodb.user_repository import MongoUserRepository
from port.todo_repository import TodoRepository
from port.user_repository import UserRepository
from services.token_service import TokenService


def _get_db(request: Request) -> Database:
    """Get the database handle opened at startup, raising 503 if unavailable."""
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return db


def get_user_repo(request: Request) -> UserRepository:
    return MongoUserRepository(_get_db(request))


def get_todo_repo(request: Request) -> TodoRepository:
    return MongoTodoRepository(_get_db(request))


def get_token_service(request: Request) -> TokenService:
    tokens = getattr(request.app.state, "token_service", None)
    if tokens is None:
        raise HTTPException(status_code=503, detail="Token service unavailable")
    return tokens
