"""x-auth token authentication dependency."""

import logging
from fastapi import Depends, Security
from fastapi.security import APIKeyHeader

from api.dependencies import get_token_service, get_user_repo
from domain.model.errors import AuthenticationError
from port.user_repository import UserRepository
from services.auth_service import AuthSession, resolve_session
from services.token_service import TokenService

logger = logging.getLogger(__name__)

AUTH_HEADER = "x-auth"

x_auth = APIKeyHeader(name=AUTH_HEADER, auto_error=False)


def require_token(token: str | None = Security(x_auth)) -> str:
    """Fail with 401 before any store handle is requested."""
    if not token:
        raise AuthenticationError("Missing token")
    return token


def get_current_session(
    token: str = Depends(require_token),
    user_repo: UserRepository = Depends(get_user_repo),
    tokens: TokenService = Depends(get_token_service),
) -> AuthSession:
    """Resolve the x-auth header to a live session.

    Raises AuthenticationError, which the app turns into 401 with an
    empty body.
    """
    return resolve_session(user_repo, tokens, token)
