"""User and session routes.

Endpoints:
- POST /users: Register and open a first session
- POST /users/login: Open an additional session
- GET /users/me: Current user
- DELETE /users/me/token: Revoke the session's token (logout)

Tokens travel in the ``x-auth`` header in both directions.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from api.dependencies import get_token_service, get_user_repo
from api.models import CredentialsRequest, UserResponse
from api.security import AUTH_HEADER, get_current_session
from domain.model.errors import DuplicateError, InvalidCredentialsError, ValidationError
from port.user_repository import UserRepository
from services import auth_service
from services.auth_service import AuthSession
from services.token_service import TokenService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserResponse)
def register(
    request: CredentialsRequest,
    response: Response,
    repo: UserRepository = Depends(get_user_repo),
    tokens: TokenService = Depends(get_token_service),
):
    """Register a new user.

    Raises:
        HTTPException: 400 for invalid email/password or an already registered email
    """
    try:
        session = auth_service.register(repo, tokens, request.email, request.password)
    except (ValidationError, DuplicateError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    response.headers[AUTH_HEADER] = session.token
    return UserResponse.from_domain(session.user)


@router.post("/login", response_model=UserResponse)
def login(
    request: CredentialsRequest,
    response: Response,
    repo: UserRepository = Depends(get_user_repo),
    tokens: TokenService = Depends(get_token_service),
):
    """Login and return a new token in the x-auth header."""
    try:
        session = auth_service.login(repo, tokens, request.email, request.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    response.headers[AUTH_HEADER] = session.token
    return UserResponse.from_domain(session.user)


@router.get("/me", response_model=UserResponse)
def get_me(session: AuthSession = Depends(get_current_session)):
    return UserResponse.from_domain(session.user)


@router.delete("/me/token")
def logout(
    session: AuthSession = Depends(get_current_session),
    repo: UserRepository = Depends(get_user_repo),
):
    """Revoke the token used for this request. Other sessions stay valid."""
    auth_service.logout(repo, session)
    return {}
