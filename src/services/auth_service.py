"""Auth service — registration, login, logout, and session resolution.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import logging
import os
from dataclasses import dataclass

import bcrypt

from domain.model.errors import (
    AuthenticationError,
    InvalidCredentialsError,
    InvalidTokenError,
    ValidationError,
)
from domain.model.user import (
    SessionToken,
    User,
    normalize_email,
    password_too_long,
    validate_password,
)
from port.user_repository import UserRepository
from services.token_service import TokenService

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))


@dataclass(frozen=True)
class AuthSession:
    """A user together with the token that authenticated them."""
    user: User
    token: str


def _hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def register(
    repo: UserRepository,
    tokens: TokenService,
    email: str | None,
    password: str | None,
    rounds: int = BCRYPT_ROUNDS,
) -> AuthSession:
    """Register a new user and open their first session.

    Raises:
        ValidationError: malformed email or short password
        DuplicateEmailError: email already registered (raised by the repository)
    """
    email = normalize_email(email)
    password = validate_password(password)

    user = User.create(email=email, password_hash=_hash_password(password, rounds))
    token = tokens.issue(user.id)
    user.tokens.append(SessionToken(token=token))

    repo.create(user)
    logger.info("User registered", extra={"userId": user.id})
    return AuthSession(user=user, token=token)


def login(
    repo: UserRepository,
    tokens: TokenService,
    email: str | None,
    password: str | None,
) -> AuthSession:
    """Authenticate by email and password and open a new session.

    Existing sessions stay valid. The error does not reveal whether the
    email exists.

    Raises:
        InvalidCredentialsError: unknown email or wrong password
    """
    try:
        email = normalize_email(email)
    except ValidationError as e:
        raise InvalidCredentialsError("Invalid email or password") from e

    if not password or password_too_long(password):
        raise InvalidCredentialsError("Invalid email or password")

    user = repo.get_by_email(email)
    if not user or not _verify_password(password, user.password_hash):
        raise InvalidCredentialsError("Invalid email or password")

    token = tokens.issue(user.id)
    if not repo.add_token(user.id, token):
        # user vanished between lookup and update
        raise InvalidCredentialsError("Invalid email or password")
    user.tokens.append(SessionToken(token=token))

    logger.info("User logged in", extra={"userId": user.id})
    return AuthSession(user=user, token=token)


def logout(repo: UserRepository, session: AuthSession) -> None:
    """Revoke the token that authenticated this session."""
    repo.remove_token(session.user.id, session.token)
    logger.info("User logged out", extra={"userId": session.user.id})


def resolve_session(repo: UserRepository, tokens: TokenService, token: str | None) -> AuthSession:
    """Turn a presented token into a live session.

    Signature validity alone is not enough: the token must still be in
    the owner's token set, which is what makes logout effective.

    Raises:
        AuthenticationError: token missing, invalid, or revoked
    """
    if not token:
        raise AuthenticationError("Missing token")
    try:
        claims = tokens.verify(token)
    except InvalidTokenError as e:
        raise AuthenticationError("Invalid token") from e

    user = repo.get_by_token(claims.user_id, token)
    if not user:
        logger.debug("Token not in live session set", extra={"userId": claims.user_id})
        raise AuthenticationError("Revoked token")
    return AuthSession(user=user, token=token)
