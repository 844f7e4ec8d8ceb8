"""Token service — signs and verifies session tokens.

Tokens are HS256 JWTs carrying the user id (``sub``) and a purpose tag
(``access``). There is no expiry claim: a token stays valid until it is
removed from the owner's token set, which callers check separately.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone

from jose import JWTError, jwt

from domain.model.errors import InvalidTokenError
from domain.model.user import AUTH_ACCESS

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    access: str


class TokenService:
    def __init__(self, secret_key: str):
        if not secret_key:
            raise ValueError(
                "JWT_SECRET_KEY environment variable is required. "
                "Generate a secure key with: openssl rand -hex 32"
            )
        self._secret_key = secret_key

    def issue(self, user_id: str) -> str:
        """Create a signed auth token for user_id."""
        payload = {
            "sub": user_id,
            "access": AUTH_ACCESS,
            "iat": datetime.now(timezone.utc),
            # nonce: two logins in the same second still get distinct tokens
            "jti": secrets.token_hex(8),
        }
        return jwt.encode(payload, self._secret_key, algorithm=JWT_ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        """Check signature and purpose.

        Raises:
            InvalidTokenError: bad signature, malformed payload, or wrong purpose
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[JWT_ALGORITHM])
        except JWTError as e:
            logger.debug(f"JWT verification failed: {e}")
            raise InvalidTokenError("Token signature or format invalid") from e

        user_id = payload.get("sub")
        access = payload.get("access")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidTokenError("Token has no subject")
        if access != AUTH_ACCESS:
            raise InvalidTokenError("Token purpose is not auth")
        return TokenClaims(user_id=user_id, access=access)
