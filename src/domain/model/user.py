"""User domain models and credential validation."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from email_validator import EmailNotValidError, validate_email as _check_email

from domain.model.errors import ValidationError
from domain.model.identifiers import new_id

AUTH_ACCESS = 'auth'
EMAIL_MIN_LENGTH = 6
PASSWORD_MIN_LENGTH = 6
# bcrypt only reads the first 72 bytes; longer input is refused, not truncated
PASSWORD_MAX_BYTES = 72


@dataclass(frozen=True)
class SessionToken:
    """One active session: a signed token string and its purpose tag."""
    token: str
    access: str = AUTH_ACCESS


@dataclass
class User:
    """Domain model representing a registered user."""
    id: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime
    tokens: list[SessionToken] = field(default_factory=list)

    @staticmethod
    def create(email: str, password_hash: str) -> 'User':
        """Build a new user with a fresh id and no sessions."""
        now = datetime.now(timezone.utc)
        return User(
            id=new_id(),
            email=email,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )

    def has_token(self, token: str) -> bool:
        return any(t.token == token and t.access == AUTH_ACCESS for t in self.tokens)


def normalize_email(email: str | None) -> str:
    """Validate email shape and return its normalized form.

    Raises:
        ValidationError: missing, too short, or not an email address
    """
    if not email or not email.strip():
        raise ValidationError("Email is required")
    email = email.strip()
    if len(email) < EMAIL_MIN_LENGTH:
        raise ValidationError(f"Email must be at least {EMAIL_MIN_LENGTH} characters")
    try:
        return _check_email(email, check_deliverability=False).normalized
    except EmailNotValidError as e:
        raise ValidationError(f"{email} is not a valid email") from e


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > PASSWORD_MAX_BYTES


def validate_password(password: str | None) -> str:
    if not password:
        raise ValidationError("Password is required")
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if password_too_long(password):
        raise ValidationError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    return password
