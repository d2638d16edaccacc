"""Credential service: password hashing and opaque bearer token issuance"""

import hashlib
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from finance_tracker.config import settings
from finance_tracker.domain.exceptions import AuthenticationError, DuplicateUserError, ValidationError
from finance_tracker.infrastructure.database.models import User
from finance_tracker.infrastructure.database.repositories import UserRepository


@dataclass
class TokenPair:
    access_token: str
    refresh_token: str
    expires_in: int  # Access token lifetime in seconds


# bcrypt only looks at the first 72 bytes and newer releases reject longer input
BCRYPT_MAX_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > BCRYPT_MAX_BYTES


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def token_digest(token: str) -> str:
    """Tokens are only ever stored as SHA-256 hex digests"""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class CredentialService:
    """Registers users, checks passwords and issues/rotates tokens"""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)

    def _issue_tokens(self, user: User) -> TokenPair:
        access = secrets.token_urlsafe(32)
        refresh = secrets.token_urlsafe(48)
        now = _utcnow()
        access_ttl = timedelta(minutes=settings.access_token_ttl_minutes)

        self.users.add_access_token(user.id, token_digest(access), now + access_ttl)
        self.users.add_refresh_token(
            user.id,
            token_digest(refresh),
            now + timedelta(days=settings.refresh_token_ttl_days),
        )
        self.db.flush()
        return TokenPair(access_token=access, refresh_token=refresh, expires_in=int(access_ttl.total_seconds()))

    def register(self, name: str, email: str, password: str) -> tuple[User, TokenPair]:
        """
        Create a user and sign them in.

        Raises:
            ValidationError: Password shorter than the configured minimum or longer than 72 bytes
            DuplicateUserError: Email already registered (case-insensitive)
        """
        if len(password) < settings.min_password_length:
            raise ValidationError(f"Password must be at least {settings.min_password_length} characters")
        if password_too_long(password):
            raise ValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")

        if self.users.get_by_email(email):
            raise DuplicateUserError("User with this email already exists")

        try:
            user = self.users.create_user(name=name, email=email, password_hash=hash_password(password))
        except IntegrityError as e:
            # Lost a race with a concurrent registration for the same email
            raise DuplicateUserError("User with this email already exists") from e
        tokens = self._issue_tokens(user)
        logging.info("User registered", extra={"user_id": str(user.id), "step": "register"})
        return user, tokens

    def login(self, email: str, password: str) -> tuple[User, TokenPair]:
        """
        Verify credentials and issue a fresh token pair.

        Earlier refresh tokens for the user are revoked.

        Raises:
            AuthenticationError: Unknown email or wrong password
        """
        user = self.users.get_by_email(email)
        if user is None or password_too_long(password) or not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid credentials")

        self.users.delete_refresh_tokens(user.id)
        return user, self._issue_tokens(user)

    def refresh(self, refresh_token: str) -> TokenPair:
        """
        Exchange a refresh token for a new pair; the old refresh token is consumed.

        Raises:
            AuthenticationError: Unknown or expired refresh token
        """
        stored = self.users.get_refresh_token(token_digest(refresh_token))
        if stored is None or _as_utc(stored.expires_at) <= _utcnow():
            raise AuthenticationError("Invalid refresh token")

        user = self.users.get_by_id(stored.user_id)
        if user is None:
            raise AuthenticationError("User not found")

        self.users.delete_token(stored)
        return self._issue_tokens(user)

    def resolve_access_token(self, access_token: str) -> User:
        """
        Map a bearer token to its user.

        Raises:
            AuthenticationError: Unknown or expired token, or deleted user
        """
        stored = self.users.get_access_token(token_digest(access_token))
        if stored is None or _as_utc(stored.expires_at) <= _utcnow():
            raise AuthenticationError("Invalid or expired token")

        user = self.users.get_by_id(stored.user_id)
        if user is None:
            raise AuthenticationError("User not found")
        return user
