"""
JWT token issuance / verification and password hashing (bcrypt).

Both are constructed from explicit configuration so that the secret, the
algorithm, the expiry and the bcrypt work factor are never read from
module globals at call time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from jose.exceptions import JOSEError
from passlib.context import CryptContext
from pydantic import ValidationError as PydanticValidationError

from quotation_api.core.config import Settings
from quotation_api.core.exceptions import AuthenticationError, InternalError
from quotation_api.schemas.token import TokenClaims
from quotation_api.schemas.user import UserPublic

logger = logging.getLogger(__name__)

DEFAULT_BCRYPT_ROUNDS = 10
DEFAULT_TOKEN_LIFETIME = timedelta(hours=24)

_DUMMY_PASSWORD = "quotation-api-dummy-password"


# ── Passwords ───────────────────────────────────────────────────────
class PasswordHasher:
    """Salted bcrypt hashing with a configurable work factor."""

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )
        self._dummy_hash: str | None = None

    def hash(self, plain: str) -> str:
        try:
            return self._context.hash(plain)
        except (ValueError, TypeError) as exc:
            raise InternalError("Error hashing password", detail=str(exc)) from exc

    def verify(self, plain: str, hashed: str) -> bool:
        """Return True iff *plain* matches *hashed*.

        A stored hash the backend cannot parse is an internal error, not
        a credential mismatch.
        """
        try:
            return self._context.verify(plain, hashed)
        except (ValueError, TypeError) as exc:
            raise InternalError("Error verifying password", detail=str(exc)) from exc

    def dummy_verify(self, plain: str) -> None:
        """Spend one verify's worth of bcrypt work when there is no stored hash."""
        if self._dummy_hash is None:
            self._dummy_hash = self._context.hash(_DUMMY_PASSWORD)
        self._context.verify(plain, self._dummy_hash)


# ── JWT tokens ──────────────────────────────────────────────────────
@dataclass(frozen=True)
class TokenConfig:
    secret: str
    algorithm: str = "HS256"
    expires_in: timedelta = DEFAULT_TOKEN_LIFETIME

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenConfig":
        return cls(
            secret=settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            expires_in=settings.jwt_expires_delta,
        )


class TokenIssuer:
    def __init__(self, config: TokenConfig) -> None:
        self.config = config

    def issue(self, user: UserPublic, expires_in: timedelta | None = None) -> str:
        """Sign the user's identity claims into a compact JWT."""
        now = datetime.now(timezone.utc)
        expire = now + (expires_in if expires_in is not None else self.config.expires_in)
        payload = {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "role": user.role,
            "iat": now,
            "exp": expire,
        }
        try:
            return jwt.encode(payload, self.config.secret, algorithm=self.config.algorithm)
        except JOSEError as exc:
            raise InternalError("Error signing token", detail=str(exc)) from exc


class TokenVerifier:
    def __init__(self, config: TokenConfig) -> None:
        self.config = config

    def verify(self, token: str) -> TokenClaims:
        """Return the claims of a valid token.

        Bad signature, expiry and malformed payloads all raise the same
        ``AuthenticationError``; the reason is only logged.
        """
        try:
            payload = jwt.decode(
                token,
                self.config.secret,
                algorithms=[self.config.algorithm],
                options={"require_exp": True},
            )
            return TokenClaims.model_validate(payload)
        except (JWTError, PydanticValidationError) as exc:
            logger.info("Token verification failed: %s", exc)
            raise AuthenticationError("Invalid token.") from exc
