"""
Registration and login flows.

Both flows are linear: each step either short-circuits with an
``AppError`` or hands its result to the next one.  Nothing is written to
the credential store until every validation and uniqueness check passed.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from starlette.concurrency import run_in_threadpool

from quotation_api.core.exceptions import AuthenticationError, ConflictError, ValidationError
from quotation_api.core.security import PasswordHasher, TokenIssuer
from quotation_api.crud.user import DUPLICATE_USER_MESSAGE, CredentialStore
from quotation_api.models.user import ROLE_ADMIN, ROLE_USER
from quotation_api.schemas.user import UserPublic

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


@dataclass(frozen=True)
class AuthResult:
    token: str
    user: UserPublic


def coerce_role(requested: str | None) -> str:
    """Only an explicit ``"admin"`` request yields admin; anything else is a user."""
    return ROLE_ADMIN if requested == ROLE_ADMIN else ROLE_USER


def validate_signup(username: str | None, email: str | None, password: str | None) -> None:
    if not username or not email or not password:
        raise ValidationError("Username, email, and password are required")
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email format")
    if "\x00" in password:
        raise ValidationError("Password must not contain NUL characters")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )


class AuthService:
    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.issuer = issuer

    async def register(
        self,
        username: str | None,
        email: str | None,
        password: str | None,
        role: str | None = None,
    ) -> AuthResult:
        validate_signup(username, email, password)

        existing = await self.store.find_users(email, username)
        if existing:
            logger.info("Signup rejected: duplicate email or username")
            raise ConflictError(DUPLICATE_USER_MESSAGE)

        password_hash = await run_in_threadpool(self.hasher.hash, password)
        user_role = coerce_role(role)
        user_id = await self.store.insert_user(username, email, password_hash, user_role)

        user = UserPublic(id=user_id, username=username, email=email, role=user_role)
        token = self.issuer.issue(user)
        logger.info("Registered user %s (id=%d, role=%s)", username, user_id, user_role)
        return AuthResult(token=token, user=user)

    async def login(self, email: str | None, password: str | None) -> AuthResult:
        if not email or not password:
            raise ValidationError("Email and password are required")

        stored = await self.store.find_user_by_email(email)
        if stored is None or "\x00" in password:
            # Spend the same bcrypt work as a real check.
            await run_in_threadpool(self.hasher.dummy_verify, password.replace("\x00", ""))
            logger.info("Login failed: unknown email or unusable password")
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        if not await run_in_threadpool(self.hasher.verify, password, stored.password_hash):
            logger.info("Login failed: wrong password for user id=%d", stored.id)
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        user = UserPublic.model_validate(stored)
        token = self.issuer.issue(user)
        logger.info("User %s logged in (id=%d)", user.username, user.id)
        return AuthResult(token=token, user=user)
