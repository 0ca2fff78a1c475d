"""
FastAPI dependencies — auth gates, auth service wiring and database session.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from functools import lru_cache

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from quotation_api.core.config import settings
from quotation_api.core.exceptions import AuthenticationError, AuthorizationError
from quotation_api.core.security import PasswordHasher, TokenConfig, TokenIssuer, TokenVerifier
from quotation_api.crud.user import SQLAlchemyCredentialStore
from quotation_api.db.session import async_session_factory
from quotation_api.models.user import ROLE_ADMIN
from quotation_api.schemas.token import TokenClaims
from quotation_api.services.auth import AuthService


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Auth components ─────────────────────────────────────────────────
@lru_cache
def get_token_config() -> TokenConfig:
    return TokenConfig.from_settings(settings)


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=settings.BCRYPT_ROUNDS)


def get_token_issuer(config: TokenConfig = Depends(get_token_config)) -> TokenIssuer:
    return TokenIssuer(config)


def get_token_verifier(config: TokenConfig = Depends(get_token_config)) -> TokenVerifier:
    return TokenVerifier(config)


def get_auth_service(
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> AuthService:
    return AuthService(SQLAlchemyCredentialStore(db), hasher, issuer)


# ── Access gates ────────────────────────────────────────────────────
def extract_bearer_token(authorization: str | None) -> str:
    """Return the token from an ``Authorization: Bearer <token>`` header value."""
    if not authorization:
        raise AuthenticationError("Access denied. No token provided.")
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        raise AuthenticationError("Invalid token format.")
    return parts[1]


async def get_current_user(
    request: Request,
    authorization: str | None = Header(default=None),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> TokenClaims:
    """Verify the bearer token and attach its claims to ``request.state.user``."""
    claims = verifier.verify(extract_bearer_token(authorization))
    request.state.user = claims
    return claims


def ensure_admin(user: TokenClaims | None) -> TokenClaims:
    if user is None:
        raise AuthenticationError("Authentication required.")
    if user.role != ROLE_ADMIN:
        raise AuthorizationError("Access denied. Admin privileges required.")
    return user


async def require_admin(
    request: Request,
    _user: TokenClaims = Depends(get_current_user),
) -> TokenClaims:
    """Only allow admin role to proceed. Always evaluated after ``get_current_user``."""
    return ensure_admin(getattr(request.state, "user", None))
