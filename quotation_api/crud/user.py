"""
Credential store — user lookups and inserts for the auth flows.
"""

from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quotation_api.core.exceptions import ConflictError
from quotation_api.db.session import run_with_reconnect
from quotation_api.models.user import User

logger = logging.getLogger(__name__)

DUPLICATE_USER_MESSAGE = "User with this email or username already exists"


class CredentialStore(Protocol):
    async def find_users(self, email: str, username: str) -> list[User]: ...

    async def insert_user(
        self, username: str, email: str, password_hash: str, role: str
    ) -> int: ...

    async def find_user_by_email(self, email: str) -> User | None: ...


class SQLAlchemyCredentialStore:
    """``CredentialStore`` backed by the ``users`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_users(self, email: str, username: str) -> list[User]:
        """Users whose email OR username matches."""

        async def _query() -> list[User]:
            result = await self.session.execute(
                select(User).where(or_(User.email == email, User.username == username))
            )
            return list(result.scalars().all())

        return await run_with_reconnect(self.session, _query)

    async def find_user_by_email(self, email: str) -> User | None:
        async def _query() -> User | None:
            result = await self.session.execute(select(User).where(User.email == email))
            return result.scalars().first()

        return await run_with_reconnect(self.session, _query)

    async def insert_user(self, username: str, email: str, password_hash: str, role: str) -> int:
        """Insert a user and return the id the database assigned.

        The unique constraints on ``email`` and ``username`` catch the
        concurrent-registration case the flow's pre-check cannot.
        """

        async def _insert() -> int:
            user = User(username=username, email=email, password_hash=password_hash, role=role)
            self.session.add(user)
            try:
                await self.session.commit()
            except IntegrityError as exc:
                await self.session.rollback()
                logger.warning("Duplicate user rejected by unique constraint: %s", exc.orig)
                raise ConflictError(DUPLICATE_USER_MESSAGE) from exc
            await self.session.refresh(user)
            return user.id

        return await run_with_reconnect(self.session, _insert)
