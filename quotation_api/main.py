"""
Quotation Management API — application entry point.

This is the **only** file that assembles the app.  All business logic
lives in the `api/`, `services/`, `crud/` and `core/` packages.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import or_, select

from quotation_api.api.api import api_router
from quotation_api.api.endpoints.auth import limiter
from quotation_api.core.config import settings
from quotation_api.core.exceptions import register_exception_handlers
from quotation_api.core.middleware import register_middleware
from quotation_api.core.security import PasswordHasher
from quotation_api.db.base import Base
from quotation_api.db.session import async_session_factory, engine

# Ensure all models are imported so metadata.create_all can see them
from quotation_api.models.quotation import Quotation  # noqa: F401
from quotation_api.models.user import ROLE_ADMIN, User

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


async def seed_first_admin() -> None:
    """Create the configured admin account unless it already exists."""
    username = settings.FIRST_ADMIN_USERNAME
    email = settings.FIRST_ADMIN_EMAIL
    password = settings.FIRST_ADMIN_PASSWORD
    if not (username and email and password):
        return

    async with async_session_factory() as session:
        result = await session.execute(
            select(User).where(or_(User.email == email, User.username == username))
        )
        if result.scalars().first() is not None:
            return
        hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
        session.add(
            User(
                username=username,
                email=email,
                password_hash=hasher.hash(password),
                role=ROLE_ADMIN,
            )
        )
        await session.commit()
        logger.info("Default admin created: %s (password: <redacted>)", email)


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    await seed_first_admin()

    logger.info("%s v%s started", settings.PROJECT_NAME, settings.VERSION)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title="Quotation Management API",
        description="Quotations CRUD with token-based authentication",
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept", "Authorization"],
    )

    # Request logging
    register_middleware(application)

    # Rate limiting on signup / login
    application.state.limiter = limiter

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    application.include_router(api_router, prefix=settings.API_PREFIX)

    return application


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run(
        "quotation_api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
