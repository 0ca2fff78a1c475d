"""
API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from quotation_api.api.endpoints import auth, quotations
from quotation_api.core.config import settings

api_router = APIRouter()

# Auth (signup, login, profile)
api_router.include_router(auth.router)

# Quotations CRUD + status
api_router.include_router(quotations.router)


@api_router.get("", tags=["root"])
async def api_index() -> dict:
    """Advertise the available endpoints."""
    prefix = settings.API_PREFIX
    return {
        "message": "Welcome to the Quotation Management API",
        "version": settings.VERSION,
        "endpoints": {
            "auth": {
                "signup": f"{prefix}/auth/signup",
                "login": f"{prefix}/auth/login",
                "profile": f"{prefix}/auth/profile",
            },
            "quotations": {
                "get": f"{prefix}/quotations",
                "post": f"{prefix}/quotations",
                "patch": f"{prefix}/quotations/:id",
                "delete": f"{prefix}/quotations/:id",
                "status": f"{prefix}/quotations/:id/status",
            },
        },
    }
