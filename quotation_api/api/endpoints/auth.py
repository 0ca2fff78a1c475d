"""
Auth endpoints — signup, login & profile of the bearer-token holder.
"""

from fastapi import APIRouter, Depends, Request, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from quotation_api.api.deps import get_auth_service, get_current_user
from quotation_api.core.config import settings
from quotation_api.schemas.token import TokenClaims
from quotation_api.schemas.user import AuthResponse, ProfileResponse, UserLogin, UserPublic, UserSignup
from quotation_api.services.auth import AuthService

# Rate limiter — keyed by client IP
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.SIGNUP_RATE_LIMIT)
async def signup(
    request: Request,
    body: UserSignup,
    auth: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Register a new account and return a token for it."""
    result = await auth.register(body.username, body.email, body.password, body.role)
    return AuthResponse(message="User registered successfully", token=result.token, user=result.user)


@router.post("/login", response_model=AuthResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    body: UserLogin,
    auth: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Exchange email + password for a token."""
    result = await auth.login(body.email, body.password)
    return AuthResponse(message="Login successful", token=result.token, user=result.user)


@router.get("/profile", response_model=ProfileResponse)
async def read_profile(
    current_user: TokenClaims = Depends(get_current_user),
) -> ProfileResponse:
    """Return the identity carried by the caller's token."""
    return ProfileResponse(user=UserPublic(**current_user.model_dump(exclude={"exp"})))
