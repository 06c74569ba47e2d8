"""Authentication API endpoints.

Failures are rendered by the ServiceError handler as plain-text bodies,
e.g. ``400 invalid token``.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from postboard.api.dependencies import get_auth_service, get_session_service
from postboard.models.auth import (
    GoogleLoginRequest,
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    RegisterRequest,
    TokenPair,
)
from postboard.models.user import UserPublic
from postboard.services.auth_service import AuthService
from postboard.services.session_service import SessionService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register")
async def register(
    request: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> UserPublic:
    """Create a local account from email, password and optional name."""
    user = await auth_service.register(request.email, request.password, request.name)
    return user.to_public()


@router.post("/login")
async def login(
    request: LoginRequest,
    session_service: SessionService = Depends(get_session_service),
) -> LoginResponse:
    """Login with email and password.

    Every successful login opens a new session with its own refresh token;
    earlier sessions stay valid.
    """
    return await session_service.login(request.email, request.password)


@router.post("/logout", response_class=PlainTextResponse)
async def logout(
    request: RefreshTokenRequest,
    session_service: SessionService = Depends(get_session_service),
) -> str:
    """Revoke the given refresh token."""
    await session_service.logout(request.refresh_token)
    return "logged out"


@router.post("/refresh")
async def refresh(
    request: RefreshTokenRequest,
    session_service: SessionService = Depends(get_session_service),
) -> TokenPair:
    """Exchange a refresh token for a new token pair.

    A refresh token can be redeemed once. Redeeming it again revokes
    every session of its user.
    """
    return await session_service.refresh(request.refresh_token)


@router.post("/google")
async def google_sign_in(
    request: GoogleLoginRequest,
    session_service: SessionService = Depends(get_session_service),
) -> LoginResponse:
    """Sign in with a Google ID token, creating the account on first use."""
    return await session_service.google_login(request.credential)
