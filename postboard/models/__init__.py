"""Models package exports."""

from postboard.models.auth import (
    FederatedIdentity,
    GoogleLoginRequest,
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    RegisterRequest,
    TokenPair,
)
from postboard.models.user import AccountKind, UserPublic, UserRecord

__all__ = [
    "AccountKind",
    "FederatedIdentity",
    "GoogleLoginRequest",
    "LoginRequest",
    "LoginResponse",
    "RefreshTokenRequest",
    "RegisterRequest",
    "TokenPair",
    "UserPublic",
    "UserRecord",
]
