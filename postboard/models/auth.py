"""Auth request and response models.

Wire names are camelCase (``refreshToken``, ``_id``); Python attributes are
snake_case. Request fields are optional so handlers can answer a missing
field with the documented plain-text message instead of a schema error.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Local account registration.

    Attributes:
        email: Account email, unique among local accounts
        password: Plain-text password, hashed before storage
        name: Optional display name
    """

    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class LoginRequest(BaseModel):
    """Email/password credentials."""

    email: Optional[str] = None
    password: Optional[str] = None


class RefreshTokenRequest(BaseModel):
    """Body of /auth/logout and /auth/refresh."""

    model_config = ConfigDict(populate_by_name=True)

    refresh_token: Optional[str] = Field(default=None, alias="refreshToken")


class GoogleLoginRequest(BaseModel):
    """Google Identity Services sign-in.

    Attributes:
        credential: The Google ID token (JWT) issued to the browser client
    """

    credential: Optional[str] = None


class TokenPair(BaseModel):
    """An access token and the refresh token issued with it."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(alias="accessToken")
    refresh_token: str = Field(alias="refreshToken")


class LoginResponse(BaseModel):
    """Successful login: user identity plus a fresh token pair."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID = Field(alias="_id")
    email: str
    name: Optional[str] = None
    access_token: str = Field(alias="accessToken")
    refresh_token: str = Field(alias="refreshToken")


class FederatedIdentity(BaseModel):
    """Identity claims extracted from a verified third-party assertion."""

    email: str
    name: str
