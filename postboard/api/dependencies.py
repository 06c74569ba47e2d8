"""FastAPI dependencies: service wiring and the access-token gate."""

from typing import Optional

import structlog
from fastapi import Depends, Header, Request

from postboard.config import Settings, get_settings
from postboard.services.auth_service import AuthService
from postboard.services.caption_service import CaptionService
from postboard.services.crud_service import COMMENTS, POSTS, CrudService
from postboard.services.errors import MissingTokenError
from postboard.services.google_auth_service import GoogleAuthService
from postboard.services.session_service import SessionService
from postboard.services.token_service import TokenService
from postboard.services.user_service import UserService


def get_user_service() -> UserService:
    return UserService()


def get_token_service(settings: Settings = Depends(get_settings)) -> TokenService:
    return TokenService(settings)


def get_auth_service(
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(users, settings)


def get_google_auth_service(
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
) -> GoogleAuthService:
    return GoogleAuthService(users, settings)


def get_session_service(
    users: UserService = Depends(get_user_service),
    tokens: TokenService = Depends(get_token_service),
    auth: AuthService = Depends(get_auth_service),
    google: GoogleAuthService = Depends(get_google_auth_service),
) -> SessionService:
    return SessionService(users, tokens, auth, google)


def get_post_service() -> CrudService:
    return CrudService(POSTS)


def get_comment_service() -> CrudService:
    return CrudService(COMMENTS)


def get_caption_service(settings: Settings = Depends(get_settings)) -> CaptionService:
    return CaptionService(settings)


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Second whitespace-separated field of the header; the scheme is ignored."""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) < 2:
        return None
    return parts[1]


async def require_user(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> str:
    """Authenticate a request by its access token.

    Only signature and expiry are checked; access tokens are not looked up
    in the store, so logout does not cut them short.

    Returns:
        The authenticated user id, also stored on ``request.state.user_id``

    Raises:
        MissingTokenError: If there is no token (401)
        AuthConfigurationError: If no signing secret is configured (400)
        InvalidTokenError: If the token does not verify (403)
    """
    token = _bearer_token(authorization)
    if token is None:
        raise MissingTokenError()

    user_id = tokens.verify(token)

    request.state.user_id = user_id
    structlog.contextvars.bind_contextvars(user_id=user_id)
    return user_id
