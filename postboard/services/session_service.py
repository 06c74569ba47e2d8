"""Login, logout and refresh-token rotation.

A refresh token is live exactly while it sits in its user's
``refresh_tokens`` set. Login adds one, logout removes one, refresh swaps
the presented token for a new one. Presenting a correctly signed refresh
token that is no longer live is treated as theft: every refresh token of
that user is revoked.

Access tokens are not checked against the store. After logout, an access
token stays usable until it expires (``access_token_ttl_seconds``).
"""

from typing import Optional

import structlog

from postboard.models.auth import LoginResponse, TokenPair
from postboard.models.user import UserRecord
from postboard.services.auth_service import AuthService
from postboard.services.errors import MissingInputError, RevokedTokenError
from postboard.services.google_auth_service import GoogleAuthService
from postboard.services.token_service import TokenService
from postboard.services.user_service import UserService

logger = structlog.get_logger(__name__)


class SessionService:
    """Orchestrates token issuance and revocation against the user store."""

    def __init__(
        self,
        users: UserService,
        tokens: TokenService,
        auth: AuthService,
        google: GoogleAuthService,
    ):
        self.users = users
        self.tokens = tokens
        self.auth = auth
        self.google = google

    async def _start_session(self, user: UserRecord) -> LoginResponse:
        """Issue a token pair and record its refresh token as live."""
        pair = self.tokens.issue_pair(str(user.id))
        await self.users.add_refresh_token(user.id, pair.refresh_token)

        return LoginResponse(
            id=user.id,
            email=user.email,
            name=user.name,
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
        )

    async def login(self, email: Optional[str], password: Optional[str]) -> LoginResponse:
        """Email/password login. Each call opens an additional session.

        Raises:
            AuthConfigurationError: If no signing secret is configured
            WrongCredentialsError: If the credentials do not match a local user
        """
        self.tokens.require_secret()
        user = await self.auth.authenticate(email, password)
        response = await self._start_session(user)
        logger.info("user_logged_in", user_id=str(user.id), method="password")
        return response

    async def google_login(self, credential: Optional[str]) -> LoginResponse:
        """Google sign-in, provisioning a federated account on first use.

        Raises:
            AuthConfigurationError: If signing secret or Google client id is missing
            InvalidAssertionError: If the Google ID token does not verify
        """
        self.tokens.require_secret()
        identity = await self.google.verify_assertion(credential)
        user = await self.google.login_or_register(identity)
        response = await self._start_session(user)
        logger.info("user_logged_in", user_id=str(user.id), method="google")
        return response

    async def _owner_of(self, refresh_token: str) -> UserRecord:
        """Verify a refresh token and load the user it was issued to.

        Raises:
            AuthConfigurationError: If no signing secret is configured
            InvalidTokenError: If signature, shape or expiry check fails
            RevokedTokenError: If the user no longer exists
        """
        subject_id = self.tokens.verify(refresh_token)
        user = await self.users.get_by_id(subject_id)
        if user is None:
            logger.warning("refresh_token_owner_missing", user_id=subject_id)
            raise RevokedTokenError()
        return user

    async def _revoke_all(self, user: UserRecord) -> None:
        logger.warning("refresh_token_reuse_detected", user_id=str(user.id))
        await self.users.clear_refresh_tokens(user.id)

    async def logout(self, refresh_token: Optional[str]) -> None:
        """End the session identified by a refresh token.

        Raises:
            MissingInputError: If no token was supplied
            AuthConfigurationError, InvalidTokenError, RevokedTokenError:
                As for ``refresh``
        """
        if not refresh_token:
            raise MissingInputError("missing refresh token")
        self.tokens.require_secret()

        user = await self._owner_of(refresh_token)
        if not await self.users.consume_refresh_token(user.id, refresh_token):
            await self._revoke_all(user)
            raise RevokedTokenError()
        logger.info("user_logged_out", user_id=str(user.id))

    async def refresh(self, refresh_token: Optional[str]) -> TokenPair:
        """Rotate a refresh token: redeem it once, get a new pair.

        The old token is swapped for the new one in a single store call.
        If the old token is no longer live, every refresh token of the
        user is revoked, including any issued by a concurrent redemption.

        Raises:
            RevokedTokenError: If no token was supplied, or it is not live
            AuthConfigurationError: If no signing secret is configured
            InvalidTokenError: If signature, shape or expiry check fails
        """
        if not refresh_token:
            raise RevokedTokenError()
        self.tokens.require_secret()

        user = await self._owner_of(refresh_token)
        pair = self.tokens.issue_pair(str(user.id))
        if not await self.users.rotate_refresh_token(
            user.id, refresh_token, pair.refresh_token
        ):
            await self._revoke_all(user)
            raise RevokedTokenError()

        logger.info("refresh_token_rotated", user_id=str(user.id))
        return pair
