"""Google sign-in: ID token verification and federated account provisioning."""

import asyncio
from typing import Optional

import structlog
from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token as google_id_token

from postboard.config import Settings
from postboard.models.auth import FederatedIdentity
from postboard.models.user import AccountKind, UserRecord
from postboard.services.errors import (
    AuthConfigurationError,
    DuplicateUserError,
    InvalidAssertionError,
)
from postboard.services.user_service import UserService

logger = structlog.get_logger(__name__)


class GoogleAuthService:
    """Maps verified Google identities onto federated user records."""

    def __init__(self, users: UserService, settings: Settings):
        self.users = users
        self.settings = settings

    def _verify_id_token(self, credential: str, client_id: str) -> dict:
        # Fetches Google's public certs over HTTP; call from a worker thread.
        request_adapter = google_requests.Request()
        return google_id_token.verify_oauth2_token(
            credential,
            request_adapter,
            client_id,
        )

    async def verify_assertion(self, credential: Optional[str]) -> FederatedIdentity:
        """Verify a Google ID token and extract email and name.

        Signature, issuer, audience and expiry are checked by google-auth
        against the configured client id.

        Raises:
            AuthConfigurationError: If no Google client id is configured
            InvalidAssertionError: If the token is missing or fails verification
        """
        if not credential:
            raise InvalidAssertionError()

        client_id = self.settings.google_client_id
        if not client_id:
            raise AuthConfigurationError("missing google client configuration")

        try:
            claims = await asyncio.to_thread(
                self._verify_id_token, credential, client_id
            )
        except (ValueError, google_exceptions.GoogleAuthError) as e:
            logger.info("google_assertion_rejected", reason=str(e))
            raise InvalidAssertionError()

        email = claims.get("email")
        if not email:
            logger.info("google_assertion_rejected", reason="missing_email")
            raise InvalidAssertionError()

        return FederatedIdentity(email=email, name=claims.get("name") or email)

    async def login_or_register(self, identity: FederatedIdentity) -> UserRecord:
        """Find the federated user for an identity, creating it on first login.

        A concurrent first login may win the insert; the loser re-reads the
        winner's record instead of failing.
        """
        user = await self.users.get_by_email(identity.email, AccountKind.FEDERATED)
        if user is not None:
            return user

        try:
            user = await self.users.create_user(
                email=identity.email,
                account_kind=AccountKind.FEDERATED,
                name=identity.name,
            )
        except DuplicateUserError:
            user = await self.users.get_by_email(identity.email, AccountKind.FEDERATED)
            if user is None:
                raise
            logger.info("federated_user_create_race_lost", user_id=str(user.id))
            return user

        logger.info("federated_user_provisioned", user_id=str(user.id))
        return user
