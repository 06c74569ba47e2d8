"""Signing and verification of access and refresh tokens."""

import secrets
from datetime import datetime, timedelta, timezone

import jwt
import structlog

from postboard.config import Settings
from postboard.models.auth import TokenPair
from postboard.services.errors import AuthConfigurationError, InvalidTokenError

logger = structlog.get_logger(__name__)

JWT_ALGORITHM = "HS256"

# Upper bound for the per-pair nonce
NONCE_RANGE = 10_000_000_000


class TokenService:
    """Issues and verifies HS256 JWTs for one configured secret.

    Access and refresh tokens share a signing scheme and differ only in
    lifetime. Verification proves signature and expiry; whether a refresh
    token is still live is a store question answered by SessionService.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def require_secret(self) -> str:
        """Return the signing secret.

        Raises:
            AuthConfigurationError: If no secret is configured
        """
        secret = self.settings.token_secret
        if not secret:
            raise AuthConfigurationError()
        return secret

    def _encode(self, subject_id: str, nonce: int, now: datetime, ttl_seconds: int) -> str:
        payload = {
            "sub": subject_id,
            "nonce": nonce,
            "iat": now,
            "exp": now + timedelta(seconds=ttl_seconds),
        }
        return jwt.encode(payload, self.require_secret(), algorithm=JWT_ALGORITHM)

    def issue_pair(self, subject_id: str) -> TokenPair:
        """Create an access/refresh token pair for a subject.

        Both tokens carry the same random nonce, so two pairs issued in the
        same second for the same subject still differ.

        Args:
            subject_id: User id placed in the ``sub`` claim

        Returns:
            TokenPair with encoded access and refresh tokens

        Raises:
            AuthConfigurationError: If no secret is configured
        """
        self.require_secret()
        nonce = secrets.randbelow(NONCE_RANGE)
        now = datetime.now(timezone.utc)

        pair = TokenPair(
            access_token=self._encode(
                subject_id, nonce, now, self.settings.access_token_ttl_seconds
            ),
            refresh_token=self._encode(
                subject_id, nonce, now, self.settings.refresh_token_ttl_seconds
            ),
        )
        logger.debug(
            "token_pair_issued",
            user_id=subject_id,
            access_ttl_seconds=self.settings.access_token_ttl_seconds,
            refresh_ttl_seconds=self.settings.refresh_token_ttl_seconds,
        )
        return pair

    def verify(self, token: str) -> str:
        """Check signature and expiry and return the subject id.

        Raises:
            AuthConfigurationError: If no secret is configured
            InvalidTokenError: If the token is malformed, tampered or expired
        """
        secret = self.require_secret()
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            logger.info("token_expired")
            raise InvalidTokenError()
        except jwt.InvalidTokenError as e:
            logger.info("token_rejected", reason=str(e))
            raise InvalidTokenError()

        return payload["sub"]
