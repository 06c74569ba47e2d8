"""Local account registration and password verification."""

import asyncio
from typing import Optional

import bcrypt
import structlog

from postboard.config import Settings
from postboard.models.user import AccountKind, UserRecord
from postboard.services.errors import MissingInputError, WrongCredentialsError
from postboard.services.user_service import UserService

logger = structlog.get_logger(__name__)

# bcrypt only reads the first 72 bytes of its input
BCRYPT_MAX_PASSWORD_BYTES = 72


class AuthService:
    """Service for local credentials: bcrypt hashing and email/password login."""

    def __init__(self, users: UserService, settings: Settings):
        self.users = users
        self.settings = settings

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt with a fresh salt.

        Args:
            password: Plain-text password to hash

        Returns:
            Bcrypt hash string
        """
        salt = bcrypt.gensalt(rounds=self.settings.bcrypt_rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a password against a bcrypt hash.

        Passwords over bcrypt's input limit never verify.
        """
        encoded = password.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
            return False
        return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))

    async def register(
        self, email: Optional[str], password: Optional[str], name: Optional[str] = None
    ) -> UserRecord:
        """Create a local account.

        Hashing runs in a worker thread so the event loop keeps serving
        other requests.

        Returns:
            The created UserRecord

        Raises:
            MissingInputError: If email or password is absent or password is too long
            DuplicateUserError: If a local account with this email exists
        """
        if not email or not password:
            raise MissingInputError("missing email or password")
        if len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            raise MissingInputError("password too long")

        password_hash = await asyncio.to_thread(self.hash_password, password)
        user = await self.users.create_user(
            email=email,
            account_kind=AccountKind.LOCAL,
            name=name,
            password_hash=password_hash,
        )

        logger.info("user_registered", user_id=str(user.id))
        return user

    async def authenticate(
        self, email: Optional[str], password: Optional[str]
    ) -> UserRecord:
        """Return the local user matching email and password.

        Raises:
            WrongCredentialsError: For a missing field, unknown email or bad
                password alike
        """
        if not email or not password:
            raise WrongCredentialsError()

        user = await self.users.get_by_email(email, AccountKind.LOCAL)
        if user is None or not user.password_hash:
            logger.info("login_rejected", reason="unknown_user")
            raise WrongCredentialsError()

        valid = await asyncio.to_thread(
            self.verify_password, password, user.password_hash
        )
        if not valid:
            logger.info("login_rejected", reason="bad_password", user_id=str(user.id))
            raise WrongCredentialsError()

        return user
