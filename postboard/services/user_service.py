"""User record storage backed by PostgreSQL."""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

import structlog

from postboard.database import get_pool
from postboard.models.user import AccountKind, UserRecord
from postboard.services.errors import DuplicateUserError

logger = structlog.get_logger(__name__)

USER_COLUMNS = (
    "id, email, account_kind, name, password_hash, refresh_tokens, created_at, updated_at"
)


def _parse_user_id(user_id: UUID | str) -> Optional[UUID]:
    """Coerce a subject id to UUID; None if it is not one."""
    if isinstance(user_id, UUID):
        return user_id
    try:
        return UUID(str(user_id))
    except ValueError:
        return None


def _row_to_user(row) -> UserRecord:
    return UserRecord(
        id=row["id"],
        email=row["email"],
        account_kind=AccountKind(row["account_kind"]),
        name=row["name"],
        password_hash=row["password_hash"],
        refresh_tokens=list(row["refresh_tokens"] or []),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class UserService:
    """Persistence for user records and their live refresh tokens.

    Every refresh-token mutation is a single UPDATE, so per-row atomicity
    comes from PostgreSQL rather than a read-modify-write in Python.
    """

    async def create_user(
        self,
        email: str,
        account_kind: AccountKind,
        name: Optional[str] = None,
        password_hash: Optional[str] = None,
    ) -> UserRecord:
        """Insert a new user record.

        Args:
            email: Account email
            account_kind: Local or federated
            name: Display name
            password_hash: Bcrypt hash, local accounts only

        Returns:
            The created UserRecord

        Raises:
            DuplicateUserError: If (email, account_kind) already exists
        """
        user_id = uuid4()
        now = datetime.now(timezone.utc)

        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                INSERT INTO users (id, email, account_kind, name, password_hash, refresh_tokens, created_at, updated_at)
                VALUES ($1, $2, $3, $4, $5, '{{}}', $6, $7)
                ON CONFLICT (email, account_kind) DO NOTHING
                RETURNING {USER_COLUMNS}
                """,
                user_id,
                email,
                account_kind.value,
                name,
                password_hash,
                now,
                now,
            )

        if row is None:
            logger.info(
                "user_create_conflict",
                account_kind=account_kind.value,
            )
            raise DuplicateUserError()

        logger.info(
            "user_created",
            user_id=str(user_id),
            account_kind=account_kind.value,
        )
        return _row_to_user(row)

    async def get_by_email(
        self, email: str, account_kind: AccountKind
    ) -> Optional[UserRecord]:
        """Get the user with this email and account kind, if any."""
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                SELECT {USER_COLUMNS}
                FROM users
                WHERE email = $1 AND account_kind = $2
                """,
                email,
                account_kind.value,
            )

        if row is None:
            return None
        return _row_to_user(row)

    async def get_by_id(self, user_id: UUID | str) -> Optional[UserRecord]:
        """Get a user by id. Ids that are not UUIDs match nothing."""
        parsed = _parse_user_id(user_id)
        if parsed is None:
            return None

        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {USER_COLUMNS} FROM users WHERE id = $1",
                parsed,
            )

        if row is None:
            return None
        return _row_to_user(row)

    async def list_users(self) -> list[UserRecord]:
        """Return all users ordered by creation date."""
        pool = await get_pool()

        async with pool.acquire() as conn:
            rows = await conn.fetch(
                f"SELECT {USER_COLUMNS} FROM users ORDER BY created_at ASC"
            )

        return [_row_to_user(row) for row in rows]

    async def add_refresh_token(self, user_id: UUID, token: str) -> None:
        """Append a newly issued refresh token to the user's live set."""
        pool = await get_pool()

        async with pool.acquire() as conn:
            await conn.execute(
                """
                UPDATE users
                SET refresh_tokens = array_append(refresh_tokens, $2), updated_at = $3
                WHERE id = $1
                """,
                user_id,
                token,
                datetime.now(timezone.utc),
            )

    async def consume_refresh_token(self, user_id: UUID, token: str) -> bool:
        """Remove a refresh token only if it is currently live.

        Of two concurrent calls with the same token, at most one returns True.

        Returns:
            True if the token was present and has been removed
        """
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                UPDATE users
                SET refresh_tokens = array_remove(refresh_tokens, $2), updated_at = $3
                WHERE id = $1 AND $2 = ANY(refresh_tokens)
                RETURNING id
                """,
                user_id,
                token,
                datetime.now(timezone.utc),
            )

        return row is not None

    async def rotate_refresh_token(self, user_id: UUID, old_token: str, new_token: str) -> bool:
        """Swap a live refresh token for a new one in a single UPDATE.

        The new token is appended only if the old one was still live, so a
        concurrent revocation can never be followed by a stray append.

        Returns:
            True if ``old_token`` was live and has been replaced
        """
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                UPDATE users
                SET refresh_tokens = array_append(array_remove(refresh_tokens, $2), $3),
                    updated_at = $4
                WHERE id = $1 AND $2 = ANY(refresh_tokens)
                RETURNING id
                """,
                user_id,
                old_token,
                new_token,
                datetime.now(timezone.utc),
            )

        return row is not None

    async def clear_refresh_tokens(self, user_id: UUID) -> None:
        """Revoke every refresh token of a user."""
        pool = await get_pool()

        async with pool.acquire() as conn:
            result = await conn.execute(
                """
                UPDATE users
                SET refresh_tokens = '{}', updated_at = $2
                WHERE id = $1
                """,
                user_id,
                datetime.now(timezone.utc),
            )

        logger.info(
            "all_refresh_tokens_revoked",
            user_id=str(user_id),
            result=result,
        )
