"""Generic CRUD over a single PostgreSQL table."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID, uuid4

import structlog

from postboard.database import get_pool

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Resource:
    """Describes a table the CRUD service operates on.

    Table and column names are fixed here and interpolated into SQL; values
    always travel as bind parameters.

    Attributes:
        name: Resource name used in log events
        table: Table name
        columns: Writable columns, besides id and created_at
        filters: Columns that ``list`` accepts as equality filters
    """

    name: str
    table: str
    columns: tuple[str, ...]
    filters: tuple[str, ...] = ()

    @property
    def select_columns(self) -> str:
        return ", ".join(("id", *self.columns, "created_at"))


POSTS = Resource(
    name="post",
    table="posts",
    columns=("message", "owner"),
    filters=("owner",),
)

COMMENTS = Resource(
    name="comment",
    table="comments",
    columns=("message", "owner", "post_id"),
    filters=("owner", "post_id"),
)


class CrudService:
    """Create, read, update, delete and filter rows of one resource."""

    def __init__(self, resource: Resource):
        self.resource = resource

    async def list(self, filters: Optional[dict[str, Any]] = None) -> list[dict]:
        """Return rows matching all non-None filters, oldest first."""
        conditions = []
        params: list = []

        for column, value in (filters or {}).items():
            if value is None:
                continue
            if column not in self.resource.filters:
                raise ValueError(f"{self.resource.name} cannot be filtered by {column}")
            params.append(value)
            conditions.append(f"{column} = ${len(params)}")

        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        pool = await get_pool()

        async with pool.acquire() as conn:
            rows = await conn.fetch(
                f"""
                SELECT {self.resource.select_columns}
                FROM {self.resource.table}
                {where_clause}
                ORDER BY created_at ASC
                """,
                *params,
            )

        return [dict(row) for row in rows]

    async def get(self, item_id: UUID) -> Optional[dict]:
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {self.resource.select_columns} FROM {self.resource.table} WHERE id = $1",
                item_id,
            )

        return dict(row) if row is not None else None

    async def create(self, values: dict[str, Any]) -> dict:
        """Insert a row from ``values``, which must cover every writable column."""
        missing = [c for c in self.resource.columns if c not in values]
        if missing:
            raise ValueError(f"missing {self.resource.name} fields: {', '.join(missing)}")

        item_id = uuid4()
        now = datetime.now(timezone.utc)
        columns = ("id", *self.resource.columns, "created_at")
        params = [item_id, *(values[c] for c in self.resource.columns), now]
        placeholders = ", ".join(f"${i}" for i in range(1, len(params) + 1))

        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                INSERT INTO {self.resource.table} ({', '.join(columns)})
                VALUES ({placeholders})
                RETURNING {self.resource.select_columns}
                """,
                *params,
            )

        logger.info(f"{self.resource.name}_created", item_id=str(item_id))
        return dict(row)

    async def update(self, item_id: UUID, values: dict[str, Any]) -> Optional[dict]:
        """Update the given non-None columns.

        Returns:
            The updated row, or None if no row has this id
        """
        set_clauses = []
        params: list = []

        for column in self.resource.columns:
            value = values.get(column)
            if value is None:
                continue
            params.append(value)
            set_clauses.append(f"{column} = ${len(params)}")

        if not set_clauses:
            # Nothing to update; just return the current row
            return await self.get(item_id)

        params.append(item_id)

        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                UPDATE {self.resource.table}
                SET {', '.join(set_clauses)}
                WHERE id = ${len(params)}
                RETURNING {self.resource.select_columns}
                """,
                *params,
            )

        if row is None:
            return None

        logger.info(f"{self.resource.name}_updated", item_id=str(item_id))
        return dict(row)

    async def delete(self, item_id: UUID) -> bool:
        """Delete a row. Returns False if no row has this id."""
        pool = await get_pool()

        async with pool.acquire() as conn:
            result = await conn.execute(
                f"DELETE FROM {self.resource.table} WHERE id = $1",
                item_id,
            )

        deleted = result == "DELETE 1"

        if deleted:
            logger.info(f"{self.resource.name}_deleted", item_id=str(item_id))
        else:
            logger.warning(f"{self.resource.name}_delete_not_found", item_id=str(item_id))

        return deleted
