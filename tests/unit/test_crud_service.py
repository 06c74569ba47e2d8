"""Unit tests for the generic CrudService with a mocked asyncpg pool."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from postboard.services.crud_service import COMMENTS, POSTS, CrudService

POOL_TARGET = "postboard.services.crud_service.get_pool"


@pytest.fixture
def patched_pool(mock_pool):
    pool, conn = mock_pool
    with patch(POOL_TARGET, new_callable=AsyncMock) as mock_get_pool:
        mock_get_pool.return_value = pool
        yield conn


def _post_row(**overrides):
    row = {
        "id": uuid4(),
        "message": "hello",
        "owner": "user-1",
        "created_at": datetime.now(timezone.utc),
    }
    row.update(overrides)
    return row


class TestList:
    """Tests for list."""

    async def test_without_filters_has_no_where_clause(self, patched_pool):
        patched_pool.fetch.return_value = [_post_row()]

        rows = await CrudService(POSTS).list()

        sql = patched_pool.fetch.call_args[0][0]
        assert "FROM posts" in sql
        assert "WHERE" not in sql
        assert rows[0]["message"] == "hello"

    async def test_none_filters_are_skipped(self, patched_pool):
        patched_pool.fetch.return_value = []
        await CrudService(COMMENTS).list({"owner": None, "post_id": "p1"})

        args = patched_pool.fetch.call_args[0]
        assert "WHERE post_id = $1" in args[0]
        assert args[1:] == ("p1",)

    async def test_combined_filters(self, patched_pool):
        patched_pool.fetch.return_value = []
        await CrudService(COMMENTS).list({"owner": "u1", "post_id": "p1"})

        args = patched_pool.fetch.call_args[0]
        assert "owner = $1 AND post_id = $2" in args[0]
        assert args[1:] == ("u1", "p1")

    async def test_unknown_filter_rejected(self, patched_pool):
        with pytest.raises(ValueError):
            await CrudService(POSTS).list({"message": "x"})


class TestCreate:
    """Tests for create."""

    async def test_inserts_all_columns(self, patched_pool):
        patched_pool.fetchrow.return_value = _post_row()

        await CrudService(POSTS).create({"message": "hello", "owner": "user-1"})

        args = patched_pool.fetchrow.call_args[0]
        assert "INSERT INTO posts (id, message, owner, created_at)" in args[0]
        assert "VALUES ($1, $2, $3, $4)" in args[0]
        assert args[2:4] == ("hello", "user-1")

    async def test_missing_column_rejected(self, patched_pool):
        with pytest.raises(ValueError, match="owner"):
            await CrudService(POSTS).create({"message": "hello"})
        patched_pool.fetchrow.assert_not_awaited()


class TestUpdate:
    """Tests for update."""

    async def test_sets_only_given_columns(self, patched_pool):
        item_id = uuid4()
        patched_pool.fetchrow.return_value = _post_row(id=item_id, message="edited")

        row = await CrudService(POSTS).update(item_id, {"message": "edited", "owner": None})

        args = patched_pool.fetchrow.call_args[0]
        assert "SET message = $1" in args[0]
        assert "owner" not in args[0].split("RETURNING")[0]
        assert "WHERE id = $2" in args[0]
        assert args[1:] == ("edited", item_id)
        assert row["message"] == "edited"

    async def test_nothing_to_update_returns_current(self, patched_pool):
        item_id = uuid4()
        patched_pool.fetchrow.return_value = _post_row(id=item_id)

        row = await CrudService(POSTS).update(item_id, {})

        assert "SELECT" in patched_pool.fetchrow.call_args[0][0]
        assert row["id"] == item_id

    async def test_missing_row(self, patched_pool):
        patched_pool.fetchrow.return_value = None
        assert await CrudService(POSTS).update(uuid4(), {"message": "x"}) is None


class TestDelete:
    """Tests for delete."""

    async def test_deleted(self, patched_pool):
        patched_pool.execute.return_value = "DELETE 1"
        assert await CrudService(POSTS).delete(uuid4()) is True

    async def test_not_found(self, patched_pool):
        patched_pool.execute.return_value = "DELETE 0"
        assert await CrudService(POSTS).delete(uuid4()) is False
