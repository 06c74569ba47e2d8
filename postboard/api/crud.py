"""Helpers shared by the resource routers."""

from uuid import UUID

from postboard.services.errors import MissingInputError, NotFoundError


def parse_item_id(item_id: str) -> UUID:
    """Parse a path id, answering 400 ``invalid id`` if it is not a UUID."""
    try:
        return UUID(item_id)
    except ValueError:
        raise MissingInputError("invalid id")


def require_item(item: dict | None, item_id: UUID) -> dict:
    if item is None:
        raise NotFoundError(f"item with id {item_id} not found")
    return item
