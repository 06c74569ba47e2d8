"""Post API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from postboard.api.crud import parse_item_id, require_item
from postboard.api.dependencies import get_post_service, require_user
from postboard.models.post import Post, PostCreate, PostUpdate
from postboard.services.crud_service import CrudService
from postboard.services.errors import NotFoundError

router = APIRouter(prefix="/post", tags=["Posts"])


@router.get("")
async def list_posts(
    owner: Optional[str] = Query(default=None, description="Filter by owner id"),
    posts: CrudService = Depends(get_post_service),
) -> list[Post]:
    rows = await posts.list({"owner": owner})
    return [Post.model_validate(row) for row in rows]


@router.get("/{item_id}")
async def get_post(
    item_id: str,
    posts: CrudService = Depends(get_post_service),
) -> Post:
    post_id = parse_item_id(item_id)
    return Post.model_validate(require_item(await posts.get(post_id), post_id))


@router.post("", status_code=201)
async def create_post(
    request: PostCreate,
    user_id: str = Depends(require_user),
    posts: CrudService = Depends(get_post_service),
) -> Post:
    """Create a post owned by the authenticated user."""
    row = await posts.create({"message": request.message, "owner": user_id})
    return Post.model_validate(row)


@router.put("/{item_id}")
async def update_post(
    item_id: str,
    request: PostUpdate,
    user_id: str = Depends(require_user),
    posts: CrudService = Depends(get_post_service),
) -> Post:
    post_id = parse_item_id(item_id)
    row = await posts.update(post_id, {"message": request.message})
    return Post.model_validate(require_item(row, post_id))


@router.delete("/{item_id}", response_class=PlainTextResponse)
async def delete_post(
    item_id: str,
    user_id: str = Depends(require_user),
    posts: CrudService = Depends(get_post_service),
) -> str:
    post_id = parse_item_id(item_id)
    if not await posts.delete(post_id):
        raise NotFoundError(f"item with id {post_id} not found")
    return f"item with id {post_id} deleted"
