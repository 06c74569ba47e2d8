"""Comment API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from postboard.api.crud import parse_item_id, require_item
from postboard.api.dependencies import get_comment_service, require_user
from postboard.models.post import Comment, CommentCreate, CommentUpdate
from postboard.services.crud_service import CrudService
from postboard.services.errors import NotFoundError

router = APIRouter(prefix="/comments", tags=["Comments"])


@router.get("")
async def list_comments(
    owner: Optional[str] = Query(default=None, description="Filter by owner id"),
    post_id: Optional[str] = Query(default=None, alias="postId"),
    comments: CrudService = Depends(get_comment_service),
) -> list[Comment]:
    rows = await comments.list({"owner": owner, "post_id": post_id})
    return [Comment.model_validate(row) for row in rows]


@router.get("/post/{post_id}")
async def list_comments_for_post(
    post_id: str,
    comments: CrudService = Depends(get_comment_service),
) -> list[Comment]:
    rows = await comments.list({"post_id": post_id})
    return [Comment.model_validate(row) for row in rows]


@router.get("/{item_id}")
async def get_comment(
    item_id: str,
    comments: CrudService = Depends(get_comment_service),
) -> Comment:
    comment_id = parse_item_id(item_id)
    return Comment.model_validate(require_item(await comments.get(comment_id), comment_id))


@router.post("", status_code=201)
async def create_comment(
    request: CommentCreate,
    user_id: str = Depends(require_user),
    comments: CrudService = Depends(get_comment_service),
) -> Comment:
    """Comment on a post as the authenticated user."""
    row = await comments.create(
        {"message": request.message, "owner": user_id, "post_id": request.post_id}
    )
    return Comment.model_validate(row)


@router.put("/{item_id}")
async def update_comment(
    item_id: str,
    request: CommentUpdate,
    user_id: str = Depends(require_user),
    comments: CrudService = Depends(get_comment_service),
) -> Comment:
    comment_id = parse_item_id(item_id)
    row = await comments.update(comment_id, {"message": request.message})
    return Comment.model_validate(require_item(row, comment_id))


@router.delete("/{item_id}", response_class=PlainTextResponse)
async def delete_comment(
    item_id: str,
    user_id: str = Depends(require_user),
    comments: CrudService = Depends(get_comment_service),
) -> str:
    comment_id = parse_item_id(item_id)
    if not await comments.delete(comment_id):
        raise NotFoundError(f"item with id {comment_id} not found")
    return f"item with id {comment_id} deleted"
