"""User listing endpoints."""

from fastapi import APIRouter, Depends

from postboard.api.crud import parse_item_id
from postboard.api.dependencies import get_user_service
from postboard.models.user import UserPublic
from postboard.services.errors import NotFoundError
from postboard.services.user_service import UserService

router = APIRouter(prefix="/user", tags=["Users"])


@router.get("")
async def list_users(users: UserService = Depends(get_user_service)) -> list[UserPublic]:
    """List users without password hashes or refresh tokens."""
    return [user.to_public() for user in await users.list_users()]


@router.get("/{item_id}")
async def get_user(
    item_id: str,
    users: UserService = Depends(get_user_service),
) -> UserPublic:
    user_id = parse_item_id(item_id)
    user = await users.get_by_id(user_id)
    if user is None:
        raise NotFoundError(f"user with id {user_id} not found")
    return user.to_public()
