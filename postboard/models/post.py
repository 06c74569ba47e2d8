"""Post and comment models."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    """New post. ``owner`` is always taken from the access token."""

    message: str = Field(..., min_length=1)


class PostUpdate(BaseModel):
    message: Optional[str] = Field(default=None, min_length=1)


class Post(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: UUID = Field(alias="_id")
    message: str
    owner: str
    created_at: datetime = Field(alias="createdAt")


class CommentCreate(BaseModel):
    """New comment on a post. ``owner`` is always taken from the access token."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., min_length=1)
    post_id: str = Field(..., min_length=1, alias="postId")


class CommentUpdate(BaseModel):
    message: Optional[str] = Field(default=None, min_length=1)


class Comment(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: UUID = Field(alias="_id")
    message: str
    owner: str
    post_id: str = Field(alias="postId")
    created_at: datetime = Field(alias="createdAt")
