"""User record and public user view models."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class AccountKind(str, Enum):
    """How a user authenticates. (email, kind) is unique."""

    LOCAL = "local"
    FEDERATED = "federated"


class UserRecord(BaseModel):
    """A stored user, including credential material.

    Never returned from an endpoint directly; convert with ``to_public()``.
    ``refresh_tokens`` is the sole authority on which refresh tokens are live.
    """

    id: UUID
    email: str
    account_kind: AccountKind
    name: Optional[str] = None
    password_hash: Optional[str] = None
    refresh_tokens: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    def to_public(self) -> "UserPublic":
        return UserPublic(
            id=self.id,
            email=self.email,
            name=self.name,
            account_kind=self.account_kind,
        )


class UserPublic(BaseModel):
    """User fields safe to expose over the API."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID = Field(alias="_id")
    email: str
    name: Optional[str] = None
    account_kind: AccountKind = Field(alias="accountKind")
