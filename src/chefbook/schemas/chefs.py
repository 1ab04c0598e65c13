from __future__ import annotations


from pydantic import Field

from ..models.chefs import Chef
from .common import CamelModel, UtcDateTime


class ChefCreateIn(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=255)


class ChefUpdateIn(CamelModel):
    name: str = Field(min_length=1, max_length=255)


class ChefLoginIn(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class ChefOut(CamelModel):
    id: int
    name: str
    username: str
    created_at: UtcDateTime
    updated_at: UtcDateTime

    @classmethod
    def from_model(cls, chef: Chef) -> "ChefOut":
        return cls(
            id=chef.id,
            name=chef.name,
            username=chef.username,
            created_at=chef.created_at,
            updated_at=chef.updated_at,
        )


class ChefSessionOut(CamelModel):
    """What a client keeps about the logged-in chef."""

    id: int
    name: str
    username: str
