from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict


class RelationshipType(str, Enum):
    FOLLOWERS = "followers"
    FOLLOWING = "following"

    @property
    def title(self) -> str:
        return self.value.capitalize()


class _LoginKeyed(BaseModel):
    """Immutable record whose identity is the account login alone."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    login: str

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, _LoginKeyed) or type(self) is not type(other):
            return NotImplemented
        return self.login == other.login

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.login))


class UserProfile(_LoginKeyed):
    avatar_url: str
    name: Optional[str] = None
    bio: Optional[str] = None
    followers: int
    following: int
    followers_url: str
    following_url: str

    def relationship_count(self, relationship: RelationshipType) -> int:
        if relationship is RelationshipType.FOLLOWERS:
            return self.followers
        return self.following


class UserSummary(_LoginKeyed):
    avatar_url: str


class SearchResultSet(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    items: Tuple[UserSummary, ...]


__all__ = ["RelationshipType", "SearchResultSet", "UserProfile", "UserSummary"]
