from datetime import datetime
from typing import List, Literal, Optional
from pydantic import Field

from ._base import AuthorPreview, CamelModel, PyObjectId

GroupCategory = Literal["study", "sports", "cultural", "academic", "hobby", "professional", "other"]


class GroupCreateRequest(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=1000)
    category: GroupCategory = "other"
    privacy: Literal["public", "private", "restricted"] = "public"
    rules: List[str] = Field(default_factory=list, max_length=20)
    tags: List[str] = Field(default_factory=list, max_length=20)


class GroupOut(CamelModel):
    id: PyObjectId
    creator: Optional[AuthorPreview] = None
    name: str
    description: str
    category: str
    privacy: str
    members_count: int = 0
    is_member: bool = False
    rules: List[str] = []
    tags: List[str] = []
    created_at: Optional[datetime] = None


class GroupResponse(CamelModel):
    group: GroupOut


class GroupsResponse(CamelModel):
    groups: List[GroupOut]


class MembershipResponse(CamelModel):
    message: str
    members_count: int
    is_member: bool
