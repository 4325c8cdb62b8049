"""Pydantic schemas for review comments."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from cyberhunt.db.enums import CommentType


class CommentCreate(BaseModel):
    """Request to add a comment. Content may contain basic rich-text HTML."""
    model_config = ConfigDict(extra="forbid")

    content: str = Field(..., min_length=1, max_length=20000)
    comment_type: CommentType = CommentType.INTERNAL
    mentions: list[int] = Field(default_factory=list)


class CommentRead(BaseModel):
    id: int
    review_id: int
    author_id: int
    author_name: str | None
    content: str
    comment_type: CommentType
    is_resolved: bool
    resolved_by: int | None
    resolved_at: datetime | None
    mentions: list[int]
    created_at: datetime

    model_config = {"from_attributes": True}


class PublicCommentCreate(BaseModel):
    """Company reply on a triage report thread; always public."""
    model_config = ConfigDict(extra="forbid")

    content: str = Field(..., min_length=1, max_length=20000)
