"""Pydantic schemas for the review audit log and event outbox."""

from datetime import datetime

from pydantic import BaseModel


class AuditEntryRead(BaseModel):
    id: int
    review_id: int | None
    submission_id: int | None
    actor_id: int | None
    action: str
    description: str | None
    from_status: str | None
    to_status: str | None
    details: dict | None
    created_at: datetime

    model_config = {"from_attributes": True}


class ReviewEventRead(BaseModel):
    id: int
    event_type: str
    review_id: int
    payload: dict
    created_at: datetime
    published_at: datetime | None

    model_config = {"from_attributes": True}
