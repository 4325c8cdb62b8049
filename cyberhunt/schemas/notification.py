"""Pydantic schemas for notifications."""

from datetime import datetime

from pydantic import BaseModel

from cyberhunt.db.enums import NotificationType


class NotificationRead(BaseModel):
    id: int
    type: NotificationType
    title: str
    body: str | None
    review_id: int | None
    read_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class NotificationListResponse(BaseModel):
    items: list[NotificationRead]
    unread_count: int
