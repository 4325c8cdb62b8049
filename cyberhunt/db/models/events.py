"""SQLAlchemy ORM models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from cyberhunt.db.base import Base
from cyberhunt.db.types import JSONType
from cyberhunt.utils.timestamps import utcnow


class ReviewEvent(Base):
    """
    Transactional outbox of workflow events.

    Written in the same transaction as the review mutation that caused it,
    then drained by the external payment and notification consumers, which
    mark rows published.
    """

    __tablename__ = "review_events"
    __table_args__ = (
        Index("idx_review_events_type_published", "event_type", "published_at"),
        Index("idx_review_events_review", "review_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    event_type: Mapped[str] = mapped_column(String(50), nullable=False)  # ReviewEventType
    review_id: Mapped[int] = mapped_column(Integer, nullable=False)
    payload: Mapped[dict] = mapped_column(JSONType, default=dict, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    published_at: Mapped[datetime | None] = mapped_column(nullable=True)
