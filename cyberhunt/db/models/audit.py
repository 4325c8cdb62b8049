"""SQLAlchemy ORM models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from cyberhunt.db.base import Base
from cyberhunt.db.types import JSONType
from cyberhunt.utils.timestamps import utcnow


class ReviewAuditLog(Base):
    """
    Append-only audit trail of review workflow actions.

    Security:
    - Stores ids and status names, never comment bodies or notes
    - details holds changed field names and small scalar context only
    """

    __tablename__ = "review_audit_logs"
    __table_args__ = (
        Index("idx_review_audit_review_created", "review_id", "created_at"),
        Index("idx_review_audit_submission_created", "submission_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    review_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    submission_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    actor_id: Mapped[int | None] = mapped_column(Integer, nullable=True)  # None for system
    action: Mapped[str] = mapped_column(String(50), nullable=False)  # ReviewAuditAction
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    from_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    to_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    details: Mapped[dict | None] = mapped_column(JSONType, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
