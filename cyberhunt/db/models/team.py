"""SQLAlchemy ORM models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from cyberhunt.db.base import Base
from cyberhunt.db.types import JSONType
from cyberhunt.utils.timestamps import utcnow


class TeamMember(Base):
    """
    Staff reviewer with bounded concurrent-assignment capacity.

    current_assignments is only ever changed through conditional UPDATEs in
    assignment_service so concurrent assigns cannot push it past
    max_assignments.
    """

    __tablename__ = "team_members"
    __table_args__ = (
        CheckConstraint("max_assignments > 0", name="ck_team_max_positive"),
        CheckConstraint(
            "current_assignments >= 0 AND current_assignments <= max_assignments",
            name="ck_team_capacity_bounds",
        ),
        Index("idx_team_members_active", "is_active"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    username: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[str] = mapped_column(String(50), default="analyst", nullable=False)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True)
    specializations: Mapped[list[str]] = mapped_column(JSONType, default=list, nullable=False)
    max_assignments: Mapped[int] = mapped_column(Integer, default=10, nullable=False)
    current_assignments: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )

    @property
    def has_capacity(self) -> bool:
        return self.is_active and self.current_assignments < self.max_assignments
