"""SQLAlchemy ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING

from datetime import datetime

from sqlalchemy import (
    Boolean,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cyberhunt.db.base import Base
from cyberhunt.db.types import JSONType
from cyberhunt.utils.timestamps import utcnow

if TYPE_CHECKING:
    from cyberhunt.db.models import Submission, TeamMember

OPEN_REVIEW_PREDICATE = "status NOT IN ('approved', 'rejected')"


class Review(Base):
    """
    Workflow wrapper tracking the triage lifecycle of one submission.

    Serves both the admin moderation queue and the company-facing triage
    queue (see `queue`). Rows are never deleted, only transitioned.

    Invariants (enforced in services):
    - decision is set iff status is approved/rejected
    - actual_reward is set only when decision == accept
    - review_completed >= review_started >= created_at
    """

    __tablename__ = "reviews"
    __table_args__ = (
        Index("idx_reviews_status_priority", "status", "priority"),
        Index("idx_reviews_reviewer", "reviewer_id"),
        Index("idx_reviews_company", "company_id"),
        # One open review per submission
        Index(
            "uq_reviews_open_submission",
            "submission_id",
            unique=True,
            postgresql_where=text(OPEN_REVIEW_PREDICATE),
            sqlite_where=text(OPEN_REVIEW_PREDICATE),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    submission_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("submissions.id", ondelete="RESTRICT"), nullable=False
    )
    queue: Mapped[str] = mapped_column(String(20), default="moderation", nullable=False)
    company_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    triage_service_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("triage_services.id", ondelete="SET NULL"), nullable=True
    )

    # Workflow state
    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False)
    priority: Mapped[str] = mapped_column(String(20), default="medium", nullable=False)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    severity: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # Decision (terminal states only)
    decision: Mapped[str | None] = mapped_column(String(30), nullable=True)
    decision_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    internal_notes: Mapped[str | None] = mapped_column(Text, nullable=True)  # staff only
    public_response: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Money in minor units (cents)
    estimated_reward: Mapped[int | None] = mapped_column(Integer, nullable=True)
    actual_reward: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Assignment
    reviewer_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("team_members.id", ondelete="RESTRICT"), nullable=True
    )
    assigned_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    assigned_at: Mapped[datetime | None] = mapped_column(nullable=True)
    due_date: Mapped[datetime | None] = mapped_column(nullable=True)
    tags: Mapped[list[str]] = mapped_column(JSONType, default=list, nullable=False)

    # Lifecycle stamps
    review_started: Mapped[datetime | None] = mapped_column(nullable=True)
    review_completed: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )

    # Optimistic concurrency: concurrent writers to one review cannot both win
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    # Relationships
    submission: Mapped["Submission"] = relationship(lazy="joined")
    reviewer: Mapped["TeamMember | None"] = relationship(lazy="joined")
    comments: Mapped[list["ReviewComment"]] = relationship(
        back_populates="review",
        order_by=lambda: (ReviewComment.created_at, ReviewComment.id),
    )

    @property
    def reviewer_username(self) -> str | None:
        return self.reviewer.username if self.reviewer else None

    @property
    def reviewer_user_id(self) -> int | None:
        return self.reviewer.user_id if self.reviewer else None

    @property
    def submission_title(self) -> str | None:
        return self.submission.title if self.submission else None


class ReviewComment(Base):
    """
    Collaboration thread entry on a review.

    Append-only: only the resolution fields may change, and only from
    unresolved to resolved.
    """

    __tablename__ = "review_comments"
    __table_args__ = (
        Index("idx_review_comments_review_created", "review_id", "created_at", "id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    review_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("reviews.id", ondelete="RESTRICT"), nullable=False
    )
    author_id: Mapped[int] = mapped_column(Integer, nullable=False)
    author_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    comment_type: Mapped[str] = mapped_column(String(20), default="internal", nullable=False)
    is_resolved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    resolved_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(nullable=True)
    mentions: Mapped[list[int]] = mapped_column(JSONType, default=list, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    # Relationships
    review: Mapped["Review"] = relationship(back_populates="comments")
