"""SQLAlchemy ORM models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cyberhunt.db.base import Base
from cyberhunt.utils.timestamps import utcnow


class Program(Base):
    """
    Bug bounty program owned by a company.

    company_id is an opaque user id from the identity store.
    """

    __tablename__ = "programs"
    __table_args__ = (Index("idx_programs_company", "company_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    company_id: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)


class Submission(Base):
    """
    Vulnerability report submitted by a researcher against a program.

    Local mirror of the submission store: immutable once created except for
    status/reward, which are mirrored back from review decisions.
    """

    __tablename__ = "submissions"
    __table_args__ = (
        Index("idx_submissions_program", "program_id"),
        Index("idx_submissions_reporter", "reporter_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(100), nullable=False)  # e.g. XSS, SQL Injection
    severity: Mapped[str] = mapped_column(String(20), nullable=False)  # SubmissionSeverity
    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False)
    program_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("programs.id", ondelete="RESTRICT"), nullable=False
    )
    reporter_id: Mapped[int] = mapped_column(Integer, nullable=False)
    reward: Mapped[int | None] = mapped_column(Integer, nullable=True)  # cents
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )

    # Relationships
    program: Mapped["Program"] = relationship()
