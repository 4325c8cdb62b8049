"""SQLAlchemy ORM models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cyberhunt.db.base import Base
from cyberhunt.db.types import JSONType
from cyberhunt.utils.timestamps import utcnow


class TriageService(Base):
    """
    Company-configured triage offering.

    Bundles pricing (all prices in cents), response-time SLA and the
    auto-assignment toggle applied to new submissions on the company's
    programs.
    """

    __tablename__ = "triage_services"
    __table_args__ = (
        CheckConstraint(
            "price_per_report >= 0 AND monthly_price >= 0 AND annual_price >= 0",
            name="ck_triage_prices_non_negative",
        ),
        Index("idx_triage_services_company_active", "company_id", "is_active"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    company_id: Mapped[int] = mapped_column(Integer, nullable=False)
    service_name: Mapped[str] = mapped_column(String(200), nullable=False)
    service_type: Mapped[str] = mapped_column(String(30), nullable=False)
    pricing_model: Mapped[str] = mapped_column(String(20), nullable=False)
    price_per_report: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    monthly_price: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    annual_price: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    triage_level: Mapped[str] = mapped_column(String(20), default="standard", nullable=False)
    max_reports_per_month: Mapped[int] = mapped_column(Integer, default=50, nullable=False)
    response_time_hours: Mapped[int] = mapped_column(Integer, default=24, nullable=False)
    auto_assign_triage: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    included_services: Mapped[list[str]] = mapped_column(JSONType, default=list, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )


class TriageSubscription(Base):
    """Binds a company to a triage service with billing-cycle counters."""

    __tablename__ = "triage_subscriptions"
    __table_args__ = (
        Index("idx_triage_subscriptions_company_status", "company_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    company_id: Mapped[int] = mapped_column(Integer, nullable=False)
    triage_service_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("triage_services.id", ondelete="RESTRICT"), nullable=False
    )
    status: Mapped[str] = mapped_column(String(20), default="active", nullable=False)
    billing_cycle_start: Mapped[datetime] = mapped_column(nullable=False)
    next_billing_date: Mapped[datetime] = mapped_column(nullable=False)
    reports_processed: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_cost: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # cents
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )

    # Relationships
    service: Mapped["TriageService"] = relationship(lazy="joined")
