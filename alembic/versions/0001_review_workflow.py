"""Review workflow baseline - programs, submissions, reviews, team, triage

Revision ID: 0001_review_workflow
Revises:
Create Date: 2026-10-19

Creates the submission mirror, review workflow, audit/outbox and triage
catalog tables.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0001_review_workflow'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSON = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")
TS = sa.DateTime(timezone=True)
OPEN_REVIEW_PREDICATE = "status NOT IN ('approved', 'rejected')"


def upgrade() -> None:
    """Create review workflow tables."""

    # ==========================================================================
    # Programs & submissions
    # ==========================================================================
    op.create_table(
        "programs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", TS, nullable=False),
    )
    op.create_index("idx_programs_company", "programs", ["company_id"])

    op.create_table(
        "submissions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("type", sa.String(100), nullable=False),
        sa.Column("severity", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column(
            "program_id",
            sa.Integer(),
            sa.ForeignKey("programs.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("reporter_id", sa.Integer(), nullable=False),
        sa.Column("reward", sa.Integer(), nullable=True),
        sa.Column("created_at", TS, nullable=False),
        sa.Column("updated_at", TS, nullable=False),
    )
    op.create_index("idx_submissions_program", "submissions", ["program_id"])
    op.create_index("idx_submissions_reporter", "submissions", ["reporter_id"])

    # ==========================================================================
    # Review team
    # ==========================================================================
    op.create_table(
        "team_members",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), nullable=False, unique=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("role", sa.String(50), nullable=False, server_default="analyst"),
        sa.Column("department", sa.String(100), nullable=True),
        sa.Column("specializations", JSON, nullable=False),
        sa.Column("max_assignments", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("current_assignments", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", TS, nullable=False),
        sa.Column("updated_at", TS, nullable=False),
        sa.CheckConstraint("max_assignments > 0", name="ck_team_max_positive"),
        sa.CheckConstraint(
            "current_assignments >= 0 AND current_assignments <= max_assignments",
            name="ck_team_capacity_bounds",
        ),
    )
    op.create_index("idx_team_members_active", "team_members", ["is_active"])

    # ==========================================================================
    # Triage catalog
    # ==========================================================================
    op.create_table(
        "triage_services",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("service_name", sa.String(200), nullable=False),
        sa.Column("service_type", sa.String(30), nullable=False),
        sa.Column("pricing_model", sa.String(20), nullable=False),
        sa.Column("price_per_report", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("monthly_price", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("annual_price", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("triage_level", sa.String(20), nullable=False, server_default="standard"),
        sa.Column("max_reports_per_month", sa.Integer(), nullable=False, server_default="50"),
        sa.Column("response_time_hours", sa.Integer(), nullable=False, server_default="24"),
        sa.Column("auto_assign_triage", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("included_services", JSON, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", TS, nullable=False),
        sa.Column("updated_at", TS, nullable=False),
        sa.CheckConstraint(
            "price_per_report >= 0 AND monthly_price >= 0 AND annual_price >= 0",
            name="ck_triage_prices_non_negative",
        ),
    )
    op.create_index(
        "idx_triage_services_company_active", "triage_services", ["company_id", "is_active"]
    )

    op.create_table(
        "triage_subscriptions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column(
            "triage_service_id",
            sa.Integer(),
            sa.ForeignKey("triage_services.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("billing_cycle_start", TS, nullable=False),
        sa.Column("next_billing_date", TS, nullable=False),
        sa.Column("reports_processed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_cost", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", TS, nullable=False),
        sa.Column("updated_at", TS, nullable=False),
    )
    op.create_index(
        "idx_triage_subscriptions_company_status",
        "triage_subscriptions",
        ["company_id", "status"],
    )

    # ==========================================================================
    # Reviews & comments
    # ==========================================================================
    op.create_table(
        "reviews",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "submission_id",
            sa.Integer(),
            sa.ForeignKey("submissions.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("queue", sa.String(20), nullable=False, server_default="moderation"),
        sa.Column("company_id", sa.Integer(), nullable=True),
        sa.Column(
            "triage_service_id",
            sa.Integer(),
            sa.ForeignKey("triage_services.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("priority", sa.String(20), nullable=False, server_default="medium"),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("severity", sa.String(20), nullable=True),
        sa.Column("decision", sa.String(30), nullable=True),
        sa.Column("decision_reason", sa.Text(), nullable=True),
        sa.Column("internal_notes", sa.Text(), nullable=True),
        sa.Column("public_response", sa.Text(), nullable=True),
        sa.Column("estimated_reward", sa.Integer(), nullable=True),
        sa.Column("actual_reward", sa.Integer(), nullable=True),
        sa.Column(
            "reviewer_id",
            sa.Integer(),
            sa.ForeignKey("team_members.id", ondelete="RESTRICT"),
            nullable=True,
        ),
        sa.Column("assigned_by", sa.Integer(), nullable=True),
        sa.Column("assigned_at", TS, nullable=True),
        sa.Column("due_date", TS, nullable=True),
        sa.Column("tags", JSON, nullable=False),
        sa.Column("review_started", TS, nullable=True),
        sa.Column("review_completed", TS, nullable=True),
        sa.Column("created_at", TS, nullable=False),
        sa.Column("updated_at", TS, nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
    )
    op.create_index("idx_reviews_status_priority", "reviews", ["status", "priority"])
    op.create_index("idx_reviews_reviewer", "reviews", ["reviewer_id"])
    op.create_index("idx_reviews_company", "reviews", ["company_id"])
    op.create_index(
        "uq_reviews_open_submission",
        "reviews",
        ["submission_id"],
        unique=True,
        postgresql_where=sa.text(OPEN_REVIEW_PREDICATE),
        sqlite_where=sa.text(OPEN_REVIEW_PREDICATE),
    )

    op.create_table(
        "review_comments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "review_id",
            sa.Integer(),
            sa.ForeignKey("reviews.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("author_id", sa.Integer(), nullable=False),
        sa.Column("author_name", sa.String(100), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("comment_type", sa.String(20), nullable=False, server_default="internal"),
        sa.Column("is_resolved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("resolved_by", sa.Integer(), nullable=True),
        sa.Column("resolved_at", TS, nullable=True),
        sa.Column("mentions", JSON, nullable=False),
        sa.Column("created_at", TS, nullable=False),
    )
    op.create_index(
        "idx_review_comments_review_created",
        "review_comments",
        ["review_id", "created_at", "id"],
    )

    # ==========================================================================
    # Audit trail, event outbox, notifications
    # ==========================================================================
    op.create_table(
        "review_audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("review_id", sa.Integer(), nullable=True),
        sa.Column("submission_id", sa.Integer(), nullable=True),
        sa.Column("actor_id", sa.Integer(), nullable=True),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("from_status", sa.String(20), nullable=True),
        sa.Column("to_status", sa.String(20), nullable=True),
        sa.Column("details", JSON, nullable=True),
        sa.Column("created_at", TS, nullable=False),
    )
    op.create_index(
        "idx_review_audit_review_created", "review_audit_logs", ["review_id", "created_at"]
    )
    op.create_index(
        "idx_review_audit_submission_created",
        "review_audit_logs",
        ["submission_id", "created_at"],
    )

    op.create_table(
        "review_events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("event_type", sa.String(50), nullable=False),
        sa.Column("review_id", sa.Integer(), nullable=False),
        sa.Column("payload", JSON, nullable=False),
        sa.Column("created_at", TS, nullable=False),
        sa.Column("published_at", TS, nullable=True),
    )
    op.create_index(
        "idx_review_events_type_published", "review_events", ["event_type", "published_at"]
    )
    op.create_index("idx_review_events_review", "review_events", ["review_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("body", sa.Text(), nullable=True),
        sa.Column("review_id", sa.Integer(), nullable=True),
        sa.Column("read_at", TS, nullable=True),
        sa.Column("created_at", TS, nullable=False),
    )
    op.create_index(
        "idx_notif_user_unread", "notifications", ["user_id", "read_at", "created_at"]
    )


def downgrade() -> None:
    """Drop review workflow tables."""
    op.drop_table("notifications")
    op.drop_table("review_events")
    op.drop_table("review_audit_logs")
    op.drop_table("review_comments")
    op.drop_table("reviews")
    op.drop_table("triage_subscriptions")
    op.drop_table("triage_services")
    op.drop_table("team_members")
    op.drop_table("submissions")
    op.drop_table("programs")
