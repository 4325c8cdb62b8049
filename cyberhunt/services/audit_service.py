"""Review audit trail - append-only record of workflow actions."""

from sqlalchemy.orm import Session

from cyberhunt.db.enums import ReviewAuditAction
from cyberhunt.db.models import Review, ReviewAuditLog


def log_action(
    db: Session,
    action: ReviewAuditAction,
    *,
    review: Review | None = None,
    review_id: int | None = None,
    submission_id: int | None = None,
    actor_id: int | None = None,
    description: str | None = None,
    from_status: str | None = None,
    to_status: str | None = None,
    details: dict | None = None,
) -> ReviewAuditLog:
    """
    Append an audit record.

    Args:
        db: Database session
        action: What happened (from ReviewAuditAction enum)
        review: Review the action applies to (fills review_id/submission_id)
        actor_id: User who performed the action (None for system)
        details: Changed field names and small scalar context; never free text

    Returns:
        The created audit entry
    """
    if review is not None:
        review_id = review.id
        submission_id = review.submission_id
    entry = ReviewAuditLog(
        review_id=review_id,
        submission_id=submission_id,
        actor_id=actor_id,
        action=action.value,
        description=description,
        from_status=from_status,
        to_status=to_status,
        details=details,
    )
    db.add(entry)
    db.flush()  # Don't commit - let caller control transaction
    return entry


def list_entries(
    db: Session,
    *,
    review_id: int | None = None,
    submission_id: int | None = None,
    limit: int = 100,
) -> list[ReviewAuditLog]:
    """Audit entries, newest first."""
    query = db.query(ReviewAuditLog)
    if review_id is not None:
        query = query.filter(ReviewAuditLog.review_id == review_id)
    if submission_id is not None:
        query = query.filter(ReviewAuditLog.submission_id == submission_id)
    return (
        query.order_by(ReviewAuditLog.created_at.desc(), ReviewAuditLog.id.desc())
        .limit(limit)
        .all()
    )
