"""Review dashboard statistics."""

from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from cyberhunt.db.enums import ReviewPriority, ReviewStatus
from cyberhunt.db.models import Review


def _filtered(query, reviewer_id, date_from, date_to):
    if reviewer_id is not None:
        query = query.filter(Review.reviewer_id == reviewer_id)
    if date_from is not None:
        query = query.filter(Review.created_at >= date_from)
    if date_to is not None:
        query = query.filter(Review.created_at <= date_to)
    return query


def get_review_stats(
    db: Session,
    reviewer_id: int | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
) -> dict:
    """
    Counts per status and urgent priority, plus average review time.

    Average review time is in hours over completed reviews, measured from
    review_started (or creation when never started) to review_completed;
    None when nothing has been completed.
    """
    status_rows = _filtered(
        db.query(Review.status, func.count(Review.id)),
        reviewer_id, date_from, date_to,
    ).group_by(Review.status).all()
    by_status = {status: count for status, count in status_rows}

    priority_rows = _filtered(
        db.query(Review.priority, func.count(Review.id)),
        reviewer_id, date_from, date_to,
    ).group_by(Review.priority).all()
    by_priority = {priority: count for priority, count in priority_rows}

    completed = _filtered(
        db.query(Review.created_at, Review.review_started, Review.review_completed),
        reviewer_id, date_from, date_to,
    ).filter(Review.review_completed.isnot(None)).all()

    avg_hours = None
    if completed:
        total_seconds = sum(
            (done - (started or created)).total_seconds()
            for created, started, done in completed
        )
        avg_hours = round(total_seconds / len(completed) / 3600, 2)

    stats = {"total": sum(by_status.values())}
    for status in ReviewStatus:
        stats[status.value] = by_status.get(status.value, 0)
    stats["critical"] = by_priority.get(ReviewPriority.CRITICAL.value, 0)
    stats["high"] = by_priority.get(ReviewPriority.HIGH.value, 0)
    stats["avg_review_time_hours"] = avg_hours
    return stats
