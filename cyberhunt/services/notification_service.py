"""Notification service - in-app notifications for workflow participants."""

from sqlalchemy.orm import Session

from cyberhunt.db.enums import NotificationType, ReviewDecision
from cyberhunt.db.models import Notification, Review
from cyberhunt.services.workflow_errors import NotFoundError
from cyberhunt.utils.money import format_cents
from cyberhunt.utils.timestamps import utcnow


def create_notification(
    db: Session,
    user_id: int,
    type: NotificationType,
    title: str,
    body: str | None = None,
    review_id: int | None = None,
) -> Notification:
    """Create a notification in the caller's transaction."""
    notification = Notification(
        user_id=user_id,
        type=type.value,
        title=title,
        body=body,
        review_id=review_id,
    )
    db.add(notification)
    db.flush()
    return notification


def list_notifications(
    db: Session,
    user_id: int,
    unread_only: bool = False,
    limit: int = 20,
    offset: int = 0,
) -> list[Notification]:
    """Get notifications for user."""
    query = db.query(Notification).filter(Notification.user_id == user_id)

    if unread_only:
        query = query.filter(Notification.read_at.is_(None))

    return (
        query.order_by(Notification.created_at.desc(), Notification.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


def get_unread_count(db: Session, user_id: int) -> int:
    """Get count of unread notifications."""
    return db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.read_at.is_(None),
    ).count()


def mark_read(db: Session, user_id: int, notification_id: int) -> Notification:
    """Mark a notification as read (scoped to its owner)."""
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user_id,
    ).first()
    if not notification:
        raise NotFoundError(f"Notification {notification_id} not found")

    if not notification.read_at:
        notification.read_at = utcnow()
        db.flush()
    return notification


# =============================================================================
# Notification Triggers (called from workflow services)
# =============================================================================


def notify_review_assigned(db: Session, review: Review, reviewer_user_id: int) -> None:
    """Notify a reviewer when a review is assigned to them."""
    create_notification(
        db=db,
        user_id=reviewer_user_id,
        type=NotificationType.ASSIGNMENT,
        title=f"Review #{review.id} assigned to you",
        body=review.submission_title,
        review_id=review.id,
    )


def notify_mentioned(db: Session, review: Review, user_ids: list[int], author_name: str | None) -> None:
    """Notify users mentioned in a comment."""
    for user_id in user_ids:
        create_notification(
            db=db,
            user_id=user_id,
            type=NotificationType.MENTION,
            title=f"You were mentioned on review #{review.id}",
            body=f"{author_name or 'A reviewer'} mentioned you",
            review_id=review.id,
        )


def notify_comment_added(db: Session, review: Review, recipient_user_id: int) -> None:
    """Notify the assigned reviewer of a new comment."""
    create_notification(
        db=db,
        user_id=recipient_user_id,
        type=NotificationType.COMMENT,
        title=f"New comment on review #{review.id}",
        review_id=review.id,
    )


def notify_decision(db: Session, review: Review, reporter_id: int) -> None:
    """Tell the reporting researcher how their submission was decided."""
    if review.decision == ReviewDecision.ACCEPT.value:
        title = f"Submission accepted: {review.submission_title}"
        body = f"Reward: {format_cents(review.actual_reward)}"
    else:
        title = f"Submission closed: {review.submission_title}"
        body = f"Decision: {review.decision}"
    create_notification(
        db=db,
        user_id=reporter_id,
        type=NotificationType.DECISION,
        title=title[:255],
        body=body,
        review_id=review.id,
    )
