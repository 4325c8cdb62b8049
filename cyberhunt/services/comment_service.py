"""Review comment thread - append-only collaboration log."""

import logging

import nh3
from sqlalchemy import func, update
from sqlalchemy.orm import Session

from cyberhunt.core.structured_logging import build_log_context
from cyberhunt.db.enums import CommentType, ReviewAuditAction, ReviewEventType
from cyberhunt.db.models import ReviewComment
from cyberhunt.services import audit_service, notification_service, review_events, review_service
from cyberhunt.services.workflow_errors import (
    AlreadyResolvedError,
    NotFoundError,
    ValidationError,
)
from cyberhunt.utils.timestamps import not_before, utcnow

logger = logging.getLogger(__name__)

# Allowed HTML tags for rich text comments
ALLOWED_TAGS = {"p", "br", "strong", "em", "ul", "ol", "li", "a", "blockquote", "code", "pre"}
ALLOWED_ATTRIBUTES = {"a": {"href"}}


def sanitize_html(html: str) -> str:
    """Sanitize HTML to prevent XSS, allowing only safe rich text tags."""
    return nh3.clean(html, tags=ALLOWED_TAGS, attributes=ALLOWED_ATTRIBUTES)


def _is_blank(html: str) -> bool:
    text = nh3.clean(html, tags=set()).replace("&nbsp;", " ")
    return not text.strip()


def add_comment(
    db: Session,
    review_id: int,
    author_id: int,
    content: str,
    comment_type: CommentType | str = CommentType.INTERNAL,
    *,
    author_name: str | None = None,
    mentions: list[int] | None = None,
) -> ReviewComment:
    """
    Append a comment to a review thread.

    Content is sanitized first; a comment with no visible text is rejected.
    Mentioned users and the assigned reviewer are notified.
    """
    review = review_service.require_review(db, review_id)

    try:
        comment_type = CommentType(getattr(comment_type, "value", comment_type))
    except ValueError:
        raise ValidationError(f"Unknown comment type '{comment_type}'")

    clean_content = sanitize_html(content or "")
    if _is_blank(clean_content):
        raise ValidationError("Comment content cannot be empty")

    # New comments always sort after existing ones, even if the clock stepped back
    latest = (
        db.query(func.max(ReviewComment.created_at))
        .filter(ReviewComment.review_id == review_id)
        .scalar()
    )
    mention_ids = sorted(set(mentions or []))

    comment = ReviewComment(
        review_id=review_id,
        author_id=author_id,
        author_name=author_name,
        content=clean_content,
        comment_type=comment_type.value,
        mentions=mention_ids,
        created_at=not_before(utcnow(), latest, review.created_at),
    )
    db.add(comment)
    db.flush()

    audit_service.log_action(
        db,
        ReviewAuditAction.COMMENT_ADDED,
        review=review,
        actor_id=author_id,
        details={"comment_id": comment.id, "comment_type": comment.comment_type},
    )
    review_events.emit(
        db,
        ReviewEventType.COMMENT_ADDED,
        review,
        {
            "comment_id": comment.id,
            "author_id": author_id,
            "comment_type": comment.comment_type,
        },
    )

    notified = {author_id}
    mentioned = [uid for uid in mention_ids if uid not in notified]
    notification_service.notify_mentioned(db, review, mentioned, author_name)
    notified.update(mentioned)
    reviewer_user_id = review.reviewer_user_id
    if reviewer_user_id is not None and reviewer_user_id not in notified:
        notification_service.notify_comment_added(db, review, reviewer_user_id)

    logger.info(
        "Comment added",
        extra=build_log_context(actor_id=author_id, review_id=review_id),
    )
    return comment


def resolve_comment(db: Session, comment_id: int, resolver_id: int) -> ReviewComment:
    """
    Mark a comment resolved. Resolution never reverts.

    Raises:
        NotFoundError: unknown comment
        AlreadyResolvedError: comment already resolved (including by a concurrent request)
    """
    now = utcnow()
    result = db.execute(
        update(ReviewComment)
        .where(ReviewComment.id == comment_id, ReviewComment.is_resolved.is_(False))
        .values(is_resolved=True, resolved_by=resolver_id, resolved_at=now)
        .execution_options(synchronize_session=False)
    )
    comment = db.get(ReviewComment, comment_id, populate_existing=True)
    if comment is None:
        raise NotFoundError(f"Comment {comment_id} not found")
    if result.rowcount != 1:
        raise AlreadyResolvedError(f"Comment {comment_id} is already resolved")

    review = review_service.require_review(db, comment.review_id)
    audit_service.log_action(
        db,
        ReviewAuditAction.COMMENT_RESOLVED,
        review=review,
        actor_id=resolver_id,
        details={"comment_id": comment.id},
    )
    return comment


def get_comment(db: Session, comment_id: int) -> ReviewComment:
    comment = db.get(ReviewComment, comment_id)
    if not comment:
        raise NotFoundError(f"Comment {comment_id} not found")
    return comment


def list_comments(
    db: Session,
    review_id: int,
    *,
    comment_type: CommentType | str | None = None,
) -> list[ReviewComment]:
    """Comments in creation order (created_at, then id)."""
    review_service.require_review(db, review_id)
    query = db.query(ReviewComment).filter(ReviewComment.review_id == review_id)
    if comment_type is not None:
        query = query.filter(
            ReviewComment.comment_type == getattr(comment_type, "value", comment_type)
        )
    return query.order_by(ReviewComment.created_at, ReviewComment.id).all()
