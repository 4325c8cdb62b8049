"""Transactional outbox for review workflow events.

Rows are written in the caller's transaction, so an event exists if and only
if the mutation that produced it committed. External consumers (payments,
notification delivery) poll `list_events` and acknowledge with
`mark_published`.
"""

import logging

from sqlalchemy.orm import Session

from cyberhunt.core.structured_logging import build_log_context
from cyberhunt.db.enums import ReviewEventType
from cyberhunt.db.models import Review, ReviewEvent
from cyberhunt.services.workflow_errors import NotFoundError
from cyberhunt.utils.timestamps import utcnow

logger = logging.getLogger(__name__)


def emit(
    db: Session,
    event_type: ReviewEventType,
    review: Review,
    payload: dict | None = None,
) -> ReviewEvent:
    """Write one outbox event for a review."""
    event = ReviewEvent(
        event_type=event_type.value,
        review_id=review.id,
        payload={"review_id": review.id, **(payload or {})},
    )
    db.add(event)
    db.flush()
    logger.info(
        "Review event %s queued",
        event_type.value,
        extra=build_log_context(review_id=review.id),
    )
    return event


def list_events(
    db: Session,
    *,
    event_type: ReviewEventType | str | None = None,
    review_id: int | None = None,
    unpublished_only: bool = False,
    limit: int = 100,
) -> list[ReviewEvent]:
    """Outbox events in insertion order."""
    query = db.query(ReviewEvent)
    if event_type is not None:
        type_str = event_type.value if isinstance(event_type, ReviewEventType) else event_type
        query = query.filter(ReviewEvent.event_type == type_str)
    if review_id is not None:
        query = query.filter(ReviewEvent.review_id == review_id)
    if unpublished_only:
        query = query.filter(ReviewEvent.published_at.is_(None))
    return query.order_by(ReviewEvent.id).limit(limit).all()


def mark_published(db: Session, event_id: int) -> ReviewEvent:
    """Acknowledge an event. Idempotent: the first publish time is kept."""
    event = db.get(ReviewEvent, event_id)
    if not event:
        raise NotFoundError(f"Event {event_id} not found")
    if event.published_at is None:
        event.published_at = utcnow()
        db.flush()
    return event
