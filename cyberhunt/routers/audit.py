"""Audit trail and event outbox endpoints (admin only)."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from cyberhunt.core.deps import get_db, require_admin, require_csrf_header
from cyberhunt.db.enums import ReviewEventType
from cyberhunt.schemas.audit import AuditEntryRead, ReviewEventRead
from cyberhunt.schemas.auth import UserSession
from cyberhunt.services import audit_service, review_events

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/audit", response_model=list[AuditEntryRead])
def list_audit(
    review_id: int | None = None,
    submission_id: int | None = None,
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return audit_service.list_entries(
        db, review_id=review_id, submission_id=submission_id, limit=limit
    )


@router.get("/events", response_model=list[ReviewEventRead])
def list_events(
    event_type: ReviewEventType | None = None,
    review_id: int | None = None,
    unpublished_only: bool = False,
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    """Outbox events in insertion order, for the payment and notification consumers."""
    return review_events.list_events(
        db,
        event_type=event_type,
        review_id=review_id,
        unpublished_only=unpublished_only,
        limit=limit,
    )


@router.post(
    "/events/{event_id}/ack",
    response_model=ReviewEventRead,
    dependencies=[Depends(require_csrf_header)],
)
def ack_event(
    event_id: int,
    session: UserSession = Depends(require_admin),
    db: Session = Depends(get_db),
):
    event = review_events.mark_published(db, event_id)
    db.commit()
    return event
