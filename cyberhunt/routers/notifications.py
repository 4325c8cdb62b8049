"""
Notifications Router - /me/notifications endpoints.

Provides notification listing and read status.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from cyberhunt.core.deps import get_current_session, get_db, require_csrf_header
from cyberhunt.schemas.auth import UserSession
from cyberhunt.schemas.notification import NotificationListResponse, NotificationRead
from cyberhunt.services import notification_service

router = APIRouter()


@router.get("/notifications", response_model=NotificationListResponse)
def list_notifications(
    unread_only: bool = Query(False),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Get user's notifications (newest first)."""
    items = notification_service.list_notifications(
        db, session.user_id, unread_only=unread_only, limit=limit, offset=offset
    )
    return NotificationListResponse(
        items=[NotificationRead.model_validate(n) for n in items],
        unread_count=notification_service.get_unread_count(db, session.user_id),
    )


@router.post(
    "/notifications/{notification_id}/read",
    response_model=NotificationRead,
    dependencies=[Depends(require_csrf_header)],
)
def mark_read(
    notification_id: int,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Mark a single notification as read."""
    notification = notification_service.mark_read(db, session.user_id, notification_id)
    db.commit()
    return notification
