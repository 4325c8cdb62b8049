"""Tests for in-app notifications."""

import pytest

from cyberhunt.db.enums import NotificationType
from cyberhunt.services import notification_service
from cyberhunt.services.workflow_errors import NotFoundError


def test_list_and_unread_count(db):
    for i in range(3):
        notification_service.create_notification(
            db, 7, NotificationType.COMMENT, f"note {i}"
        )
    notification_service.create_notification(db, 8, NotificationType.COMMENT, "other")
    db.commit()

    items = notification_service.list_notifications(db, 7)
    assert [n.title for n in items] == ["note 2", "note 1", "note 0"]
    assert notification_service.get_unread_count(db, 7) == 3


def test_mark_read_is_owner_scoped(db):
    note = notification_service.create_notification(db, 7, NotificationType.MENTION, "hi")
    db.commit()

    with pytest.raises(NotFoundError):
        notification_service.mark_read(db, 8, note.id)

    read = notification_service.mark_read(db, 7, note.id)
    first_read_at = read.read_at
    db.commit()
    assert first_read_at is not None
    assert notification_service.mark_read(db, 7, note.id).read_at == first_read_at
    assert notification_service.get_unread_count(db, 7) == 0
    assert notification_service.list_notifications(db, 7, unread_only=True) == []
