"""API tests for /me/notifications."""

import pytest


@pytest.mark.asyncio
async def test_reviewer_sees_assignment_notification(
    analyst_client, db, make_review, make_reviewer
):
    from cyberhunt.services import assignment_service

    reviewer = make_reviewer(user_id=200)
    review = make_review()
    assignment_service.assign(db, review.id, reviewer.id, 300)
    db.commit()

    resp = await analyst_client.get("/me/notifications")
    assert resp.status_code == 200
    data = resp.json()
    assert data["unread_count"] == 1
    note = data["items"][0]
    assert note["type"] == "assignment"
    assert note["review_id"] == review.id

    read = await analyst_client.post(f"/me/notifications/{note['id']}/read")
    assert read.status_code == 200
    assert read.json()["read_at"] is not None

    after = await analyst_client.get("/me/notifications", params={"unread_only": True})
    assert after.json() == {"items": [], "unread_count": 0}


@pytest.mark.asyncio
async def test_cannot_read_someone_elses_notification(hacker_client, db):
    from cyberhunt.db.enums import NotificationType
    from cyberhunt.services import notification_service

    note = notification_service.create_notification(db, 999, NotificationType.COMMENT, "x")
    db.commit()

    resp = await hacker_client.post(f"/me/notifications/{note.id}/read")
    assert resp.status_code == 404
