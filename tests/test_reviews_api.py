"""API tests for the review workflow endpoints."""

import pytest

ANALYST_USER_ID = 200


@pytest.mark.asyncio
async def test_reviews_require_session(client):
    resp = await client.get("/reviews")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_reviews_reject_non_staff(hacker_client):
    resp = await hacker_client.get("/reviews")
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_mutation_requires_csrf_header(admin_client, make_submission):
    submission = make_submission()
    resp = await admin_client.post(
        "/reviews",
        json={"submission_id": submission.id},
        headers={"X-Requested-With": ""},
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_bearer_clients_skip_csrf(client, admin_auth, make_submission):
    submission = make_submission()
    resp = await client.post(
        "/reviews",
        json={"submission_id": submission.id},
        headers={"Authorization": f"Bearer {admin_auth.token}"},
    )
    assert resp.status_code == 201, resp.text


@pytest.mark.asyncio
async def test_create_review_and_duplicate(admin_client, make_submission):
    submission = make_submission()
    resp = await admin_client.post(
        "/reviews",
        json={"submission_id": submission.id, "tags": ["xss", " xss ", "stored"]},
    )
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["status"] == "pending"
    assert data["reviewer_id"] is None
    assert data["category"] == "XSS"
    assert data["tags"] == ["stored", "xss"]
    assert data["submission_title"] == submission.title

    dup = await admin_client.post("/reviews", json={"submission_id": submission.id})
    assert dup.status_code == 409
    assert dup.json()["error"] == "duplicate_review"
    assert "detail" in dup.json()


@pytest.mark.asyncio
async def test_create_review_rejects_unknown_fields(admin_client, make_submission):
    submission = make_submission()
    resp = await admin_client.post(
        "/reviews", json={"submission_id": submission.id, "reviewer_id": 1}
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_full_review_flow(admin_client, make_submission, make_reviewer):
    submission = make_submission()
    reviewer = make_reviewer(max_assignments=1)

    created = await admin_client.post("/reviews", json={"submission_id": submission.id})
    review_id = created.json()["id"]

    assigned = await admin_client.post(
        f"/reviews/{review_id}/assign", json={"reviewer_id": reviewer.id}
    )
    assert assigned.status_code == 200, assigned.text
    assert assigned.json()["status"] == "assigned"
    assert assigned.json()["reviewer_username"] == reviewer.username

    started = await admin_client.patch(f"/reviews/{review_id}", json={"status": "in_review"})
    assert started.status_code == 200, started.text
    assert started.json()["review_started"] is not None

    final = await admin_client.post(
        f"/reviews/{review_id}/finalize",
        json={"decision": "accept", "decision_reason": "Valid", "actual_reward": 5000},
    )
    assert final.status_code == 200, final.text
    data = final.json()
    assert data["status"] == "approved"
    assert data["decision"] == "accept"
    assert data["actual_reward"] == 5000
    assert data["actual_reward_display"] == "50.00 USD"

    again = await admin_client.post(
        f"/reviews/{review_id}/finalize", json={"decision": "reject"}
    )
    assert again.status_code == 409
    assert again.json()["error"] == "invalid_transition"

    events = await admin_client.get("/events", params={"event_type": "reward_issued"})
    assert events.status_code == 200
    assert [e["payload"]["amount"] for e in events.json()] == [5000]


@pytest.mark.asyncio
async def test_illegal_transition_is_409(admin_client, make_review):
    review = make_review()
    resp = await admin_client.patch(f"/reviews/{review.id}", json={"status": "in_review"})
    assert resp.status_code == 409
    assert resp.json()["error"] == "invalid_transition"


@pytest.mark.asyncio
async def test_capacity_exceeded_is_409(admin_client, make_review, make_reviewer):
    reviewer = make_reviewer(max_assignments=1)
    first, second = make_review(), make_review()

    ok = await admin_client.post(f"/reviews/{first.id}/assign", json={"reviewer_id": reviewer.id})
    assert ok.status_code == 200
    full = await admin_client.post(f"/reviews/{second.id}/assign", json={"reviewer_id": reviewer.id})
    assert full.status_code == 409
    assert full.json()["error"] == "capacity_exceeded"


@pytest.mark.asyncio
async def test_auto_assign_without_candidates(admin_client, make_review):
    review = make_review()
    resp = await admin_client.post(f"/reviews/{review.id}/auto-assign")
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_unknown_review_is_404(admin_client):
    resp = await admin_client.get("/reviews/9999")
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"


@pytest.mark.asyncio
async def test_list_filters_and_completed_alias(admin_client, db, make_review, make_reviewer):
    from cyberhunt.schemas.review import ReviewUpdate
    from cyberhunt.services import assignment_service, decision_service, review_service

    reviewer = make_reviewer()
    done = make_review(title="Reflected XSS on login")
    make_review(title="Open redirect")
    assignment_service.assign(db, done.id, reviewer.id, 300)
    review_service.update_review(db, done.id, ReviewUpdate(status="in_review"), 300)
    decision_service.finalize(db, done.id, "accept", "ok", 300, actual_reward=100)
    db.commit()

    resp = await admin_client.get("/reviews", params={"status": "completed"})
    assert resp.status_code == 200
    assert [r["id"] for r in resp.json()["items"]] == [done.id]

    resp = await admin_client.get("/reviews", params={"q": "redirect"})
    assert resp.json()["total"] == 1

    resp = await admin_client.get("/reviews", params={"per_page": 1})
    data = resp.json()
    assert data["total"] == 2
    assert data["pages"] == 2
    assert len(data["items"]) == 1

    bad = await admin_client.get("/reviews", params={"status": "archived"})
    assert bad.status_code == 422
    assert bad.json()["error"] == "validation_error"


@pytest.mark.asyncio
async def test_analyst_sees_and_decides_only_own_reviews(
    analyst_client, db, make_review, make_reviewer
):
    from cyberhunt.services import assignment_service

    me = make_reviewer(username="analyst", user_id=ANALYST_USER_ID)
    other = make_reviewer(username="someone-else")
    mine = make_review()
    theirs = make_review()
    assignment_service.assign(db, mine.id, me.id, 300)
    assignment_service.assign(db, theirs.id, other.id, 300)
    db.commit()

    listed = await analyst_client.get("/reviews")
    assert [r["id"] for r in listed.json()["items"]] == [mine.id]

    forbidden = await analyst_client.patch(
        f"/reviews/{theirs.id}", json={"status": "in_review"}
    )
    assert forbidden.status_code == 403

    allowed = await analyst_client.patch(f"/reviews/{mine.id}", json={"status": "in_review"})
    assert allowed.status_code == 200, allowed.text

    stats = await analyst_client.get("/reviews/stats")
    assert stats.status_code == 200
    assert stats.json()["total"] == 1
    assert stats.json()["in_review"] == 1


@pytest.mark.asyncio
async def test_stats_for_analyst_without_membership(analyst_client):
    resp = await analyst_client.get("/reviews/stats")
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_comment_thread(admin_client, make_review):
    review = make_review()

    first = await admin_client.post(
        f"/reviews/{review.id}/comments", json={"content": "<p>Looks valid</p>"}
    )
    assert first.status_code == 201, first.text
    second = await admin_client.post(
        f"/reviews/{review.id}/comments",
        json={"content": "Reply sent", "comment_type": "public"},
    )
    assert second.status_code == 201

    listed = await admin_client.get(f"/reviews/{review.id}/comments")
    assert [c["id"] for c in listed.json()] == [first.json()["id"], second.json()["id"]]

    public = await admin_client.get(
        f"/reviews/{review.id}/comments", params={"comment_type": "public"}
    )
    assert [c["id"] for c in public.json()] == [second.json()["id"]]

    resolved = await admin_client.post(f"/comments/{first.json()['id']}/resolve")
    assert resolved.status_code == 200
    assert resolved.json()["is_resolved"] is True

    again = await admin_client.post(f"/comments/{first.json()['id']}/resolve")
    assert again.status_code == 409
    assert again.json()["error"] == "already_resolved"

    blank = await admin_client.post(
        f"/reviews/{review.id}/comments", json={"content": "<script>x</script>"}
    )
    assert blank.status_code == 422


@pytest.mark.asyncio
async def test_audit_trail_is_admin_only(admin_client, analyst_client, make_review):
    review = make_review()

    resp = await admin_client.get("/audit", params={"review_id": review.id})
    assert resp.status_code == 200
    assert [e["action"] for e in resp.json()] == ["review_created"]

    denied = await analyst_client.get("/audit")
    assert denied.status_code == 403
