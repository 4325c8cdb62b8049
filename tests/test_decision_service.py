"""Tests for terminal decisions and reward recording."""

import pytest

from cyberhunt.db.models import Notification, ReviewEvent, Submission
from cyberhunt.schemas.review import ReviewUpdate
from cyberhunt.services import assignment_service, decision_service, review_service
from cyberhunt.services.workflow_errors import (
    InvalidTransitionError,
    InvariantViolationError,
    ValidationError,
)

ACTOR = 300


def _in_review(db, make_review, make_reviewer, **reviewer_kwargs):
    review = make_review()
    reviewer = make_reviewer(**reviewer_kwargs)
    assignment_service.assign(db, review.id, reviewer.id, ACTOR)
    review_service.update_review(db, review.id, ReviewUpdate(status="in_review"), ACTOR)
    db.commit()
    return review, reviewer


def test_accept_round_trip(db, make_submission, make_reviewer):
    submission = make_submission()
    reviewer = make_reviewer(max_assignments=1)

    review = review_service.create_review(db, submission.id, ACTOR)
    assignment_service.assign(db, review.id, reviewer.id, ACTOR)
    review_service.update_review(db, review.id, ReviewUpdate(status="in_review"), ACTOR)
    decision_service.finalize(db, review.id, "accept", "Valid and impactful", ACTOR, actual_reward=5000)
    db.commit()

    assert review.status == "approved"
    assert review.decision == "accept"
    assert review.actual_reward == 5000
    assert review.review_completed >= review.review_started >= review.created_at

    events = db.query(ReviewEvent).filter(ReviewEvent.event_type == "reward_issued").all()
    assert len(events) == 1
    assert events[0].payload["amount"] == 5000
    assert events[0].payload["reporter_id"] == submission.reporter_id
    assert events[0].payload["currency"] == "USD"

    db.refresh(submission)
    assert submission.status == "accepted"
    assert submission.reward == 5000
    db.refresh(reviewer)
    assert reviewer.current_assignments == 0

    decision_note = (
        db.query(Notification)
        .filter(Notification.user_id == submission.reporter_id, Notification.type == "decision")
        .one()
    )
    assert "50.00 USD" in decision_note.body


@pytest.mark.parametrize("decision", ["reject", "duplicate", "invalid", "needs_clarification"])
def test_non_accept_decisions_reject(db, make_review, make_reviewer, decision):
    review, _ = _in_review(db, make_review, make_reviewer)

    decision_service.finalize(db, review.id, decision, "reason", ACTOR)
    db.commit()

    assert review.status == "rejected"
    assert review.decision == decision
    assert review.actual_reward is None
    assert db.get(Submission, review.submission_id).status == "rejected"
    types = [e.event_type for e in db.query(ReviewEvent).filter(ReviewEvent.review_id == review.id)]
    assert "reward_issued" not in types
    assert types.count("review_closed") == 1


def test_accept_requires_reward(db, make_review, make_reviewer):
    review, _ = _in_review(db, make_review, make_reviewer)
    with pytest.raises(InvariantViolationError):
        decision_service.finalize(db, review.id, "accept", None, ACTOR)


def test_accept_rejects_negative_reward(db, make_review, make_reviewer):
    review, _ = _in_review(db, make_review, make_reviewer)
    with pytest.raises(ValidationError):
        decision_service.finalize(db, review.id, "accept", None, ACTOR, actual_reward=-1)


def test_accept_allows_zero_reward(db, make_review, make_reviewer):
    review, _ = _in_review(db, make_review, make_reviewer)
    decision_service.finalize(db, review.id, "accept", "thanks", ACTOR, actual_reward=0)
    db.commit()
    assert review.actual_reward == 0


def test_reject_forbids_reward(db, make_review, make_reviewer):
    review, _ = _in_review(db, make_review, make_reviewer)
    with pytest.raises(InvariantViolationError):
        decision_service.finalize(db, review.id, "reject", None, ACTOR, actual_reward=100)


def test_unknown_decision(db, make_review, make_reviewer):
    review, _ = _in_review(db, make_review, make_reviewer)
    with pytest.raises(ValidationError):
        decision_service.finalize(db, review.id, "maybe", None, ACTOR)


def test_finalize_requires_in_review(db, make_review):
    review = make_review()
    with pytest.raises(InvalidTransitionError):
        decision_service.finalize(db, review.id, "reject", None, ACTOR)


def test_finalize_from_needs_info(db, make_review, make_reviewer):
    review, _ = _in_review(db, make_review, make_reviewer)
    review_service.update_review(db, review.id, ReviewUpdate(status="needs_info"), ACTOR)
    db.commit()

    decision_service.finalize(db, review.id, "needs_clarification", "No response", ACTOR)
    db.commit()
    assert review.status == "rejected"


def test_finalize_terminal_review_leaves_it_unchanged(db, make_review, make_reviewer):
    review, _ = _in_review(db, make_review, make_reviewer)
    decision_service.finalize(db, review.id, "accept", "ok", ACTOR, actual_reward=5000)
    db.commit()
    before = (review.status, review.decision, review.actual_reward, review.review_completed, review.version)

    with pytest.raises(InvalidTransitionError):
        decision_service.finalize(db, review.id, "reject", "changed my mind", ACTOR)
    db.rollback()

    review = review_service.require_review(db, review.id)
    after = (review.status, review.decision, review.actual_reward, review.review_completed, review.version)
    assert after == before
    assert db.query(ReviewEvent).filter(ReviewEvent.event_type == "reward_issued").count() == 1


def test_finalize_keeps_public_response(db, make_review, make_reviewer):
    review, _ = _in_review(db, make_review, make_reviewer)
    decision_service.finalize(
        db, review.id, "duplicate", "dup", ACTOR, public_response="Duplicate of an earlier report"
    )
    db.commit()
    assert review.public_response == "Duplicate of an earlier report"


def test_close_keeps_reason_recorded_earlier(db, make_review, make_reviewer):
    review, _ = _in_review(db, make_review, make_reviewer)
    review_service.update_review(db, review.id, ReviewUpdate(decision_reason="dup of #4"), ACTOR)
    db.commit()

    review_service.update_review(
        db, review.id, ReviewUpdate(status="rejected", decision="duplicate"), ACTOR
    )
    db.commit()

    assert review.status == "rejected"
    assert review.decision_reason == "dup of #4"


def test_finalize_without_reason_keeps_stored_reason(db, make_review, make_reviewer):
    review, _ = _in_review(db, make_review, make_reviewer)
    review_service.update_review(
        db, review.id, ReviewUpdate(decision_reason="Out of scope", public_response="Thanks"), ACTOR
    )
    db.commit()

    decision_service.finalize(db, review.id, "invalid", None, ACTOR)
    db.commit()

    assert review.decision_reason == "Out of scope"
    assert review.public_response == "Thanks"
