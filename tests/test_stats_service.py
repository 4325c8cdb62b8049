"""Tests for dashboard statistics."""

from datetime import timedelta

from cyberhunt.db.models import Review
from cyberhunt.schemas.review import ReviewUpdate
from cyberhunt.services import assignment_service, decision_service, review_service, stats_service

ACTOR = 300


def test_stats_empty(db):
    stats = stats_service.get_review_stats(db)
    assert stats["total"] == 0
    assert stats["pending"] == 0
    assert stats["avg_review_time_hours"] is None


def test_stats_counts_and_average(db, make_review, make_reviewer):
    reviewer = make_reviewer()
    done = make_review()
    make_review(severity="critical")
    review_service.update_review(
        db, make_review().id, ReviewUpdate(priority="critical"), ACTOR
    )
    review_service.update_review(db, make_review().id, ReviewUpdate(priority="high"), ACTOR)

    assignment_service.assign(db, done.id, reviewer.id, ACTOR)
    review_service.update_review(db, done.id, ReviewUpdate(status="in_review"), ACTOR)
    decision_service.finalize(db, done.id, "accept", "ok", ACTOR, actual_reward=100)
    db.commit()

    # Pin the lifecycle stamps to a known 3 hour review
    row = db.get(Review, done.id)
    row.review_completed = row.review_started + timedelta(hours=3)
    db.commit()

    stats = stats_service.get_review_stats(db)
    assert stats["total"] == 4
    assert stats["pending"] == 3
    assert stats["approved"] == 1
    assert stats["critical"] == 1
    assert stats["high"] == 1
    assert stats["avg_review_time_hours"] == 3.0

    mine = stats_service.get_review_stats(db, reviewer_id=reviewer.id)
    assert mine["total"] == 1
    assert mine["approved"] == 1
