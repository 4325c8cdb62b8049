"""Tests for review team management."""

import pytest

from cyberhunt.db.models import Review, TeamMember
from cyberhunt.schemas.review import ReviewUpdate
from cyberhunt.schemas.team import TeamMemberCreate, TeamMemberUpdate
from cyberhunt.services import assignment_service, decision_service, review_service, team_service
from cyberhunt.services.workflow_errors import NotFoundError, ValidationError

ACTOR = 300


def test_create_member_normalizes_specializations(db):
    member = team_service.create_member(
        db,
        TeamMemberCreate(
            user_id=42,
            username=" alice ",
            specializations=["XSS", " xss", "XSS", "RCE", ""],
            max_assignments=3,
        ),
    )
    db.commit()

    assert member.username == "alice"
    assert member.specializations == ["RCE", "XSS", "xss"]
    assert member.current_assignments == 0
    assert member.is_active is True


def test_create_member_twice_for_same_user(db):
    team_service.create_member(db, TeamMemberCreate(user_id=42, username="alice"))
    db.commit()
    with pytest.raises(ValidationError):
        team_service.create_member(db, TeamMemberCreate(user_id=42, username="alice2"))


def test_get_member_unknown(db):
    with pytest.raises(NotFoundError):
        team_service.get_member(db, 999)


def test_list_members_hides_inactive_by_default(db, make_reviewer):
    active = make_reviewer(username="active")
    make_reviewer(username="gone", is_active=False)

    assert [m.id for m in team_service.list_members(db)] == [active.id]
    assert len(team_service.list_members(db, include_inactive=True)) == 2


def test_max_assignments_cannot_drop_below_load(db, make_review, make_reviewer):
    reviewer = make_reviewer(max_assignments=5)
    for _ in range(3):
        assignment_service.assign(db, make_review().id, reviewer.id, ACTOR)
    db.commit()

    with pytest.raises(ValidationError):
        team_service.update_member(db, reviewer.id, TeamMemberUpdate(max_assignments=2))
    db.rollback()

    updated = team_service.update_member(db, reviewer.id, TeamMemberUpdate(max_assignments=3))
    db.commit()
    assert updated.max_assignments == 3


def test_deactivate_returns_open_reviews_to_pool(db, make_review, make_reviewer):
    reviewer = make_reviewer(max_assignments=5)
    assigned = make_review()
    in_review = make_review()
    closed = make_review()
    for review in (assigned, in_review, closed):
        assignment_service.assign(db, review.id, reviewer.id, ACTOR)
    for review in (in_review, closed):
        review_service.update_review(db, review.id, ReviewUpdate(status="in_review"), ACTOR)
    decision_service.finalize(db, closed.id, "reject", "not a bug", ACTOR)
    db.commit()

    member, unassigned = team_service.deactivate_member(db, reviewer.id, ACTOR)
    db.commit()

    assert member.is_active is False
    assert unassigned == [assigned.id, in_review.id]
    assert member.current_assignments == 0
    for review_id in unassigned:
        review = db.get(Review, review_id)
        assert review.status == "pending"
        assert review.reviewer_id is None
    # Closed reviews keep their reviewer for the record
    assert db.get(Review, closed.id).reviewer_id == reviewer.id
    assert db.get(TeamMember, reviewer.id) is not None


def test_update_member_inactive_deactivates(db, make_review, make_reviewer):
    reviewer = make_reviewer()
    review = make_review()
    assignment_service.assign(db, review.id, reviewer.id, ACTOR)
    db.commit()

    member = team_service.update_member(db, reviewer.id, TeamMemberUpdate(is_active=False), ACTOR)
    db.commit()

    assert member.is_active is False
    assert db.get(Review, review.id).status == "pending"
