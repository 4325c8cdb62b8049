"""Reviewer assignment with bounded capacity.

Reviewer capacity is only changed through conditional UPDATE statements, so
the check and the increment are one atomic step in the database. Concurrent
assigns against the same reviewer serialize on that row and the losers see
CapacityExceededError instead of over-subscribing it.
"""

import logging
from fractions import Fraction

from sqlalchemy import update
from sqlalchemy.orm import Session

from cyberhunt.core.review_states import UNASSIGNABLE_STATUSES
from cyberhunt.core.structured_logging import build_log_context
from cyberhunt.db.enums import ReviewAuditAction, ReviewEventType, ReviewStatus
from cyberhunt.db.models import Review, TeamMember
from cyberhunt.services import audit_service, notification_service, review_events, review_service
from cyberhunt.services.workflow_errors import (
    CapacityExceededError,
    InactiveReviewerError,
    InvalidTransitionError,
    NotFoundError,
)
from cyberhunt.utils.timestamps import not_before, utcnow

logger = logging.getLogger(__name__)


# =============================================================================
# Capacity counters
# =============================================================================


def reserve_capacity(db: Session, reviewer_id: int) -> TeamMember:
    """
    Take one assignment slot from a reviewer.

    Raises:
        NotFoundError: unknown reviewer
        InactiveReviewerError: reviewer is deactivated
        CapacityExceededError: reviewer already at max_assignments
    """
    result = db.execute(
        update(TeamMember)
        .where(
            TeamMember.id == reviewer_id,
            TeamMember.is_active.is_(True),
            TeamMember.current_assignments < TeamMember.max_assignments,
        )
        .values(
            current_assignments=TeamMember.current_assignments + 1,
            updated_at=utcnow(),
        )
        .execution_options(synchronize_session=False)
    )
    member = db.get(TeamMember, reviewer_id, populate_existing=True)
    if result.rowcount == 1:
        return member

    if member is None:
        raise NotFoundError(f"Reviewer {reviewer_id} not found")
    if not member.is_active:
        raise InactiveReviewerError(f"Reviewer {member.username} is inactive")
    raise CapacityExceededError(
        f"Reviewer {member.username} is at capacity "
        f"({member.current_assignments}/{member.max_assignments})"
    )


def release_capacity(db: Session, reviewer_id: int | None) -> TeamMember | None:
    """Give one slot back. The counter never goes below zero."""
    if reviewer_id is None:
        return None
    db.execute(
        update(TeamMember)
        .where(TeamMember.id == reviewer_id, TeamMember.current_assignments > 0)
        .values(
            current_assignments=TeamMember.current_assignments - 1,
            updated_at=utcnow(),
        )
        .execution_options(synchronize_session=False)
    )
    return db.get(TeamMember, reviewer_id, populate_existing=True)


# =============================================================================
# Assign / unassign
# =============================================================================


def assign(
    db: Session,
    review_id: int,
    reviewer_id: int,
    actor_id: int | None,
) -> Review:
    """
    Assign a pending review to a reviewer.

    - Review must be pending
    - Reviewer must be active with spare capacity (atomic check-and-increment)
    - Audits, emits review_assigned and notifies the reviewer
    """
    review = review_service.lock_review(db, review_id)
    if review.status != ReviewStatus.PENDING.value:
        raise InvalidTransitionError(
            f"Only pending reviews can be assigned (review {review_id} is {review.status})"
        )

    member = reserve_capacity(db, reviewer_id)

    review.status = ReviewStatus.ASSIGNED.value
    review.reviewer = member
    review.assigned_by = actor_id
    review.assigned_at = not_before(utcnow(), review.created_at)
    review.updated_at = utcnow()
    review_service.flush_review(db, review)

    audit_service.log_action(
        db,
        ReviewAuditAction.REVIEW_ASSIGNED,
        review=review,
        actor_id=actor_id,
        from_status=ReviewStatus.PENDING.value,
        to_status=review.status,
        details={"reviewer_id": member.id},
    )
    review_events.emit(
        db,
        ReviewEventType.REVIEW_ASSIGNED,
        review,
        {
            "submission_id": review.submission_id,
            "reviewer_id": member.id,
            "reviewer_user_id": member.user_id,
            "assigned_by": actor_id,
        },
    )
    notification_service.notify_review_assigned(db, review, member.user_id)

    logger.info(
        "Review assigned",
        extra=build_log_context(
            actor_id=actor_id, review_id=review.id, reviewer_id=member.id
        ),
    )
    return review


def unassign(db: Session, review_id: int, actor_id: int | None) -> Review:
    """
    Return an assigned review to the pending pool.

    Legal from assigned, in_review and needs_info. Frees the reviewer's slot
    and clears the assignment fields.
    """
    review = review_service.lock_review(db, review_id)
    if ReviewStatus(review.status) not in UNASSIGNABLE_STATUSES:
        raise InvalidTransitionError(
            f"Cannot unassign review {review_id} in status {review.status}"
        )

    from_status = review.status
    previous_reviewer_id = review.reviewer_id

    review.status = ReviewStatus.PENDING.value
    review.reviewer = None
    review.assigned_by = None
    review.assigned_at = None
    review.updated_at = utcnow()
    review_service.flush_review(db, review)

    release_capacity(db, previous_reviewer_id)

    audit_service.log_action(
        db,
        ReviewAuditAction.REVIEW_UNASSIGNED,
        review=review,
        actor_id=actor_id,
        from_status=from_status,
        to_status=review.status,
        details={"reviewer_id": previous_reviewer_id},
    )
    logger.info(
        "Review unassigned",
        extra=build_log_context(
            actor_id=actor_id, review_id=review.id, reviewer_id=previous_reviewer_id
        ),
    )
    return review


# =============================================================================
# Reviewer selection
# =============================================================================


def _load_ratio(member: TeamMember) -> Fraction:
    return Fraction(member.current_assignments, member.max_assignments)


def list_available_reviewers(
    db: Session,
    specialization: str | None = None,
) -> list[TeamMember]:
    """Active reviewers with spare capacity, least loaded first."""
    members = (
        db.query(TeamMember)
        .filter(
            TeamMember.is_active.is_(True),
            TeamMember.current_assignments < TeamMember.max_assignments,
        )
        .order_by(TeamMember.id)
        .all()
    )
    if specialization:
        wanted = specialization.strip().lower()
        members = [
            m for m in members if wanted in {s.lower() for s in m.specializations or []}
        ]
    return sorted(members, key=lambda m: (_load_ratio(m), m.id))


def rank_reviewers(db: Session, submission_type: str) -> list[TeamMember]:
    """Candidates for a submission type, best first."""
    if not submission_type or not submission_type.strip():
        return []
    return list_available_reviewers(db, specialization=submission_type)


def select_reviewer(db: Session, submission_type: str) -> TeamMember | None:
    """
    Pick the reviewer for a submission type.

    Among active reviewers with spare capacity whose specializations include
    the type (case-insensitive): lowest current/max load, then lowest id.
    """
    candidates = rank_reviewers(db, submission_type)
    return candidates[0] if candidates else None


def auto_assign(db: Session, review_id: int, actor_id: int | None) -> Review | None:
    """
    Assign a review to the best available reviewer.

    A candidate that fills up (or is deactivated) between selection and
    assignment is skipped for the next one. Returns None when nobody
    qualifies.
    """
    review = review_service.require_review(db, review_id)
    if review.status != ReviewStatus.PENDING.value:
        raise InvalidTransitionError(
            f"Only pending reviews can be assigned (review {review_id} is {review.status})"
        )

    for candidate in rank_reviewers(db, review.submission.type):
        try:
            return assign(db, review_id, candidate.id, actor_id)
        except (CapacityExceededError, InactiveReviewerError):
            logger.info(
                "Auto-assign candidate unavailable, trying next",
                extra=build_log_context(review_id=review_id, reviewer_id=candidate.id),
            )
            continue

    logger.info(
        "No reviewer available for auto-assign",
        extra=build_log_context(actor_id=actor_id, review_id=review_id),
    )
    return None
