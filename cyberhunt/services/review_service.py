"""Review entity management: creation, lookup, listing and field updates.

Assignment, comments and terminal decisions live in their own services;
update_review hands terminal transitions to decision_service so both paths
release capacity and emit events the same way.
"""

import logging
from datetime import datetime, timedelta

from sqlalchemy import String, cast, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from cyberhunt.core.config import settings
from cyberhunt.core.review_states import (
    TERMINAL_STATUSES,
    can_transition,
    normalize_status,
    status_for_decision,
)
from cyberhunt.core.structured_logging import build_log_context
from cyberhunt.db.enums import (
    ReviewAuditAction,
    ReviewPriority,
    ReviewQueue,
    ReviewStatus,
)
from cyberhunt.db.models import Review, Submission, TeamMember
from cyberhunt.schemas.review import ReviewUpdate
from cyberhunt.services import audit_service
from cyberhunt.services.workflow_errors import (
    ConcurrentModificationError,
    DuplicateReviewError,
    InvalidTransitionError,
    InvariantViolationError,
    NotFoundError,
    ValidationError,
)
from cyberhunt.utils.timestamps import not_before, utcnow

logger = logging.getLogger(__name__)


# Plain fields update_review copies without further rules
SIMPLE_FIELDS = (
    "priority",
    "category",
    "severity",
    "decision_reason",
    "internal_notes",
    "public_response",
    "estimated_reward",
    "due_date",
)


def normalize_tags(tags: list[str] | None) -> list[str]:
    """Tags are a set: trimmed, de-duplicated, stored sorted."""
    return sorted({t.strip() for t in tags or [] if t and t.strip()})


def _enum_value(value):
    return getattr(value, "value", value)


def flush_review(db: Session, review: Review) -> None:
    """Flush pending review changes, mapping a lost version race.

    A failed version check expires the session, so the id is read first.
    """
    review_id = review.id
    try:
        db.flush()
    except StaleDataError:
        raise ConcurrentModificationError(
            f"Review {review_id} was modified by another request"
        )


# =============================================================================
# Lookup
# =============================================================================


def get_review(db: Session, review_id: int) -> Review | None:
    return db.get(Review, review_id)


def require_review(db: Session, review_id: int) -> Review:
    review = db.get(Review, review_id)
    if not review:
        raise NotFoundError(f"Review {review_id} not found")
    return review


def lock_review(db: Session, review_id: int) -> Review:
    """
    Load a review for mutation.

    Takes a row lock where the backend supports it and always reloads the
    row, so the version seen here is the one the UPDATE is checked against.
    """
    review = db.execute(
        select(Review)
        .where(Review.id == review_id)
        .with_for_update(of=Review)
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()
    if not review:
        raise NotFoundError(f"Review {review_id} not found")
    return review


def get_open_review_for_submission(db: Session, submission_id: int) -> Review | None:
    terminal = [s.value for s in TERMINAL_STATUSES]
    return (
        db.query(Review)
        .filter(Review.submission_id == submission_id, Review.status.notin_(terminal))
        .first()
    )


def get_latest_review_for_submission(db: Session, submission_id: int) -> Review | None:
    """Most recent review of a submission, open or closed."""
    return (
        db.query(Review)
        .filter(Review.submission_id == submission_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .first()
    )


# =============================================================================
# Create
# =============================================================================


def create_review(
    db: Session,
    submission_id: int,
    actor_id: int | None,
    *,
    queue: ReviewQueue | str = ReviewQueue.MODERATION,
    priority: ReviewPriority | str = ReviewPriority.MEDIUM,
    category: str | None = None,
    severity: str | None = None,
    estimated_reward: int | None = None,
    due_date: datetime | None = None,
    tags: list[str] | None = None,
    company_id: int | None = None,
    triage_service_id: int | None = None,
) -> Review:
    """
    Open a review for a submission.

    - Submission must exist
    - At most one open (non-terminal) review per submission
    - Starts pending with no reviewer; category/severity default from the submission
    """
    submission = db.get(Submission, submission_id)
    if not submission:
        raise NotFoundError(f"Submission {submission_id} not found")

    if estimated_reward is not None and estimated_reward < 0:
        raise ValidationError("estimated_reward must be >= 0")

    if get_open_review_for_submission(db, submission_id):
        raise DuplicateReviewError(
            f"Submission {submission_id} already has an open review"
        )

    now = utcnow()
    review = Review(
        submission_id=submission_id,
        queue=ReviewQueue(_enum_value(queue)).value,
        company_id=company_id,
        triage_service_id=triage_service_id,
        status=ReviewStatus.PENDING.value,
        priority=ReviewPriority(_enum_value(priority)).value,
        category=category or submission.type,
        severity=severity or submission.severity,
        estimated_reward=estimated_reward,
        due_date=due_date or now + timedelta(hours=settings.DEFAULT_REVIEW_DUE_HOURS),
        tags=normalize_tags(tags),
        created_at=now,
        updated_at=now,
    )
    db.add(review)
    try:
        db.flush()
    except IntegrityError:
        # Lost the race against a concurrent create (partial unique index)
        raise DuplicateReviewError(
            f"Submission {submission_id} already has an open review"
        )

    audit_service.log_action(
        db,
        ReviewAuditAction.REVIEW_CREATED,
        review=review,
        actor_id=actor_id,
        to_status=review.status,
        details={"queue": review.queue, "priority": review.priority},
    )
    logger.info(
        "Review created",
        extra=build_log_context(
            actor_id=actor_id, review_id=review.id, submission_id=submission_id
        ),
    )
    return review


# =============================================================================
# List
# =============================================================================


def list_reviews(
    db: Session,
    *,
    status: str | None = None,
    priority: str | None = None,
    category: str | None = None,
    queue: str | None = None,
    reviewer_id: int | None = None,
    reviewer_user_id: int | None = None,
    company_id: int | None = None,
    search: str | None = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[Review], int]:
    """
    List reviews with filters, newest first.

    search is a case-insensitive substring match over submission title,
    description, review category and tags.

    Returns:
        (reviews, total_count)
    """
    query = db.query(Review)

    if status:
        try:
            status = normalize_status(status)
        except ValueError:
            raise ValidationError(f"Unknown status '{status}'")
        query = query.filter(Review.status == status.value)
    if priority:
        query = query.filter(Review.priority == _enum_value(priority))
    if category:
        query = query.filter(Review.category == category)
    if queue:
        query = query.filter(Review.queue == _enum_value(queue))
    if reviewer_id is not None:
        query = query.filter(Review.reviewer_id == reviewer_id)
    if reviewer_user_id is not None:
        query = query.join(TeamMember, Review.reviewer_id == TeamMember.id).filter(
            TeamMember.user_id == reviewer_user_id
        )
    if company_id is not None:
        query = query.filter(Review.company_id == company_id)

    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.join(Submission, Review.submission_id == Submission.id).filter(
            or_(
                Submission.title.ilike(pattern),
                Submission.description.ilike(pattern),
                Review.category.ilike(pattern),
                cast(Review.tags, String).ilike(pattern),
            )
        )

    total = query.count()
    reviews = (
        query.order_by(Review.created_at.desc(), Review.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return reviews, total


# =============================================================================
# Update
# =============================================================================


def update_review(
    db: Session,
    review_id: int,
    patch: ReviewUpdate,
    actor_id: int | None,
) -> Review:
    """
    Apply a partial update under the review state machine.

    Rules:
    - status must be a legal edge from the current status; 'assigned' only via assign
    - closed reviews keep their status, decision and reward
    - decision only together with a terminal status, and vice versa
    - actual_reward only for an accept decision
    - terminal transitions are completed by decision_service.close_review

    Raises:
        NotFoundError, InvalidTransitionError, InvariantViolationError,
        ValidationError, ConcurrentModificationError
    """
    review = lock_review(db, review_id)
    changes = patch.model_dump(exclude_unset=True)

    current = ReviewStatus(review.status)
    target = None
    if changes.get("status") is not None:
        try:
            target = normalize_status(changes["status"])
        except ValueError:
            raise ValidationError(f"Unknown status '{changes['status']}'")
        if target == current:
            target = None

    decision = changes.get("decision")
    actual_reward = changes.get("actual_reward")

    if current in TERMINAL_STATUSES:
        if target is not None or any(
            f in changes and changes[f] is not None for f in ("decision", "actual_reward")
        ):
            raise InvalidTransitionError(
                f"Review {review_id} is {current.value}; decisions are final"
            )

    if target is not None:
        if target == ReviewStatus.ASSIGNED:
            raise InvalidTransitionError("Use assign to give a review to a reviewer")
        if not can_transition(current, target):
            raise InvalidTransitionError(
                f"Cannot move review from {current.value} to {target.value}"
            )

    # Closing patches are validated in full before any field is touched
    from cyberhunt.services import decision_service

    if target in TERMINAL_STATUSES:
        if decision is None:
            raise InvariantViolationError(
                f"Status {target.value} requires a decision"
            )
        if status_for_decision(decision) != target:
            raise InvariantViolationError(
                f"Decision {_enum_value(decision)} cannot close a review as {target.value}"
            )
        decision_service.check_decision(review, decision, actual_reward)
    else:
        if decision is not None:
            raise InvariantViolationError(
                "A decision can only be recorded with a terminal status"
            )
        if actual_reward is not None:
            raise InvariantViolationError("actual_reward requires an accept decision")

    estimated_reward = changes.get("estimated_reward")
    if estimated_reward is not None and estimated_reward < 0:
        raise ValidationError("estimated_reward must be >= 0")

    changed: list[str] = []
    for field in SIMPLE_FIELDS:
        if field in changes:
            value = _enum_value(changes[field])
            if getattr(review, field) != value:
                setattr(review, field, value)
                changed.append(field)
    if "tags" in changes:
        tags = normalize_tags(changes["tags"])
        if tags != review.tags:
            review.tags = tags
            changed.append("tags")

    if target in TERMINAL_STATUSES:
        if changed:
            audit_service.log_action(
                db,
                ReviewAuditAction.REVIEW_UPDATED,
                review=review,
                actor_id=actor_id,
                details={"fields": sorted(changed)},
            )
        return decision_service.close_review(
            db,
            review,
            decision,
            changes.get("decision_reason"),
            actor_id,
            actual_reward=actual_reward,
            public_response=changes.get("public_response"),
        )

    if target is not None:
        review.status = target.value
        changed.append("status")
        if target == ReviewStatus.IN_REVIEW and review.review_started is None:
            review.review_started = not_before(utcnow(), review.created_at)

    if not changed:
        return review

    review.updated_at = utcnow()
    flush_review(db, review)

    audit_service.log_action(
        db,
        ReviewAuditAction.REVIEW_UPDATED,
        review=review,
        actor_id=actor_id,
        from_status=current.value,
        to_status=review.status,
        details={"fields": sorted(changed)},
    )
    logger.info(
        "Review updated",
        extra=build_log_context(actor_id=actor_id, review_id=review.id),
    )
    return review
