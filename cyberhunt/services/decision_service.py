"""Terminal decisions and reward recording.

Closing a review is the only place rewards are written. Payment itself is
external: an accepted review leaves exactly one reward_issued outbox event
for the payment processor to pick up.
"""

import logging

from sqlalchemy.orm import Session

from cyberhunt.core.config import settings
from cyberhunt.core.review_states import (
    FINALIZABLE_STATUSES,
    TERMINAL_STATUSES,
    status_for_decision,
)
from cyberhunt.core.structured_logging import build_log_context
from cyberhunt.db.enums import (
    ReviewAuditAction,
    ReviewDecision,
    ReviewEventType,
    ReviewStatus,
    SubmissionStatus,
)
from cyberhunt.db.models import Review
from cyberhunt.services import (
    assignment_service,
    audit_service,
    notification_service,
    review_events,
    review_service,
)
from cyberhunt.services.workflow_errors import (
    InvalidTransitionError,
    InvariantViolationError,
    ValidationError,
)
from cyberhunt.utils.timestamps import not_before, utcnow

logger = logging.getLogger(__name__)


def finalize(
    db: Session,
    review_id: int,
    decision: ReviewDecision | str,
    decision_reason: str | None,
    actor_id: int | None,
    actual_reward: int | None = None,
    public_response: str | None = None,
) -> Review:
    """
    Record the terminal decision on a review.

    - Legal from in_review or needs_info; closed reviews are left untouched
    - accept requires actual_reward (cents, >= 0) and closes as approved
    - every other decision forbids a reward and closes as rejected
    """
    review = review_service.lock_review(db, review_id)
    return close_review(
        db,
        review,
        decision,
        decision_reason,
        actor_id,
        actual_reward=actual_reward,
        public_response=public_response,
    )


def check_decision(
    review: Review,
    decision: ReviewDecision | str,
    actual_reward: int | None,
) -> ReviewDecision:
    """
    Validate a terminal decision against a review without touching it.

    Raises:
        ValidationError: unknown decision or negative reward
        InvalidTransitionError: review is closed or not in review
        InvariantViolationError: reward missing on accept, or present otherwise
    """
    try:
        decision = ReviewDecision(getattr(decision, "value", decision))
    except ValueError:
        raise ValidationError(f"Unknown decision '{decision}'")

    current = ReviewStatus(review.status)
    if current in TERMINAL_STATUSES:
        raise InvalidTransitionError(
            f"Review {review.id} is already {current.value}; decisions are final"
        )
    if current not in FINALIZABLE_STATUSES:
        raise InvalidTransitionError(
            f"Review {review.id} must be in review before a decision ({current.value})"
        )

    if decision == ReviewDecision.ACCEPT:
        if actual_reward is None:
            raise InvariantViolationError("An accept decision requires actual_reward")
        if actual_reward < 0:
            raise ValidationError("actual_reward must be >= 0")
    elif actual_reward is not None:
        raise InvariantViolationError(
            f"actual_reward is only allowed for accept (got {decision.value})"
        )
    return decision


def close_review(
    db: Session,
    review: Review,
    decision: ReviewDecision | str,
    decision_reason: str | None,
    actor_id: int | None,
    actual_reward: int | None = None,
    public_response: str | None = None,
) -> Review:
    """Close an already-locked review. See finalize.

    decision_reason and public_response keep their stored values when not given.
    """
    current = ReviewStatus(review.status)
    decision = check_decision(review, decision, actual_reward)

    target = status_for_decision(decision)
    now = utcnow()

    review.status = target.value
    review.decision = decision.value
    if decision_reason is not None:
        review.decision_reason = decision_reason
    review.actual_reward = actual_reward
    if public_response is not None:
        review.public_response = public_response
    review.review_completed = not_before(now, review.review_started, review.created_at)
    review.updated_at = now
    review_service.flush_review(db, review)

    assignment_service.release_capacity(db, review.reviewer_id)

    submission = review.submission
    if decision == ReviewDecision.ACCEPT:
        submission.status = SubmissionStatus.ACCEPTED.value
        submission.reward = actual_reward
    else:
        submission.status = SubmissionStatus.REJECTED.value
    submission.updated_at = now
    db.flush()

    audit_service.log_action(
        db,
        ReviewAuditAction.REVIEW_FINALIZED,
        review=review,
        actor_id=actor_id,
        from_status=current.value,
        to_status=review.status,
        details={"decision": decision.value, "actual_reward": actual_reward},
    )

    if decision == ReviewDecision.ACCEPT:
        review_events.emit(
            db,
            ReviewEventType.REWARD_ISSUED,
            review,
            {
                "submission_id": submission.id,
                "reporter_id": submission.reporter_id,
                "amount": actual_reward,
                "currency": settings.REWARD_CURRENCY,
            },
        )
    else:
        review_events.emit(
            db,
            ReviewEventType.REVIEW_CLOSED,
            review,
            {
                "submission_id": submission.id,
                "reporter_id": submission.reporter_id,
                "decision": decision.value,
            },
        )

    notification_service.notify_decision(db, review, submission.reporter_id)

    logger.info(
        "Review finalized: %s",
        decision.value,
        extra=build_log_context(
            actor_id=actor_id,
            review_id=review.id,
            reviewer_id=review.reviewer_id,
            submission_id=submission.id,
        ),
    )
    return review
