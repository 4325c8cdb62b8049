"""Error taxonomy for the review workflow.

Services raise these; main.py maps them to HTTP responses through a single
exception handler using `status_code` and `code`.
"""


class ReviewWorkflowError(Exception):
    """Base exception for review workflow errors."""

    status_code = 400
    code = "workflow_error"


class NotFoundError(ReviewWorkflowError):
    """Unknown id (review, reviewer, comment, submission, ...)."""

    status_code = 404
    code = "not_found"


class ValidationError(ReviewWorkflowError):
    """Malformed or missing required field."""

    status_code = 422
    code = "validation_error"


class InvalidTransitionError(ReviewWorkflowError):
    """State machine violation."""

    status_code = 409
    code = "invalid_transition"


class InvariantViolationError(ReviewWorkflowError):
    """Cross-field invariant broken (e.g. decision/reward mismatch)."""

    status_code = 422
    code = "invariant_violation"


class CapacityExceededError(ReviewWorkflowError):
    """Reviewer already holds max_assignments reviews."""

    status_code = 409
    code = "capacity_exceeded"


class InactiveReviewerError(ReviewWorkflowError):
    """Reviewer is deactivated."""

    status_code = 409
    code = "inactive_reviewer"


class DuplicateReviewError(ReviewWorkflowError):
    """An open review already exists for the submission."""

    status_code = 409
    code = "duplicate_review"


class AlreadyResolvedError(ReviewWorkflowError):
    """Comment was already resolved."""

    status_code = 409
    code = "already_resolved"


class ConcurrentModificationError(ReviewWorkflowError):
    """Another transaction changed the review first."""

    status_code = 409
    code = "concurrent_modification"


class QuotaExceededError(ReviewWorkflowError):
    """Triage subscription used up its monthly report allowance."""

    status_code = 409
    code = "quota_exceeded"
