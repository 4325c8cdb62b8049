"""Review state machine: legal transitions and terminal states."""

from cyberhunt.db.enums import ReviewDecision, ReviewStatus

TERMINAL_STATUSES: frozenset[ReviewStatus] = frozenset(
    {ReviewStatus.APPROVED, ReviewStatus.REJECTED}
)

# pending -> assigned only happens through assignment_service.assign;
# unassign is the only way back to pending.
REVIEW_TRANSITIONS: dict[ReviewStatus, frozenset[ReviewStatus]] = {
    ReviewStatus.PENDING: frozenset({ReviewStatus.ASSIGNED, ReviewStatus.ESCALATED}),
    ReviewStatus.ASSIGNED: frozenset({ReviewStatus.IN_REVIEW, ReviewStatus.ESCALATED}),
    ReviewStatus.IN_REVIEW: frozenset(
        {
            ReviewStatus.APPROVED,
            ReviewStatus.REJECTED,
            ReviewStatus.NEEDS_INFO,
            ReviewStatus.ESCALATED,
        }
    ),
    ReviewStatus.NEEDS_INFO: frozenset({ReviewStatus.IN_REVIEW, ReviewStatus.ESCALATED}),
    ReviewStatus.ESCALATED: frozenset(),
    ReviewStatus.APPROVED: frozenset(),
    ReviewStatus.REJECTED: frozenset(),
}

FINALIZABLE_STATUSES: frozenset[ReviewStatus] = frozenset(
    {ReviewStatus.IN_REVIEW, ReviewStatus.NEEDS_INFO}
)

UNASSIGNABLE_STATUSES: frozenset[ReviewStatus] = frozenset(
    {ReviewStatus.ASSIGNED, ReviewStatus.IN_REVIEW, ReviewStatus.NEEDS_INFO}
)

STATUS_ALIASES = {"completed": ReviewStatus.APPROVED.value}


def normalize_status(value: str | ReviewStatus) -> ReviewStatus:
    """Parse a status, accepting the triage dashboard's 'completed' alias."""
    raw = value.value if isinstance(value, ReviewStatus) else value
    return ReviewStatus(STATUS_ALIASES.get(raw, raw))


def is_terminal(status: str | ReviewStatus) -> bool:
    return normalize_status(status) in TERMINAL_STATUSES


def can_transition(current: str | ReviewStatus, target: str | ReviewStatus) -> bool:
    """Check whether current -> target is a legal state machine edge."""
    return normalize_status(target) in REVIEW_TRANSITIONS[normalize_status(current)]


def status_for_decision(decision: str | ReviewDecision) -> ReviewStatus:
    """Terminal status a decision closes the review with."""
    if ReviewDecision(decision) == ReviewDecision.ACCEPT:
        return ReviewStatus.APPROVED
    return ReviewStatus.REJECTED
