"""Review workflow enums."""

from enum import Enum


class ReviewStatus(str, Enum):
    """Review lifecycle status."""

    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_REVIEW = "in_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    NEEDS_INFO = "needs_info"
    ESCALATED = "escalated"


class ReviewPriority(str, Enum):
    """Review priority level."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ReviewDecision(str, Enum):
    """Terminal disposition of a review."""

    ACCEPT = "accept"
    REJECT = "reject"
    DUPLICATE = "duplicate"
    INVALID = "invalid"
    NEEDS_CLARIFICATION = "needs_clarification"


class ReviewQueue(str, Enum):
    """Audience of a review: admin moderation or company-facing triage."""

    MODERATION = "moderation"
    TRIAGE = "triage"


class CommentType(str, Enum):
    """Comment visibility."""

    INTERNAL = "internal"
    PUBLIC = "public"


class SubmissionSeverity(str, Enum):
    """Severity declared by the reporting researcher."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


class SubmissionStatus(str, Enum):
    """Submission status mirrored from review decisions."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ReviewEventType(str, Enum):
    """Outbox events consumed by payment and notification systems."""

    REVIEW_ASSIGNED = "review_assigned"
    COMMENT_ADDED = "comment_added"
    REWARD_ISSUED = "reward_issued"
    REVIEW_CLOSED = "review_closed"
