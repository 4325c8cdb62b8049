"""Enum definitions for application constants."""

from cyberhunt.db.enums.audit import ReviewAuditAction
from cyberhunt.db.enums.auth import Role, STAFF_ROLES
from cyberhunt.db.enums.notifications import NotificationType
from cyberhunt.db.enums.reviews import (
    CommentType,
    ReviewDecision,
    ReviewEventType,
    ReviewPriority,
    ReviewQueue,
    ReviewStatus,
    SubmissionSeverity,
    SubmissionStatus,
)
from cyberhunt.db.enums.triage import (
    PricingModel,
    SubscriptionStatus,
    TriageLevel,
    TriageServiceType,
)

__all__ = [
    "CommentType",
    "NotificationType",
    "PricingModel",
    "ReviewAuditAction",
    "ReviewDecision",
    "ReviewEventType",
    "ReviewPriority",
    "ReviewQueue",
    "ReviewStatus",
    "Role",
    "STAFF_ROLES",
    "SubmissionSeverity",
    "SubmissionStatus",
    "SubscriptionStatus",
    "TriageLevel",
    "TriageServiceType",
]
