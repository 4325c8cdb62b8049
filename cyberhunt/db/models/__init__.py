"""SQLAlchemy ORM models."""

from cyberhunt.db.models.audit import ReviewAuditLog
from cyberhunt.db.models.events import ReviewEvent
from cyberhunt.db.models.notifications import Notification
from cyberhunt.db.models.reviews import Review, ReviewComment
from cyberhunt.db.models.submissions import Program, Submission
from cyberhunt.db.models.team import TeamMember
from cyberhunt.db.models.triage import TriageService, TriageSubscription

__all__ = [
    "Notification",
    "Program",
    "Review",
    "ReviewAuditLog",
    "ReviewComment",
    "ReviewEvent",
    "Submission",
    "TeamMember",
    "TriageService",
    "TriageSubscription",
]
