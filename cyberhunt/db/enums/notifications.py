"""Notification-related enums."""

from enum import Enum


class NotificationType(str, Enum):
    """Types of in-app notifications."""

    ASSIGNMENT = "assignment"  # Review assigned to reviewer
    MENTION = "mention"  # User mentioned in a comment
    COMMENT = "comment"  # New comment on a review you own
    DECISION = "decision"  # Review finalized (sent to reporter)
