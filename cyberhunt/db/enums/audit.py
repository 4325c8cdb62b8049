"""Audit-related enums."""

from enum import Enum


class ReviewAuditAction(str, Enum):
    """Actions recorded in the review audit trail."""

    REVIEW_CREATED = "review_created"
    REVIEW_UPDATED = "review_updated"
    REVIEW_ASSIGNED = "review_assigned"
    REVIEW_UNASSIGNED = "review_unassigned"
    REVIEW_FINALIZED = "review_finalized"
    COMMENT_ADDED = "comment_added"
    COMMENT_RESOLVED = "comment_resolved"
