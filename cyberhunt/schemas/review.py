"""Pydantic schemas for reviews."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field

from cyberhunt.db.enums import ReviewDecision, ReviewPriority, ReviewQueue
from cyberhunt.schemas.comment import CommentRead
from cyberhunt.utils.money import format_cents


class ReviewCreate(BaseModel):
    """Request to open a review for a submission."""
    model_config = ConfigDict(extra="forbid")

    submission_id: int
    queue: ReviewQueue = ReviewQueue.MODERATION
    priority: ReviewPriority = ReviewPriority.MEDIUM
    category: str | None = Field(None, max_length=100)
    severity: str | None = Field(None, max_length=20)
    estimated_reward: int | None = None  # cents
    due_date: datetime | None = None
    tags: list[str] = Field(default_factory=list)


class ReviewUpdate(BaseModel):
    """Request to update a review (partial).

    Status accepts the 'completed' alias for approved, so it is a plain string
    here and parsed by the state table.
    """
    model_config = ConfigDict(extra="forbid")

    status: str | None = None
    priority: ReviewPriority | None = None
    category: str | None = Field(None, max_length=100)
    severity: str | None = Field(None, max_length=20)
    decision: ReviewDecision | None = None
    decision_reason: str | None = Field(None, max_length=5000)
    internal_notes: str | None = Field(None, max_length=10000)
    public_response: str | None = Field(None, max_length=10000)
    estimated_reward: int | None = None
    actual_reward: int | None = None
    due_date: datetime | None = None
    tags: list[str] | None = None


class AssignRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reviewer_id: int = Field(..., description="Team member id")


class FinalizeRequest(BaseModel):
    """Terminal decision. actual_reward (cents) is required for accept only."""
    model_config = ConfigDict(extra="forbid")

    decision: ReviewDecision
    decision_reason: str | None = Field(None, max_length=5000)
    actual_reward: int | None = None
    public_response: str | None = Field(None, max_length=10000)


class ReviewPublicRead(BaseModel):
    """Company-facing view of a triage review (no internal notes)."""
    id: int
    submission_id: int
    submission_title: str | None = None
    queue: ReviewQueue
    company_id: int | None
    triage_service_id: int | None
    status: str
    priority: str
    category: str | None
    severity: str | None
    decision: str | None
    decision_reason: str | None
    public_response: str | None
    estimated_reward: int | None
    actual_reward: int | None
    reviewer_username: str | None = None
    assigned_at: datetime | None
    due_date: datetime | None
    review_started: datetime | None
    review_completed: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def estimated_reward_display(self) -> str | None:
        return format_cents(self.estimated_reward)

    @computed_field
    @property
    def actual_reward_display(self) -> str | None:
        return format_cents(self.actual_reward)


class SubmissionReviewRead(BaseModel):
    """Reporter-facing outcome of a submission's review, with public comments."""
    id: int
    submission_id: int
    status: str
    decision: str | None
    decision_reason: str | None
    public_response: str | None
    actual_reward: int | None
    review_completed: datetime | None
    created_at: datetime
    comments: list[CommentRead] = Field(default_factory=list)

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def actual_reward_display(self) -> str | None:
        return format_cents(self.actual_reward)


class ReviewRead(ReviewPublicRead):
    """Full staff view of a review."""
    reviewer_id: int | None
    reviewer_user_id: int | None = None
    assigned_by: int | None
    internal_notes: str | None
    tags: list[str]
    version: int


class ReviewListResponse(BaseModel):
    items: list[ReviewRead]
    total: int
    page: int
    per_page: int
    pages: int


class ReviewStats(BaseModel):
    """Dashboard counters."""
    total: int
    pending: int
    assigned: int
    in_review: int
    needs_info: int
    escalated: int
    approved: int
    rejected: int
    critical: int
    high: int
    avg_review_time_hours: float | None
