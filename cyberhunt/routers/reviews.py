"""Review workflow API endpoints (staff)."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from cyberhunt.core.deps import get_db, require_csrf_header, require_staff
from cyberhunt.db.enums import CommentType, Role
from cyberhunt.db.models import Review
from cyberhunt.schemas.auth import UserSession
from cyberhunt.schemas.comment import CommentCreate, CommentRead
from cyberhunt.schemas.review import (
    AssignRequest,
    FinalizeRequest,
    ReviewCreate,
    ReviewListResponse,
    ReviewRead,
    ReviewStats,
    ReviewUpdate,
)
from cyberhunt.services import (
    assignment_service,
    comment_service,
    decision_service,
    review_service,
    stats_service,
    team_service,
)
from cyberhunt.utils.pagination import PaginationParams, get_pagination, page_count

router = APIRouter()


def _require_decider(session: UserSession, review: Review) -> None:
    """Admins may act on any review; analysts only on reviews assigned to them."""
    if session.role == Role.ADMIN:
        return
    if review.reviewer_user_id != session.user_id:
        raise HTTPException(status_code=403, detail="Review is not assigned to you")


# =============================================================================
# Reviews
# =============================================================================


@router.get("", response_model=ReviewListResponse)
def list_reviews(
    status_filter: str | None = Query(None, alias="status"),
    priority: str | None = None,
    category: str | None = None,
    queue: str | None = None,
    reviewer_id: int | None = None,
    q: str | None = Query(None, max_length=200),
    pagination: PaginationParams = Depends(get_pagination),
    session: UserSession = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """
    List reviews with filters and search.

    Analysts only see reviews assigned to them.
    """
    reviewer_user_id = None if session.role == Role.ADMIN else session.user_id
    reviews, total = review_service.list_reviews(
        db,
        status=status_filter,
        priority=priority,
        category=category,
        queue=queue,
        reviewer_id=reviewer_id,
        reviewer_user_id=reviewer_user_id,
        search=q,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return ReviewListResponse(
        items=[ReviewRead.model_validate(r) for r in reviews],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=page_count(total, pagination.per_page),
    )


@router.post(
    "",
    response_model=ReviewRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_csrf_header)],
)
def create_review(
    data: ReviewCreate,
    session: UserSession = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Open a review for a submission."""
    review = review_service.create_review(
        db,
        data.submission_id,
        session.user_id,
        queue=data.queue,
        priority=data.priority,
        category=data.category,
        severity=data.severity,
        estimated_reward=data.estimated_reward,
        due_date=data.due_date,
        tags=data.tags,
    )
    db.commit()
    return review


@router.get("/stats", response_model=ReviewStats)
def get_stats(
    reviewer_id: int | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    session: UserSession = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Dashboard counters. Analysts get their own numbers."""
    if session.role != Role.ADMIN:
        member = team_service.get_member_by_user(db, session.user_id)
        if not member:
            raise HTTPException(status_code=403, detail="Not a review team member")
        reviewer_id = member.id
    return stats_service.get_review_stats(db, reviewer_id, date_from, date_to)


@router.get("/{review_id}", response_model=ReviewRead)
def get_review(
    review_id: int,
    session: UserSession = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return review_service.require_review(db, review_id)


@router.patch(
    "/{review_id}",
    response_model=ReviewRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_review(
    review_id: int,
    data: ReviewUpdate,
    session: UserSession = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Update review fields and status (admin or assigned analyst)."""
    _require_decider(session, review_service.require_review(db, review_id))
    review = review_service.update_review(db, review_id, data, session.user_id)
    db.commit()
    return review


# =============================================================================
# Assignment
# =============================================================================


@router.post(
    "/{review_id}/assign",
    response_model=ReviewRead,
    dependencies=[Depends(require_csrf_header)],
)
def assign_review(
    review_id: int,
    data: AssignRequest,
    session: UserSession = Depends(require_staff),
    db: Session = Depends(get_db),
):
    review = assignment_service.assign(db, review_id, data.reviewer_id, session.user_id)
    db.commit()
    return review


@router.post(
    "/{review_id}/auto-assign",
    response_model=ReviewRead,
    dependencies=[Depends(require_csrf_header)],
)
def auto_assign_review(
    review_id: int,
    session: UserSession = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Assign to the least-loaded matching reviewer; 409 when nobody qualifies."""
    review = assignment_service.auto_assign(db, review_id, session.user_id)
    if review is None:
        raise HTTPException(status_code=409, detail="No available reviewer for this review")
    db.commit()
    return review


@router.post(
    "/{review_id}/unassign",
    response_model=ReviewRead,
    dependencies=[Depends(require_csrf_header)],
)
def unassign_review(
    review_id: int,
    session: UserSession = Depends(require_staff),
    db: Session = Depends(get_db),
):
    review = assignment_service.unassign(db, review_id, session.user_id)
    db.commit()
    return review


# =============================================================================
# Decision
# =============================================================================


@router.post(
    "/{review_id}/finalize",
    response_model=ReviewRead,
    dependencies=[Depends(require_csrf_header)],
)
def finalize_review(
    review_id: int,
    data: FinalizeRequest,
    session: UserSession = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Record the terminal decision (admin or assigned analyst)."""
    _require_decider(session, review_service.require_review(db, review_id))
    review = decision_service.finalize(
        db,
        review_id,
        data.decision,
        data.decision_reason,
        session.user_id,
        actual_reward=data.actual_reward,
        public_response=data.public_response,
    )
    db.commit()
    return review


# =============================================================================
# Comments
# =============================================================================


@router.get("/{review_id}/comments", response_model=list[CommentRead])
def list_comments(
    review_id: int,
    comment_type: CommentType | None = None,
    session: UserSession = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return comment_service.list_comments(db, review_id, comment_type=comment_type)


@router.post(
    "/{review_id}/comments",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_csrf_header)],
)
def add_comment(
    review_id: int,
    data: CommentCreate,
    session: UserSession = Depends(require_staff),
    db: Session = Depends(get_db),
):
    comment = comment_service.add_comment(
        db,
        review_id,
        session.user_id,
        data.content,
        data.comment_type,
        author_name=session.username,
        mentions=data.mentions,
    )
    db.commit()
    return comment
