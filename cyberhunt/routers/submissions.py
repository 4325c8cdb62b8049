"""Program registry and submission intake endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from cyberhunt.core.deps import (
    get_current_session,
    get_db,
    require_company,
    require_csrf_header,
    require_roles,
)
from cyberhunt.db.enums import CommentType, Role
from cyberhunt.schemas.auth import UserSession
from cyberhunt.schemas.comment import CommentRead
from cyberhunt.schemas.review import SubmissionReviewRead
from cyberhunt.schemas.submission import (
    ProgramCreate,
    ProgramRead,
    SubmissionCreate,
    SubmissionRead,
)
from cyberhunt.services import comment_service, review_service, submission_service

programs_router = APIRouter()
router = APIRouter()


# =============================================================================
# Programs
# =============================================================================


@programs_router.get("", response_model=list[ProgramRead])
def list_programs(
    company_id: int | None = None,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return submission_service.list_programs(db, company_id)


@programs_router.post(
    "",
    response_model=ProgramRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_csrf_header)],
)
def create_program(
    data: ProgramCreate,
    session: UserSession = Depends(require_company),
    db: Session = Depends(get_db),
):
    program = submission_service.create_program(db, session.user_id, data.name)
    db.commit()
    return program


# =============================================================================
# Submissions
# =============================================================================


@router.post(
    "",
    response_model=SubmissionRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_csrf_header)],
)
def create_submission(
    data: SubmissionCreate,
    session: UserSession = Depends(require_roles(Role.HACKER)),
    db: Session = Depends(get_db),
):
    """Submit a vulnerability report (auto-triaged when the company opted in)."""
    submission = submission_service.create_submission(db, session.user_id, data)
    db.commit()
    return submission


def _visible_submission(db: Session, session: UserSession, submission_id: int):
    """Submissions are visible to the reporter, the owning company and staff."""
    submission = submission_service.get_submission(db, submission_id)
    allowed = (
        session.is_staff
        or submission.reporter_id == session.user_id
        or (session.role == Role.COMPANY and submission.program.company_id == session.user_id)
    )
    if not allowed:
        raise HTTPException(status_code=404, detail=f"Submission {submission_id} not found")
    return submission


@router.get("/{submission_id}", response_model=SubmissionRead)
def get_submission(
    submission_id: int,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return _visible_submission(db, session, submission_id)


@router.get("/{submission_id}/review", response_model=SubmissionReviewRead)
def get_submission_review(
    submission_id: int,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Latest review outcome with its public comment thread."""
    _visible_submission(db, session, submission_id)
    review = review_service.get_latest_review_for_submission(db, submission_id)
    if not review:
        raise HTTPException(
            status_code=404, detail=f"Submission {submission_id} has no review yet"
        )
    result = SubmissionReviewRead.model_validate(review)
    result.comments = [
        CommentRead.model_validate(c)
        for c in comment_service.list_comments(
            db, review.id, comment_type=CommentType.PUBLIC
        )
    ]
    return result
