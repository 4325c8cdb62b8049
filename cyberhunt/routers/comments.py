"""Comment endpoints addressed by comment id."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cyberhunt.core.deps import get_db, require_csrf_header, require_staff
from cyberhunt.schemas.auth import UserSession
from cyberhunt.schemas.comment import CommentRead
from cyberhunt.services import comment_service

router = APIRouter()


@router.post(
    "/{comment_id}/resolve",
    response_model=CommentRead,
    dependencies=[Depends(require_csrf_header)],
)
def resolve_comment(
    comment_id: int,
    session: UserSession = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Mark a comment resolved (409 if it already is)."""
    comment = comment_service.resolve_comment(db, comment_id, session.user_id)
    db.commit()
    return comment
