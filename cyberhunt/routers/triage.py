"""Company-facing triage endpoints: catalog, subscriptions and report threads."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from cyberhunt.core.deps import get_db, require_company, require_csrf_header
from cyberhunt.db.enums import CommentType
from cyberhunt.schemas.auth import UserSession
from cyberhunt.schemas.comment import CommentRead, PublicCommentCreate
from cyberhunt.schemas.review import ReviewPublicRead
from cyberhunt.schemas.triage import (
    SubscriptionCreate,
    SubscriptionRead,
    TriageReportCreate,
    TriageServiceCreate,
    TriageServiceRead,
    TriageServiceUpdate,
)
from cyberhunt.services import comment_service, triage_catalog_service
from cyberhunt.utils.pagination import PaginationParams, get_pagination

router = APIRouter(dependencies=[Depends(require_company)])


# =============================================================================
# Service catalog
# =============================================================================


@router.get("/services", response_model=list[TriageServiceRead])
def list_services(
    include_inactive: bool = False,
    session: UserSession = Depends(require_company),
    db: Session = Depends(get_db),
):
    return triage_catalog_service.list_services(db, session.user_id, include_inactive)


@router.post(
    "/services",
    response_model=TriageServiceRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_csrf_header)],
)
def create_service(
    data: TriageServiceCreate,
    session: UserSession = Depends(require_company),
    db: Session = Depends(get_db),
):
    service = triage_catalog_service.create_service(db, session.user_id, data)
    db.commit()
    return service


@router.patch(
    "/services/{service_id}",
    response_model=TriageServiceRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_service(
    service_id: int,
    data: TriageServiceUpdate,
    session: UserSession = Depends(require_company),
    db: Session = Depends(get_db),
):
    service = triage_catalog_service.update_service(db, session.user_id, service_id, data)
    db.commit()
    return service


# =============================================================================
# Subscriptions
# =============================================================================


@router.get("/subscriptions", response_model=list[SubscriptionRead])
def list_subscriptions(
    session: UserSession = Depends(require_company),
    db: Session = Depends(get_db),
):
    return triage_catalog_service.list_subscriptions(db, session.user_id)


@router.post(
    "/subscriptions",
    response_model=SubscriptionRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_csrf_header)],
)
def create_subscription(
    data: SubscriptionCreate,
    session: UserSession = Depends(require_company),
    db: Session = Depends(get_db),
):
    subscription = triage_catalog_service.create_subscription(
        db, session.user_id, data.triage_service_id
    )
    db.commit()
    return subscription


# =============================================================================
# Triage reports
# =============================================================================


@router.get("/reports", response_model=list[ReviewPublicRead])
def list_reports(
    status_filter: str | None = Query(None, alias="status"),
    pagination: PaginationParams = Depends(get_pagination),
    session: UserSession = Depends(require_company),
    db: Session = Depends(get_db),
):
    reports, _total = triage_catalog_service.list_triage_reports(
        db,
        session.user_id,
        status=status_filter,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return reports


@router.post(
    "/reports",
    response_model=ReviewPublicRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_csrf_header)],
)
def open_report(
    data: TriageReportCreate,
    session: UserSession = Depends(require_company),
    db: Session = Depends(get_db),
):
    """Send one of the company's submissions to triage."""
    review = triage_catalog_service.open_triage_report(
        db,
        data.submission_id,
        session.user_id,
        data.triage_service_id,
        session.user_id,
    )
    db.commit()
    return review


@router.get("/reports/{review_id}", response_model=ReviewPublicRead)
def get_report(
    review_id: int,
    session: UserSession = Depends(require_company),
    db: Session = Depends(get_db),
):
    return triage_catalog_service.get_triage_report(db, session.user_id, review_id)


@router.get("/reports/{review_id}/comments", response_model=list[CommentRead])
def list_report_comments(
    review_id: int,
    session: UserSession = Depends(require_company),
    db: Session = Depends(get_db),
):
    """Public thread of a triage report; internal comments stay with staff."""
    triage_catalog_service.get_triage_report(db, session.user_id, review_id)
    return comment_service.list_comments(db, review_id, comment_type=CommentType.PUBLIC)


@router.post(
    "/reports/{review_id}/comments",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_csrf_header)],
)
def add_report_comment(
    review_id: int,
    data: PublicCommentCreate,
    session: UserSession = Depends(require_company),
    db: Session = Depends(get_db),
):
    triage_catalog_service.get_triage_report(db, session.user_id, review_id)
    comment = comment_service.add_comment(
        db,
        review_id,
        session.user_id,
        data.content,
        CommentType.PUBLIC,
        author_name=session.username,
    )
    db.commit()
    return comment
