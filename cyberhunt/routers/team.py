"""Review team management endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cyberhunt.core.deps import get_db, require_admin, require_csrf_header, require_staff
from cyberhunt.schemas.auth import UserSession
from cyberhunt.schemas.team import (
    DeactivateResponse,
    TeamMemberCreate,
    TeamMemberRead,
    TeamMemberUpdate,
)
from cyberhunt.services import assignment_service, team_service

router = APIRouter()


@router.get("", response_model=list[TeamMemberRead])
def list_members(
    department: str | None = None,
    include_inactive: bool = False,
    session: UserSession = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return team_service.list_members(db, department, include_inactive)


@router.get("/available", response_model=list[TeamMemberRead])
def list_available(
    specialization: str | None = None,
    session: UserSession = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Active reviewers with spare capacity, least loaded first."""
    return assignment_service.list_available_reviewers(db, specialization)


@router.post(
    "",
    response_model=TeamMemberRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_csrf_header)],
)
def create_member(
    data: TeamMemberCreate,
    session: UserSession = Depends(require_admin),
    db: Session = Depends(get_db),
):
    member = team_service.create_member(db, data)
    db.commit()
    return member


@router.get("/{member_id}", response_model=TeamMemberRead)
def get_member(
    member_id: int,
    session: UserSession = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return team_service.get_member(db, member_id)


@router.patch(
    "/{member_id}",
    response_model=TeamMemberRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_member(
    member_id: int,
    data: TeamMemberUpdate,
    session: UserSession = Depends(require_admin),
    db: Session = Depends(get_db),
):
    member = team_service.update_member(db, member_id, data, session.user_id)
    db.commit()
    return member


@router.delete(
    "/{member_id}",
    response_model=DeactivateResponse,
    dependencies=[Depends(require_csrf_header)],
)
def deactivate_member(
    member_id: int,
    session: UserSession = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Deactivate (soft delete) a reviewer and return its open reviews to the pool."""
    member, unassigned = team_service.deactivate_member(db, member_id, session.user_id)
    db.commit()
    return DeactivateResponse(
        member=TeamMemberRead.model_validate(member),
        unassigned_review_ids=unassigned,
    )
