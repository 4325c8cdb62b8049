"""Review team management. Members are deactivated, never deleted."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cyberhunt.core.review_states import UNASSIGNABLE_STATUSES
from cyberhunt.core.structured_logging import build_log_context
from cyberhunt.db.models import Review, TeamMember
from cyberhunt.schemas.team import TeamMemberCreate, TeamMemberUpdate
from cyberhunt.services import assignment_service
from cyberhunt.services.workflow_errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _normalize_specializations(values: list[str] | None) -> list[str]:
    return sorted({v.strip() for v in values or [] if v and v.strip()})


def create_member(db: Session, data: TeamMemberCreate) -> TeamMember:
    """Register a staff user as a reviewer."""
    if data.max_assignments <= 0:
        raise ValidationError("max_assignments must be > 0")
    existing = db.query(TeamMember).filter(TeamMember.user_id == data.user_id).first()
    if existing:
        raise ValidationError(f"User {data.user_id} is already a team member")

    member = TeamMember(
        user_id=data.user_id,
        username=data.username.strip(),
        role=data.role,
        department=data.department,
        specializations=_normalize_specializations(data.specializations),
        max_assignments=data.max_assignments,
        current_assignments=0,
        is_active=True,
    )
    db.add(member)
    try:
        db.flush()
    except IntegrityError:
        raise ValidationError(f"User {data.user_id} is already a team member")
    return member


def list_members(
    db: Session,
    department: str | None = None,
    include_inactive: bool = False,
) -> list[TeamMember]:
    query = db.query(TeamMember)
    if department:
        query = query.filter(TeamMember.department == department)
    if not include_inactive:
        query = query.filter(TeamMember.is_active.is_(True))
    return query.order_by(TeamMember.username, TeamMember.id).all()


def get_member(db: Session, member_id: int) -> TeamMember:
    member = db.get(TeamMember, member_id)
    if not member:
        raise NotFoundError(f"Team member {member_id} not found")
    return member


def get_member_by_user(db: Session, user_id: int) -> TeamMember | None:
    return db.query(TeamMember).filter(TeamMember.user_id == user_id).first()


def update_member(
    db: Session,
    member_id: int,
    patch: TeamMemberUpdate,
    actor_id: int | None = None,
) -> TeamMember:
    """
    Update a team member (partial).

    max_assignments may not drop below the reviewer's current load.
    """
    member = get_member(db, member_id)
    changes = patch.model_dump(exclude_unset=True)

    new_max = changes.get("max_assignments")
    if new_max is not None:
        db.refresh(member)
        if new_max < member.current_assignments:
            raise ValidationError(
                f"max_assignments ({new_max}) is below current assignments "
                f"({member.current_assignments})"
            )
        member.max_assignments = new_max

    if changes.get("username") is not None:
        member.username = changes["username"].strip()
    if changes.get("role") is not None:
        member.role = changes["role"]
    if "department" in changes:
        member.department = changes["department"]
    if changes.get("specializations") is not None:
        member.specializations = _normalize_specializations(changes["specializations"])
    if changes.get("is_active") is False:
        return deactivate_member(db, member_id, actor_id)[0]
    if changes.get("is_active") is True:
        member.is_active = True

    try:
        db.flush()
    except IntegrityError:
        # CHECK constraint: a concurrent assign raised the load meanwhile
        raise ValidationError("max_assignments is below current assignments")
    return member


def deactivate_member(
    db: Session,
    member_id: int,
    actor_id: int | None,
) -> tuple[TeamMember, list[int]]:
    """
    Soft-delete a reviewer.

    Marks the member inactive and returns its open assigned/in_review/
    needs_info reviews to the pending pool.

    Returns:
        (member, unassigned_review_ids)
    """
    member = get_member(db, member_id)
    member.is_active = False
    db.flush()

    open_reviews = (
        db.query(Review.id)
        .filter(
            Review.reviewer_id == member_id,
            Review.status.in_([s.value for s in UNASSIGNABLE_STATUSES]),
        )
        .order_by(Review.id)
        .all()
    )
    unassigned = []
    for (review_id,) in open_reviews:
        assignment_service.unassign(db, review_id, actor_id)
        unassigned.append(review_id)

    db.refresh(member)
    logger.info(
        "Team member deactivated (%d reviews unassigned)",
        len(unassigned),
        extra=build_log_context(actor_id=actor_id, reviewer_id=member_id),
    )
    return member, unassigned
