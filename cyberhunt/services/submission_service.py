"""Program registry and submission intake."""

import logging

from sqlalchemy.orm import Session

from cyberhunt.core.structured_logging import build_log_context
from cyberhunt.db.enums import SubmissionStatus
from cyberhunt.db.models import Program, Submission
from cyberhunt.schemas.submission import SubmissionCreate
from cyberhunt.services import triage_catalog_service
from cyberhunt.services.workflow_errors import NotFoundError, QuotaExceededError

logger = logging.getLogger(__name__)


def create_program(db: Session, company_id: int, name: str) -> Program:
    program = Program(name=name.strip(), company_id=company_id, is_active=True)
    db.add(program)
    db.flush()
    return program


def list_programs(
    db: Session,
    company_id: int | None = None,
    include_inactive: bool = False,
) -> list[Program]:
    query = db.query(Program)
    if company_id is not None:
        query = query.filter(Program.company_id == company_id)
    if not include_inactive:
        query = query.filter(Program.is_active.is_(True))
    return query.order_by(Program.id).all()


def get_submission(db: Session, submission_id: int) -> Submission:
    submission = db.get(Submission, submission_id)
    if not submission:
        raise NotFoundError(f"Submission {submission_id} not found")
    return submission


def create_submission(db: Session, reporter_id: int, data: SubmissionCreate) -> Submission:
    """
    Record a researcher's submission against an active program.

    When the program's company runs an auto-triage service, a triage report
    is opened right away. A used-up triage quota does not fail the
    submission; it just stays without a review.
    """
    program = db.get(Program, data.program_id)
    if not program or not program.is_active:
        raise NotFoundError(f"Program {data.program_id} not found")

    submission = Submission(
        title=data.title.strip(),
        description=data.description,
        type=data.type.strip(),
        severity=data.severity.value,
        status=SubmissionStatus.PENDING.value,
        program_id=program.id,
        reporter_id=reporter_id,
    )
    db.add(submission)
    db.flush()

    service = triage_catalog_service.find_auto_triage_service(db, program.company_id)
    if service:
        try:
            triage_catalog_service.open_triage_report(
                db, submission.id, program.company_id, service.id, actor_id=None
            )
        except QuotaExceededError:
            # Quota is checked before anything is written, nothing to undo
            logger.warning(
                "Auto-triage skipped: subscription quota exhausted",
                extra=build_log_context(submission_id=submission.id),
            )

    logger.info(
        "Submission created",
        extra=build_log_context(actor_id=reporter_id, submission_id=submission.id),
    )
    return submission
