"""Triage service catalog, subscriptions and triage report intake.

Companies configure triage offerings (pricing, SLA, auto-assignment) and
subscribe to them. Each triage report opened for a company is charged to its
active subscription for that service: the billing cycle is rolled forward
when due, the monthly report allowance is enforced, and per-report prices
are added to the running total. All amounts are integer cents.
"""

import calendar
import logging
from datetime import datetime, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from cyberhunt.core.structured_logging import build_log_context
from cyberhunt.db.enums import (
    PricingModel,
    ReviewPriority,
    ReviewQueue,
    SubmissionSeverity,
    SubscriptionStatus,
)
from cyberhunt.db.models import Review, Submission, TriageService, TriageSubscription
from cyberhunt.schemas.triage import TriageServiceCreate, TriageServiceUpdate
from cyberhunt.services import assignment_service, review_service
from cyberhunt.services.workflow_errors import (
    NotFoundError,
    QuotaExceededError,
    ValidationError,
)
from cyberhunt.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

SEVERITY_PRIORITY = {
    SubmissionSeverity.CRITICAL.value: ReviewPriority.CRITICAL,
    SubmissionSeverity.HIGH.value: ReviewPriority.HIGH,
    SubmissionSeverity.MEDIUM.value: ReviewPriority.MEDIUM,
    SubmissionSeverity.LOW.value: ReviewPriority.LOW,
    SubmissionSeverity.INFO.value: ReviewPriority.LOW,
}


# =============================================================================
# Billing helpers
# =============================================================================


def add_months(value: datetime, months: int) -> datetime:
    """Shift by calendar months, clamping the day to the target month's end."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def billing_period_months(service: TriageService) -> int:
    return 12 if service.pricing_model == PricingModel.ANNUAL.value else 1


def recurring_fee(service: TriageService) -> int:
    """Fee charged at the start of each billing cycle (cents)."""
    if service.pricing_model == PricingModel.MONTHLY.value:
        return service.monthly_price
    if service.pricing_model == PricingModel.ANNUAL.value:
        return service.annual_price
    return 0


def _months_between(start: datetime, end: datetime) -> int:
    return (end.year - start.year) * 12 + (end.month - start.month)


def _validate_service_values(values: dict) -> None:
    for field in ("price_per_report", "monthly_price", "annual_price"):
        if values.get(field) is not None and values[field] < 0:
            raise ValidationError(f"{field} must be >= 0")
    for field in ("max_reports_per_month", "response_time_hours"):
        if field in values and (values[field] is None or values[field] < 1):
            raise ValidationError(f"{field} must be >= 1")


def _enum_values(values: dict) -> dict:
    return {k: getattr(v, "value", v) for k, v in values.items()}


# =============================================================================
# Service catalog
# =============================================================================


def create_service(db: Session, company_id: int, data: TriageServiceCreate) -> TriageService:
    """Create a triage service for a company."""
    values = _enum_values(data.model_dump())
    _validate_service_values(values)
    values["included_services"] = sorted(set(values.get("included_services") or []))

    service = TriageService(company_id=company_id, is_active=True, **values)
    db.add(service)
    db.flush()
    logger.info(
        "Triage service created",
        extra=build_log_context(actor_id=company_id),
    )
    return service


def get_service(db: Session, company_id: int, service_id: int) -> TriageService:
    """Company-scoped lookup; another company's service is reported as missing."""
    service = db.query(TriageService).filter(
        TriageService.id == service_id,
        TriageService.company_id == company_id,
    ).first()
    if not service:
        raise NotFoundError(f"Triage service {service_id} not found")
    return service


def update_service(
    db: Session,
    company_id: int,
    service_id: int,
    patch: TriageServiceUpdate,
) -> TriageService:
    """Update a triage service (partial)."""
    service = get_service(db, company_id, service_id)
    changes = _enum_values(patch.model_dump(exclude_unset=True))
    _validate_service_values(changes)

    for field, value in changes.items():
        if field == "included_services":
            value = sorted(set(value or []))
        elif value is None:
            continue
        setattr(service, field, value)

    db.flush()
    return service


def list_services(
    db: Session,
    company_id: int,
    include_inactive: bool = False,
) -> list[TriageService]:
    query = db.query(TriageService).filter(TriageService.company_id == company_id)
    if not include_inactive:
        query = query.filter(TriageService.is_active.is_(True))
    return query.order_by(TriageService.id).all()


def find_auto_triage_service(db: Session, company_id: int) -> TriageService | None:
    """First active auto-assigning service of a company (lowest id)."""
    return (
        db.query(TriageService)
        .filter(
            TriageService.company_id == company_id,
            TriageService.is_active.is_(True),
            TriageService.auto_assign_triage.is_(True),
        )
        .order_by(TriageService.id)
        .first()
    )


# =============================================================================
# Subscriptions
# =============================================================================


def create_subscription(
    db: Session,
    company_id: int,
    triage_service_id: int,
    now: datetime | None = None,
) -> TriageSubscription:
    """
    Subscribe a company to one of its active triage services.

    The first billing cycle starts now; recurring plans are charged their
    fee up front, per-report plans start at zero.
    """
    service = get_service(db, company_id, triage_service_id)
    if not service.is_active:
        raise ValidationError(f"Triage service {triage_service_id} is inactive")

    now = now or utcnow()
    subscription = TriageSubscription(
        company_id=company_id,
        triage_service_id=service.id,
        status=SubscriptionStatus.ACTIVE.value,
        billing_cycle_start=now,
        next_billing_date=add_months(now, billing_period_months(service)),
        reports_processed=0,
        total_cost=recurring_fee(service),
        created_at=now,
        updated_at=now,
    )
    subscription.service = service
    db.add(subscription)
    db.flush()
    return subscription


def list_subscriptions(db: Session, company_id: int) -> list[TriageSubscription]:
    return (
        db.query(TriageSubscription)
        .filter(TriageSubscription.company_id == company_id)
        .order_by(TriageSubscription.id)
        .all()
    )


def get_active_subscription(
    db: Session,
    company_id: int,
    triage_service_id: int,
) -> TriageSubscription | None:
    """Active subscription for a company/service pair, locked for charging."""
    return db.execute(
        select(TriageSubscription)
        .where(
            TriageSubscription.company_id == company_id,
            TriageSubscription.triage_service_id == triage_service_id,
            TriageSubscription.status == SubscriptionStatus.ACTIVE.value,
        )
        .order_by(TriageSubscription.id)
        .limit(1)
        .with_for_update(of=TriageSubscription)
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()


def _roll_billing_cycle(subscription: TriageSubscription, now: datetime) -> None:
    service = subscription.service
    step = billing_period_months(service)
    # Cycles are counted from the subscription start so clamped days do not drift
    anchor = subscription.created_at
    elapsed = _months_between(anchor, subscription.next_billing_date)
    while now >= subscription.next_billing_date:
        subscription.billing_cycle_start = subscription.next_billing_date
        elapsed += step
        subscription.next_billing_date = add_months(anchor, elapsed)
        subscription.reports_processed = 0
        subscription.total_cost += recurring_fee(service)


def record_report_processed(
    db: Session,
    subscription: TriageSubscription,
    now: datetime | None = None,
) -> TriageSubscription:
    """
    Charge one triage report to a subscription.

    Raises:
        QuotaExceededError: the cycle's report allowance is used up. Nothing
            is changed in that case.
    """
    now = now or utcnow()
    service = subscription.service

    _roll_billing_cycle(subscription, now)

    if subscription.reports_processed >= service.max_reports_per_month:
        raise QuotaExceededError(
            f"Subscription {subscription.id} has used its "
            f"{service.max_reports_per_month} reports for this cycle"
        )

    subscription.reports_processed += 1
    if service.pricing_model == PricingModel.PER_REPORT.value:
        subscription.total_cost += service.price_per_report
    subscription.updated_at = now
    db.flush()
    return subscription


# =============================================================================
# Triage reports (company-facing reviews)
# =============================================================================


def open_triage_report(
    db: Session,
    submission_id: int,
    company_id: int,
    triage_service_id: int,
    actor_id: int | None,
    now: datetime | None = None,
) -> Review:
    """
    Open a triage-queue review for one of a company's submissions.

    The subscription is charged before anything else is written, so a quota
    failure leaves no trace. The review's SLA comes from the service's
    response time; auto-assigning services hand it straight to a reviewer.
    """
    service = get_service(db, company_id, triage_service_id)
    if not service.is_active:
        raise ValidationError(f"Triage service {triage_service_id} is inactive")

    submission = db.get(Submission, submission_id)
    if not submission or submission.program.company_id != company_id:
        raise NotFoundError(f"Submission {submission_id} not found")

    now = now or utcnow()
    subscription = get_active_subscription(db, company_id, service.id)
    if subscription:
        record_report_processed(db, subscription, now)

    review = review_service.create_review(
        db,
        submission_id,
        actor_id,
        queue=ReviewQueue.TRIAGE,
        priority=SEVERITY_PRIORITY.get(submission.severity, ReviewPriority.MEDIUM),
        due_date=now + timedelta(hours=service.response_time_hours),
        company_id=company_id,
        triage_service_id=service.id,
    )

    if service.auto_assign_triage:
        assignment_service.auto_assign(db, review.id, actor_id)

    logger.info(
        "Triage report opened",
        extra=build_log_context(
            actor_id=actor_id, review_id=review.id, submission_id=submission_id
        ),
    )
    return review


def list_triage_reports(
    db: Session,
    company_id: int,
    status: str | None = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[Review], int]:
    return review_service.list_reviews(
        db,
        queue=ReviewQueue.TRIAGE.value,
        company_id=company_id,
        status=status,
        limit=limit,
        offset=offset,
    )


def get_triage_report(db: Session, company_id: int, review_id: int) -> Review:
    review = review_service.get_review(db, review_id)
    if (
        not review
        or review.queue != ReviewQueue.TRIAGE.value
        or review.company_id != company_id
    ):
        raise NotFoundError(f"Triage report {review_id} not found")
    return review
