"""Tests for submission intake and auto-triage."""

import logging

import pytest

from cyberhunt.db.models import Program, Review
from cyberhunt.schemas.submission import SubmissionCreate
from cyberhunt.schemas.triage import TriageServiceCreate
from cyberhunt.services import submission_service, triage_catalog_service
from cyberhunt.services.workflow_errors import NotFoundError

HACKER = 100
COMPANY = 500


def _payload(program_id, **overrides):
    data = {
        "program_id": program_id,
        "title": "  SQLi in search  ",
        "description": "id=1' OR '1'='1",
        "type": "SQL Injection",
        "severity": "critical",
        **overrides,
    }
    return SubmissionCreate(**data)


def test_create_submission_without_triage(db, program):
    submission = submission_service.create_submission(db, HACKER, _payload(program.id))
    db.commit()

    assert submission.title == "SQLi in search"
    assert submission.status == "pending"
    assert submission.reporter_id == HACKER
    assert db.query(Review).count() == 0


def test_create_submission_unknown_program(db):
    with pytest.raises(NotFoundError):
        submission_service.create_submission(db, HACKER, _payload(12345))


def test_create_submission_inactive_program(db):
    program = Program(name="Closed", company_id=COMPANY, is_active=False)
    db.add(program)
    db.commit()
    with pytest.raises(NotFoundError):
        submission_service.create_submission(db, HACKER, _payload(program.id))


def test_auto_triage_opens_review(db, program, make_reviewer):
    triage_catalog_service.create_service(
        db,
        COMPANY,
        TriageServiceCreate(
            service_name="Auto", auto_assign_triage=True, response_time_hours=12
        ),
    )
    reviewer = make_reviewer(specializations=["sql injection"])
    db.commit()

    submission = submission_service.create_submission(db, HACKER, _payload(program.id))
    db.commit()

    review = db.query(Review).filter(Review.submission_id == submission.id).one()
    assert review.queue == "triage"
    assert review.priority == "critical"
    assert review.status == "assigned"
    assert review.reviewer_id == reviewer.id


def test_auto_triage_quota_exhausted_keeps_submission(db, program, caplog):
    service = triage_catalog_service.create_service(
        db,
        COMPANY,
        TriageServiceCreate(
            service_name="Auto", auto_assign_triage=True, max_reports_per_month=1
        ),
    )
    triage_catalog_service.create_subscription(db, COMPANY, service.id)
    db.commit()

    first = submission_service.create_submission(db, HACKER, _payload(program.id))
    db.commit()
    with caplog.at_level(logging.WARNING):
        second = submission_service.create_submission(
            db, HACKER, _payload(program.id, title="Second")
        )
    db.commit()

    assert db.query(Review).filter(Review.submission_id == first.id).count() == 1
    assert db.query(Review).filter(Review.submission_id == second.id).count() == 0
    assert second.id is not None
    assert "quota exhausted" in caplog.text


def test_list_programs_filters(db, program):
    db.add(Program(name="Other", company_id=COMPANY + 1))
    db.add(Program(name="Old", company_id=COMPANY, is_active=False))
    db.commit()

    assert [p.id for p in submission_service.list_programs(db, COMPANY)] == [program.id]
    assert len(submission_service.list_programs(db)) == 2
    assert len(submission_service.list_programs(db, COMPANY, include_inactive=True)) == 2
