"""
Test configuration and fixtures.

Provides:
- A temporary SQLite database, schema recreated for every test
- Factories for programs, submissions, reviewers and reviews
- JWT token minting for hacker/company/analyst/admin sessions
- HTTPX AsyncClients with session cookie and CSRF header
"""
import os
import tempfile
from dataclasses import dataclass
from typing import AsyncGenerator, Generator

# Point the app at a throwaway database before anything imports settings
_TEST_DB_DIR = tempfile.mkdtemp(prefix="cyberhunt-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DB_DIR}/test.db"
os.environ["ENV"] = "test"
os.environ["TESTING"] = "1"
os.environ["SENTRY_DSN"] = ""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

import cyberhunt.db.models  # noqa: F401 - registers tables on Base.metadata
from cyberhunt.core.deps import COOKIE_NAME, get_db
from cyberhunt.core.security import create_session_token
from cyberhunt.db.base import Base
from cyberhunt.db.enums import Role
from cyberhunt.db.models import Program, Review, Submission, TeamMember
from cyberhunt.db.session import SessionLocal, engine
from cyberhunt.main import app


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Fresh schema and a session for each test.

    App code commits for real; isolation comes from recreating the tables.
    """
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.rollback()
    session.close()


# =============================================================================
# Domain Factories
# =============================================================================

COMPANY_USER_ID = 500
HACKER_USER_ID = 100
ANALYST_USER_ID = 200
ADMIN_USER_ID = 300


@pytest.fixture
def program(db: Session) -> Program:
    program = Program(name="Acme Web", company_id=COMPANY_USER_ID)
    db.add(program)
    db.commit()
    return program


@pytest.fixture
def make_submission(db: Session, program: Program):
    def _make(
        title: str = "Stored XSS in profile",
        type: str = "XSS",
        severity: str = "high",
        reporter_id: int = HACKER_USER_ID,
        description: str = "Script runs when profile is viewed",
    ) -> Submission:
        submission = Submission(
            title=title,
            description=description,
            type=type,
            severity=severity,
            program_id=program.id,
            reporter_id=reporter_id,
        )
        db.add(submission)
        db.commit()
        return submission

    return _make


@pytest.fixture
def make_reviewer(db: Session):
    counter = {"next": 1000}

    def _make(
        username: str = "reviewer",
        specializations: list[str] | None = None,
        max_assignments: int = 10,
        user_id: int | None = None,
        is_active: bool = True,
    ) -> TeamMember:
        if user_id is None:
            counter["next"] += 1
            user_id = counter["next"]
        member = TeamMember(
            user_id=user_id,
            username=username,
            specializations=specializations if specializations is not None else ["XSS"],
            max_assignments=max_assignments,
            is_active=is_active,
        )
        db.add(member)
        db.commit()
        return member

    return _make


@pytest.fixture
def make_review(db: Session, make_submission):
    from cyberhunt.services import review_service

    def _make(**submission_kwargs) -> Review:
        submission = make_submission(**submission_kwargs)
        review = review_service.create_review(db, submission.id, ADMIN_USER_ID)
        db.commit()
        return review

    return _make


# =============================================================================
# Auth Fixtures
# =============================================================================

@dataclass
class TestAuth:
    """Test authentication context."""
    user_id: int
    role: Role
    username: str
    token: str
    cookie_name: str = COOKIE_NAME


def _auth(user_id: int, role: Role, username: str) -> TestAuth:
    token = create_session_token(user_id=user_id, role=role.value, username=username)
    return TestAuth(user_id=user_id, role=role, username=username, token=token)


@pytest.fixture
def hacker_auth() -> TestAuth:
    return _auth(HACKER_USER_ID, Role.HACKER, "hacker")


@pytest.fixture
def company_auth() -> TestAuth:
    return _auth(COMPANY_USER_ID, Role.COMPANY, "acme")


@pytest.fixture
def analyst_auth() -> TestAuth:
    return _auth(ANALYST_USER_ID, Role.ANALYST, "analyst")


@pytest.fixture
def admin_auth() -> TestAuth:
    return _auth(ADMIN_USER_ID, Role.ADMIN, "admin")


# =============================================================================
# Client Fixtures
# =============================================================================

def _override_db(db: Session):
    def override_get_db():
        try:
            yield db
        except Exception:
            db.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db


async def _authed(db: Session, auth: TestAuth) -> AsyncGenerator[AsyncClient, None]:
    _override_db(db)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies={auth.cookie_name: auth.token},
        headers={"X-Requested-With": "XMLHttpRequest"},  # CSRF header
    ) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated AsyncClient for public endpoints."""
    _override_db(db)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def admin_client(db: Session, admin_auth: TestAuth) -> AsyncGenerator[AsyncClient, None]:
    async for c in _authed(db, admin_auth):
        yield c


@pytest.fixture
async def analyst_client(db: Session, analyst_auth: TestAuth) -> AsyncGenerator[AsyncClient, None]:
    async for c in _authed(db, analyst_auth):
        yield c


@pytest.fixture
async def hacker_client(db: Session, hacker_auth: TestAuth) -> AsyncGenerator[AsyncClient, None]:
    async for c in _authed(db, hacker_auth):
        yield c


@pytest.fixture
async def company_client(db: Session, company_auth: TestAuth) -> AsyncGenerator[AsyncClient, None]:
    async for c in _authed(db, company_auth):
        yield c
