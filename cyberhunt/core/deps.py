"""FastAPI dependencies for authentication, authorization, and database access."""

from typing import Callable, Generator

import jwt
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from cyberhunt.core.security import decode_session_token
from cyberhunt.db.enums import Role, STAFF_ROLES
from cyberhunt.db.session import SessionLocal
from cyberhunt.schemas.auth import UserSession


# Cookie and header names
COOKIE_NAME = "cyberhunt_session"
CSRF_HEADER = "X-Requested-With"
CSRF_HEADER_VALUE = "XMLHttpRequest"


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session; anything not committed by the endpoint is
    rolled back when the request ends, so a failed mutation leaves no
    partial state behind.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def _extract_token(request: Request) -> tuple[str | None, bool]:
    """Return (token, from_cookie)."""
    auth_header = request.headers.get("authorization", "")
    if auth_header.lower().startswith("bearer "):
        return auth_header[7:].strip() or None, False
    return request.cookies.get(COOKIE_NAME), True


def get_current_session(request: Request) -> UserSession:
    """
    Get session context: user_id, role, username.

    This is the PRIMARY auth dependency for every endpoint. Sessions are
    issued by the identity service; this only verifies them.

    Raises:
        HTTPException 401: Not authenticated / invalid token
        HTTPException 403: Unknown role
    """
    token, from_cookie = _extract_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = decode_session_token(token)
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid session")

    role = payload.get("role")
    if not role or not Role.has_value(role):
        raise HTTPException(
            status_code=403,
            detail=f"Unknown role '{role}'. Contact administrator.",
        )

    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid session")

    return UserSession(
        user_id=user_id,
        role=Role(role),
        username=payload.get("username") or f"user-{user_id}",
        via_cookie=from_cookie,
    )


def require_csrf_header(
    request: Request,
    session: UserSession = Depends(get_current_session),
) -> None:
    """
    Require the X-Requested-With header on cookie-authenticated mutations.

    Bearer-token clients are not exposed to CSRF and skip the check.
    """
    if not session.via_cookie:
        return
    if request.headers.get(CSRF_HEADER) != CSRF_HEADER_VALUE:
        raise HTTPException(status_code=403, detail="Missing CSRF header")


def require_roles(*roles: Role) -> Callable[..., UserSession]:
    """
    Dependency factory: allow only sessions with one of the given roles.

    Usage:
        session: UserSession = Depends(require_roles(Role.ADMIN))
    """
    allowed = frozenset(roles)

    def _check(session: UserSession = Depends(get_current_session)) -> UserSession:
        if session.role not in allowed:
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return session

    return _check


require_staff = require_roles(*STAFF_ROLES)
require_admin = require_roles(Role.ADMIN)
require_company = require_roles(Role.COMPANY)
