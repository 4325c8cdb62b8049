"""Security utilities for JWT session tokens."""

from datetime import datetime, timedelta, timezone

import jwt

from cyberhunt.core.config import settings


# =============================================================================
# Session Token (JWT in cookie or bearer header)
# =============================================================================

def create_session_token(
    user_id: int,
    role: str,
    username: str,
) -> str:
    """
    Create signed session JWT.

    Sessions are issued by the identity service; this is used by the CLI
    (development tokens) and the test suite. Always signs with the current
    secret (JWT_SECRET).
    """
    payload = {
        "sub": str(user_id),
        "role": role,
        "username": username,
        "iat": datetime.now(timezone.utc),
        "exp": datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRES_HOURS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")


def decode_session_token(token: str) -> dict:
    """
    Decode and verify session JWT.

    Tries current secret first, then previous (for rotation support).
    This allows zero-downtime secret rotation.

    Raises:
        jwt.InvalidTokenError: If token invalid with all secrets
    """
    last_error = None
    for secret in settings.jwt_secrets:
        try:
            return jwt.decode(token, secret, algorithms=["HS256"])
        except jwt.InvalidTokenError as e:
            last_error = e
            continue
    raise last_error  # type: ignore
