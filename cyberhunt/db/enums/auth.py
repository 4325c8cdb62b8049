"""Auth-related enums."""

from enum import Enum


class Role(str, Enum):
    """
    Marketplace roles carried in the session token.

    - HACKER: Security researcher submitting reports
    - COMPANY: Program owner buying triage services
    - ANALYST: Staff reviewer working assigned reviews
    - ADMIN: Staff lead (team management, audit, any review)
    """

    HACKER = "hacker"
    COMPANY = "company"
    ANALYST = "analyst"
    ADMIN = "admin"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_


STAFF_ROLES = frozenset({Role.ANALYST, Role.ADMIN})
