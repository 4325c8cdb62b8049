"""Authentication-related Pydantic schemas."""

from pydantic import BaseModel

from cyberhunt.db.enums import Role, STAFF_ROLES


class UserSession(BaseModel):
    """
    Session context for authenticated requests.

    Returned by the get_current_session dependency; every service call takes
    the acting user id from here explicitly.
    """
    user_id: int
    role: Role  # Validated enum
    username: str
    via_cookie: bool = True

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
