"""UTC timestamp helpers."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def not_before(value: datetime, *floors: datetime | None) -> datetime:
    """Return value, raised to the latest non-null floor.

    Keeps lifecycle stamps monotonic (completed >= started >= created) even
    when the wall clock steps backwards between requests.
    """
    result = value
    for floor in floors:
        if floor is not None and floor > result:
            result = floor
    return result
