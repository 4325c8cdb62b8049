"""Structured logging helpers (free-text safe)."""

import logging
from typing import Any

from cyberhunt.core.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for the API process or CLI."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_log_context(
    *,
    actor_id: int | None = None,
    review_id: int | None = None,
    reviewer_id: int | None = None,
    submission_id: int | None = None,
    route: str | None = None,
    method: str | None = None,
) -> dict[str, Any]:
    """Return a log context dict with identifiers only (never notes or comment bodies)."""
    context: dict[str, Any] = {}
    if actor_id:
        context["actor_id"] = actor_id
    if review_id:
        context["review_id"] = review_id
    if reviewer_id:
        context["reviewer_id"] = reviewer_id
    if submission_id:
        context["submission_id"] = submission_id
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    return context
