"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from cyberhunt.core.config import settings
from cyberhunt.core.structured_logging import build_log_context, configure_logging
from cyberhunt.db.session import engine
from cyberhunt.services.workflow_errors import ReviewWorkflowError

configure_logging()
logger = logging.getLogger(__name__)

# ============================================================================
# Sentry Integration (optional, for production error tracking)
# ============================================================================

if settings.SENTRY_DSN and settings.ENV != "dev":
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENV,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,  # 10% of requests for performance monitoring
        send_default_pii=False,  # Don't send PII to Sentry
    )
    logging.info("Sentry initialized for error tracking")

# ============================================================================
# Rate Limiting
# ============================================================================

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from cyberhunt.core.rate_limit import limiter

# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="CyberHunt Review API",
    description="Review and triage workflow for bug bounty submissions",
    version=settings.VERSION,
    docs_url="/docs" if settings.ENV == "dev" else None,
    redoc_url="/redoc" if settings.ENV == "dev" else None,
)

# Add rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# CORS middleware - must be added before routers
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,  # Required for cookies
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)


@app.exception_handler(ReviewWorkflowError)
async def workflow_error_handler(request: Request, exc: ReviewWorkflowError):
    """Map service-layer workflow errors to HTTP responses."""
    logger.info(
        "Workflow error %s: %s",
        exc.code,
        exc,
        extra=build_log_context(route=request.url.path, method=request.method),
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": str(exc), "error": exc.code},
    )


# ============================================================================
# Routers
# ============================================================================

from cyberhunt.routers import audit, comments, notifications, reviews, submissions, team, triage

app.include_router(submissions.programs_router, prefix="/programs", tags=["programs"])
app.include_router(submissions.router, prefix="/submissions", tags=["submissions"])

# Review workflow (staff)
app.include_router(reviews.router, prefix="/reviews", tags=["reviews"])
app.include_router(comments.router, prefix="/comments", tags=["comments"])
app.include_router(team.router, prefix="/team", tags=["team"])

# Audit trail and event outbox (admin)
app.include_router(audit.router, tags=["audit"])

# Notifications (user-scoped)
app.include_router(notifications.router, prefix="/me", tags=["notifications"])

# Company triage services
app.include_router(triage.router, prefix="/triage", tags=["triage"])


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
def health():
    """
    Health check endpoint.

    Verifies database connectivity and returns environment info.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}
