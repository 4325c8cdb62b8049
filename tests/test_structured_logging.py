from cyberhunt.core.structured_logging import build_log_context


def test_build_log_context_keeps_identifiers_only():
    context = build_log_context(
        actor_id=1, review_id=2, reviewer_id=None, route="/reviews/2", method="PATCH"
    )
    assert context == {"actor_id": 1, "review_id": 2, "route": "/reviews/2", "method": "PATCH"}


def test_build_log_context_empty():
    assert build_log_context() == {}
