"""
Shared FastAPI dependencies.

- get_store: the process-wide ``Store`` (overridden in tests)
- get_request_context: who is calling, for audit stamping
"""

from __future__ import annotations

from fastapi import Request

from qc_tracker.core.database.session import get_store
from qc_tracker.core.keyed import RequestContext

USER_ID_HEADER = "X-User-Id"

__all__ = ["USER_ID_HEADER", "get_request_context", "get_store"]


def get_request_context(request: Request) -> RequestContext:
    """Build the request context from the authenticated user.

    Authentication itself happens upstream: an auth middleware sets
    ``request.state.user_id``, or a trusted proxy forwards the ``X-User-Id``
    header. Values that are not integers are treated as anonymous.
    """
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        user_id = request.headers.get(USER_ID_HEADER)
    if user_id is None:
        return RequestContext()
    try:
        return RequestContext(user_id=int(user_id))
    except (TypeError, ValueError):
        return RequestContext()
