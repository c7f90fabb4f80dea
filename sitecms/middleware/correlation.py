"""Request correlation ids.

Every response carries ``X-Request-ID`` (echoed from the client or freshly
generated). Outbound calls the service makes back into its own API forward
the id so both hops log under one correlation id.
"""

import uuid

from asgi_correlation_id import CorrelationIdMiddleware
from asgi_correlation_id.context import correlation_id
from fastapi import FastAPI

REQUEST_ID_HEADER = "X-Request-ID"


def setup_correlation_middleware(app: FastAPI) -> None:
    app.add_middleware(
        CorrelationIdMiddleware,
        header_name=REQUEST_ID_HEADER,
        generator=lambda: str(uuid.uuid4()),
        # Client ids are echoed as-is, whatever their format
        validator=None,
        transformer=lambda a: a,
    )


def get_correlation_id() -> str | None:
    """Current request's correlation id, or None outside a request."""
    return correlation_id.get(None)


def correlation_headers() -> dict[str, str]:
    """Headers that carry the current correlation id to an outbound request."""
    cid = get_correlation_id()
    return {REQUEST_ID_HEADER: cid} if cid else {}


__all__ = ["REQUEST_ID_HEADER", "correlation_headers", "get_correlation_id", "setup_correlation_middleware"]
