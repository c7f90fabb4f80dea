"""Admin API guard.

A shared token in the ``X-Admin-Token`` header. Session login for the admin
panel is handled outside this service.
"""

import hmac

from fastapi import Header, HTTPException

from sitecms.core.config import get_settings


async def require_admin(x_admin_token: str | None = Header(default=None)) -> None:
    """Reject admin requests without the configured token.

    An empty ``admin_api_token`` setting leaves the admin API open (local dev).
    """
    expected = get_settings().admin_api_token
    if not expected:
        return
    if not x_admin_token or not hmac.compare_digest(x_admin_token, expected):
        raise HTTPException(status_code=401, detail="Admin token missing or invalid")
