"""Tests for the structlog processors and correlation id forwarding."""

import httpx
import pytest
from asgi_correlation_id.context import correlation_id

from sitecms.core.logging import REDACTED, add_correlation_id, add_service_name, redact_secrets
from sitecms.middleware.correlation import correlation_headers
from sitecms.services.page_sources import ApiSectionSource

pytestmark = pytest.mark.unit


def test_secrets_are_masked():
    event = redact_secrets(None, "info", {
        "event": "site_settings_updated",
        "smtp_password": "hunter2",
        "changes": {"smtp_password": "hunter2", "smtp_host": "smtp.example.com"},
        "admin_token": "",
    })

    assert event["smtp_password"] == REDACTED
    assert event["changes"] == {"smtp_password": REDACTED, "smtp_host": "smtp.example.com"}
    # Empty values stay visible so "not configured" is still diagnosable
    assert event["admin_token"] == ""


def test_service_name_and_correlation_id():
    token = correlation_id.set("req-1")
    try:
        event = add_correlation_id(None, "info", add_service_name(None, "info", {"event": "x"}))
        assert correlation_headers() == {"X-Request-ID": "req-1"}
    finally:
        correlation_id.reset(token)

    assert event == {"event": "x", "service": "sitecms", "correlation_id": "req-1"}
    assert correlation_headers() == {}


async def test_api_source_forwards_correlation_id():
    seen = []

    def handler(request):
        seen.append(request.headers.get("x-request-id"))
        return httpx.Response(404, json={"success": False})

    source = ApiSectionSource("http://cms.test", transport=httpx.MockTransport(handler))
    token = correlation_id.set("req-42")
    try:
        assert await source.load_page("home") is None
    finally:
        correlation_id.reset(token)
        await source.aclose()

    assert seen == ["req-42"]
