"""API-specific test fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from sitecms.api.deps import get_email_service
from sitecms.core.config import get_settings
from sitecms.services.email_service import EmailService


class OutboxTransport:
    """Collects messages instead of talking to an SMTP server."""

    def __init__(self):
        self.messages = []

    def __call__(self, config, message, timeout):
        self.messages.append(message)
        return f"<{len(self.messages)}@test>"


@pytest.fixture
def outbox() -> OutboxTransport:
    return OutboxTransport()


@pytest.fixture
def app(engine, outbox, monkeypatch):
    """Application wired to the test database and the in-memory outbox.

    The lifespan does not run under ASGITransport, so the engine fixture's
    global session factory is what the routes use.
    """
    from sitecms.main import create_app

    monkeypatch.setattr(get_settings(), "admin_api_token", "")

    application = create_app()
    application.dependency_overrides[get_email_service] = lambda: EmailService(transport=outbox, backoff_min=0)
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncClient:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
