"""FastAPI dependencies for services shared by several routers.

Tests swap these through ``app.dependency_overrides``.
"""

from collections.abc import AsyncIterator

from fastapi import Depends, Request

from sitecms.core.config import get_settings
from sitecms.db.base import get_session_factory
from sitecms.services.email_service import EmailService
from sitecms.services.form_service import FormSubmissionService
from sitecms.services.page_sources import EntityStoreSectionSource, SectionSource


def get_email_service() -> EmailService:
    settings = get_settings()
    return EmailService(
        timeout=settings.smtp_timeout_seconds,
        max_attempts=settings.email_max_attempts,
    )


def get_form_service(email_service: EmailService = Depends(get_email_service)) -> FormSubmissionService:
    return FormSubmissionService(email_service)


async def get_section_source(request: Request) -> AsyncIterator[SectionSource]:
    """Section source for one request.

    In ``api`` mode the app-wide HTTP source is shared so its stale-response
    sequencing spans requests; otherwise each request reads the database
    through its own session.
    """
    api_source = getattr(request.app.state, "api_section_source", None)
    if api_source is not None:
        yield api_source
        return

    factory = get_session_factory()
    async with factory() as session:
        yield EntityStoreSectionSource(session)
