"""Data-fetch adapters feeding the page composer.

Both adapters return the same wire shapes (``PageWithSections`` and
``PricingMatrix``), so the composer and the renderer map never know where
the data came from:

* ``EntityStoreSectionSource`` queries the database directly (server side).
* ``ApiSectionSource`` calls the admin/public JSON API over HTTP with a
  timeout, and discards responses that a newer load has superseded.
"""

from collections import defaultdict
from typing import Protocol

import httpx
import structlog
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from sitecms.core.exceptions import SectionSourceError, StaleResponseError
from sitecms.db.models.faq import FAQCategory, FAQSection, FAQSectionCategory
from sitecms.db.models.feature_group import FeatureGroup, FeatureGroupItem
from sitecms.db.models.form import Form
from sitecms.db.models.hero_section import HeroSection
from sitecms.db.models.media_section import MediaSection
from sitecms.db.models.page import Page, PageSection
from sitecms.domain.pricing import NO_PLANS_MESSAGE
from sitecms.middleware.correlation import correlation_headers
from sitecms.schemas.pages import PageRead, PageSectionRead, PageWithSections
from sitecms.schemas.pricing import PricingMatrix
from sitecms.services.pricing_service import PricingResolver

logger = structlog.get_logger(__name__)


def page_section_load_options():
    """Eager-load every content relation a page section can point at."""
    return (
        selectinload(PageSection.page),
        selectinload(PageSection.hero_section).options(
            selectinload(HeroSection.cta_primary),
            selectinload(HeroSection.cta_secondary),
        ),
        selectinload(PageSection.feature_group)
        .selectinload(FeatureGroup.items)
        .selectinload(FeatureGroupItem.feature),
        selectinload(PageSection.media_section).selectinload(MediaSection.features),
        selectinload(PageSection.pricing_section),
        selectinload(PageSection.faq_section)
        .selectinload(FAQSection.section_categories)
        .selectinload(FAQSectionCategory.category)
        .selectinload(FAQCategory.faqs),
        selectinload(PageSection.faq_category).selectinload(FAQCategory.faqs),
        selectinload(PageSection.form).selectinload(Form.fields),
        selectinload(PageSection.html_section),
    )


class SectionSource(Protocol):
    async def load_page(self, slug: str, slot: str | None = None) -> PageWithSections | None:
        """Page plus all of its section rows, or None for an unknown slug."""
        ...

    async def load_pricing(self, pricing_section_id: int, billing_cycle_id: str | None = None) -> PricingMatrix:
        ...


class EntityStoreSectionSource:
    """Reads pages straight from the database through the caller's session."""

    def __init__(self, session: AsyncSession, resolver: PricingResolver | None = None):
        self.session = session
        self.resolver = resolver or PricingResolver()

    async def load_page(self, slug: str, slot: str | None = None) -> PageWithSections | None:
        try:
            page = (
                await self.session.execute(select(Page).where(Page.slug == slug))
            ).scalar_one_or_none()
            if page is None:
                return None

            result = await self.session.execute(
                select(PageSection)
                .where(PageSection.page_id == page.id)
                .options(*page_section_load_options())
                .order_by(PageSection.sort_order, PageSection.id)
            )
            sections = result.scalars().all()
        except SQLAlchemyError as exc:
            raise SectionSourceError(f"Failed to load page '{slug}'") from exc

        return PageWithSections(
            page=PageRead.model_validate(page),
            sections=[PageSectionRead.model_validate(s) for s in sections],
        )

    async def load_pricing(self, pricing_section_id: int, billing_cycle_id: str | None = None) -> PricingMatrix:
        return await self.resolver.resolve(self.session, pricing_section_id, billing_cycle_id)


def _parse_section(raw) -> tuple[PageSectionRead, str | None]:
    """Validate one section row from the API.

    When only the nested content is malformed the row's own columns are kept
    and the validation message is returned with it, so the composer can place
    an error block where the section belongs. A row without usable columns
    raises SectionSourceError.
    """
    try:
        return PageSectionRead.model_validate(raw), None
    except ValidationError as exc:
        if not isinstance(raw, dict):
            raise SectionSourceError("Section payload is not an object") from exc
        error = str(exc)

    columns = {key: value for key, value in raw.items() if not isinstance(value, (dict, list))}
    try:
        return PageSectionRead.model_validate(columns), error
    except ValidationError as exc:
        raise SectionSourceError(f"Section row is unreadable: {exc}") from exc


class RequestSequencer:
    """Monotonic request numbers per slot.

    A response is only accepted while its number is still the latest one
    issued for its slot.
    """

    def __init__(self):
        self._latest: dict[str, int] = defaultdict(int)

    def next(self, slot: str) -> int:
        self._latest[slot] += 1
        return self._latest[slot]

    def latest(self, slot: str) -> int:
        return self._latest[slot]

    def check(self, slot: str, sequence: int) -> None:
        latest = self._latest[slot]
        if sequence != latest:
            raise StaleResponseError(sequence, latest)


class ApiSectionSource:
    """Loads pages over HTTP from the JSON API.

    Loads that share a ``slot`` (for example one preview pane) are ordered:
    when a newer load for the slot has started, an older response raises
    StaleResponseError instead of being returned.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        admin_token: str = "",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"X-Admin-Token": admin_token} if admin_token else {}
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=headers,
            transport=transport,
        )
        self.sequencer = RequestSequencer()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _get_json(self, path: str, params: dict | None = None) -> dict | None:
        try:
            response = await self.client.get(path, params=params, headers=correlation_headers())
        except httpx.HTTPError as exc:
            logger.warning("section_source_request_failed", path=path, error=str(exc))
            raise SectionSourceError(f"Request to {path} failed: {exc}") from exc

        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            logger.warning("section_source_bad_status", path=path, status=response.status_code)
            raise SectionSourceError(f"Request to {path} returned {response.status_code}")
        return response.json()

    async def load_page(self, slug: str, slot: str | None = None) -> PageWithSections | None:
        sequence = self.sequencer.next(slot) if slot else None

        page_body = await self._get_json(f"/api/admin/pages/by-slug/{slug}")
        page_data = None
        sections_body = None
        if page_body is not None:
            page_data = page_body.get("data")
            sections_body = await self._get_json("/api/admin/page-sections", params={"pageSlug": slug})

        if sequence is not None:
            self.sequencer.check(slot, sequence)

        if page_body is None or page_data is None:
            return None
        if sections_body is None or not sections_body.get("success", False):
            raise SectionSourceError(f"Sections for page '{slug}' could not be loaded")

        try:
            page = PageRead.model_validate(page_data)
        except ValidationError as exc:
            raise SectionSourceError(f"Page '{slug}' returned an unreadable payload") from exc

        loaded = PageWithSections(page=page)
        for raw in sections_body.get("data") or []:
            section, error = _parse_section(raw)
            loaded.sections.append(section)
            if error is not None:
                logger.warning("section_payload_invalid", slug=slug, section_id=section.id, error=error)
                loaded.section_errors[section.id] = error
        return loaded

    async def load_pricing(self, pricing_section_id: int, billing_cycle_id: str | None = None) -> PricingMatrix:
        params = {"billingCycleId": billing_cycle_id} if billing_cycle_id else None
        body = await self._get_json(f"/api/pricing-sections/{pricing_section_id}", params=params)
        if body is None:
            return PricingMatrix(state="empty", message=NO_PLANS_MESSAGE, pricing_section_id=pricing_section_id)
        return PricingMatrix.model_validate(body)
