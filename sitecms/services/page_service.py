"""PageComposer: assembles a page from its configured sections.

Loads the page through a SectionSource, keeps visible sections in display
order, maps each row to its tagged content variant, hydrates pricing
variants and renders every section through the shared renderer map. A
failure in one section becomes an error block for that section only.
"""

import structlog

from sitecms.core.exceptions import SectionSourceError
from sitecms.domain.sections import build_section_content, visible_in_order
from sitecms.rendering.renderer import SECTION_ERROR_MESSAGE, SectionRenderer
from sitecms.schemas.pages import PageSectionRead
from sitecms.schemas.sections import ComposedPage, ComposedSection, PlaceholderContent, PricingContent
from sitecms.services.page_sources import SectionSource

logger = structlog.get_logger(__name__)

EMPTY_PAGE_MESSAGE = "This page has no content configured yet."
NOT_FOUND_MESSAGE = "The page you are looking for does not exist."
LOAD_ERROR_MESSAGE = "We couldn't load this page. Please try again."


class PageComposer:
    def __init__(self, source: SectionSource, renderer: SectionRenderer | None = None):
        self.source = source
        self.renderer = renderer or SectionRenderer()

    async def compose(
        self,
        slug: str,
        billing_cycle_id: str | None = None,
        render_html: bool = True,
        slot: str | None = None,
    ) -> ComposedPage:
        """Compose the page at ``slug``.

        Returns a page in one of four states: ``ok``, ``empty``, ``not_found``
        or ``error``. StaleResponseError from the source propagates so the
        caller can drop a superseded load.
        """
        try:
            loaded = await self.source.load_page(slug, slot=slot)
        except SectionSourceError:
            logger.exception("page_load_failed", slug=slug)
            return ComposedPage(slug=slug, state="error", message=LOAD_ERROR_MESSAGE)

        if loaded is None:
            logger.info("page_not_found", slug=slug)
            return ComposedPage(slug=slug, state="not_found", message=NOT_FOUND_MESSAGE)

        page = loaded.page
        composed = ComposedPage(
            slug=page.slug,
            state="ok",
            title=page.title,
            meta_title=page.meta_title,
            meta_description=page.meta_description,
        )

        sections = visible_in_order(loaded.sections)
        if not sections:
            composed.state = "empty"
            composed.message = EMPTY_PAGE_MESSAGE
            return composed

        for section in sections:
            composed.sections.append(
                await self._compose_section(
                    section, billing_cycle_id, render_html, loaded.section_errors.get(section.id)
                )
            )

        logger.debug("page_composed", slug=slug, sections=len(composed.sections))
        return composed

    async def _compose_section(
        self,
        section: PageSectionRead,
        billing_cycle_id: str | None,
        render_html: bool,
        load_error: str | None = None,
    ) -> ComposedSection:
        try:
            if load_error is not None:
                raise SectionSourceError(f"Section {section.id} content could not be read: {load_error}")
            content = build_section_content(section)
            if isinstance(content, PricingContent):
                content.matrix = await self.source.load_pricing(content.pricing_section_id, billing_cycle_id)
            html = self.renderer.render_section(content, section.id) if render_html else None
        except Exception as exc:
            logger.exception(
                "section_render_failed",
                section_id=section.id,
                section_type=section.section_type,
            )
            return ComposedSection(
                id=section.id,
                section_type=section.section_type,
                sort_order=section.sort_order,
                content=PlaceholderContent(
                    section_type=section.section_type,
                    heading=section.title or "",
                    message=SECTION_ERROR_MESSAGE,
                ),
                html=self.renderer.render_section_error(section.id, section.section_type) if render_html else None,
                error=str(exc) or exc.__class__.__name__,
            )

        return ComposedSection(
            id=section.id,
            section_type=section.section_type,
            sort_order=section.sort_order,
            content=content,
            html=html,
        )
