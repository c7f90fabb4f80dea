"""Composed pages: JSON under /api/pages and server-rendered HTML at the site root."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.responses import HTMLResponse
from sqlalchemy import select

from sitecms.api.deps import get_section_source
from sitecms.core.config import get_settings
from sitecms.core.exceptions import StaleResponseError
from sitecms.db.base import get_session_factory
from sitecms.db.models.site_settings import SiteSettings
from sitecms.rendering.renderer import SectionRenderer
from sitecms.schemas.sections import ComposedPage
from sitecms.services.page_service import PageComposer
from sitecms.services.page_sources import SectionSource

logger = structlog.get_logger(__name__)

router = APIRouter()
html_router = APIRouter(tags=["site"])

renderer = SectionRenderer()

STATE_STATUS = {"ok": 200, "empty": 200, "not_found": 404, "error": 500}


async def _compose(
    source: SectionSource,
    slug: str,
    billing_cycle_id: str | None,
    render_html: bool,
    slot: str | None = None,
) -> ComposedPage:
    try:
        return await PageComposer(source, renderer).compose(
            slug,
            billing_cycle_id=billing_cycle_id,
            render_html=render_html,
            slot=slot,
        )
    except StaleResponseError as exc:
        logger.info("page_load_superseded", slug=slug, slot=slot, sequence=exc.sequence, latest=exc.latest)
        raise HTTPException(status_code=409, detail="A newer load of this page superseded this one")


@router.get("/pages/{slug}", response_model=ComposedPage)
async def get_composed_page(
    slug: str,
    response: Response,
    billing_cycle_id: str | None = Query(None, alias="billingCycleId"),
    html: bool = False,
    slot: str | None = None,
    source: SectionSource = Depends(get_section_source),
):
    """Page with its visible sections mapped to typed content.

    ``html=true`` also renders each section. Loads sharing a ``slot`` are
    ordered; a superseded one answers 409.
    """
    page = await _compose(source, slug, billing_cycle_id, html, slot)
    response.status_code = STATE_STATUS[page.state]
    return page


async def _branding() -> tuple[str, str]:
    factory = get_session_factory()
    async with factory() as session:
        result = await session.execute(select(SiteSettings).order_by(SiteSettings.id).limit(1))
        row = result.scalar_one_or_none()
    if row is None:
        return "Website", "Your Company"
    return row.site_name, row.footer_company_name


async def _render(source: SectionSource, slug: str, billing_cycle_id: str | None) -> HTMLResponse:
    page = await _compose(source, slug, billing_cycle_id, render_html=True)
    site_name, footer_company_name = await _branding()
    html = renderer.render_page(
        page,
        site_name=site_name,
        footer_company_name=footer_company_name,
    )
    return HTMLResponse(content=html, status_code=STATE_STATUS[page.state])


@html_router.get("/", response_class=HTMLResponse)
async def render_home(
    billing_cycle_id: str | None = Query(None, alias="billingCycleId"),
    source: SectionSource = Depends(get_section_source),
):
    return await _render(source, get_settings().default_page_slug, billing_cycle_id)


@html_router.get("/{slug}", response_class=HTMLResponse)
async def render_page(
    slug: str,
    billing_cycle_id: str | None = Query(None, alias="billingCycleId"),
    source: SectionSource = Depends(get_section_source),
):
    return await _render(source, slug, billing_cycle_id)
