"""Admin API routes: pages and the ordered sections on them."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func, select

from sitecms.api.routes.crud import commit_or_conflict, load_one
from sitecms.api.schemas.admin import (
    PageCreate,
    PageSectionCreate,
    PageSectionReorder,
    PageSectionUpdate,
    PageUpdate,
)
from sitecms.core.auth import require_admin
from sitecms.db.base import get_session_factory
from sitecms.db.models.page import Page, PageSection
from sitecms.domain.sections import ALL_RELATION_KEYS, validate_section_relations
from sitecms.schemas.base import ApiResponse
from sitecms.schemas.pages import PageRead, PageSectionRead
from sitecms.services.page_sources import page_section_load_options

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["admin-pages"], dependencies=[Depends(require_admin)])


def _check_relations(section_type: str, section: PageSection | None, changes: dict) -> None:
    """Reject foreign keys that the section type does not use."""
    relation_ids = {key: getattr(section, key) for key in ALL_RELATION_KEYS} if section else {}
    relation_ids.update({key: value for key, value in changes.items() if key in ALL_RELATION_KEYS})
    invalid = validate_section_relations(section_type, relation_ids)
    if invalid:
        raise HTTPException(
            status_code=400,
            detail=f"Section type '{section_type}' cannot link: {', '.join(invalid)}",
        )


# ---------- Pages ----------


@router.get("/pages", response_model=ApiResponse[list[PageRead]])
async def list_pages():
    factory = get_session_factory()
    async with factory() as session:
        result = await session.execute(select(Page).order_by(Page.sort_order, Page.id))
        return ApiResponse(data=[PageRead.model_validate(p) for p in result.scalars().all()])


@router.get("/pages/by-slug/{slug}", response_model=ApiResponse[PageRead])
async def get_page_by_slug(slug: str):
    factory = get_session_factory()
    async with factory() as session:
        result = await session.execute(select(Page).where(Page.slug == slug))
        page = result.scalar_one_or_none()
        if page is None:
            raise HTTPException(status_code=404, detail="Page not found")
        return ApiResponse(data=PageRead.model_validate(page))


@router.get("/pages/{page_id}", response_model=ApiResponse[PageRead])
async def get_page(page_id: int):
    factory = get_session_factory()
    async with factory() as session:
        page = await load_one(session, Page, page_id)
        return ApiResponse(data=PageRead.model_validate(page))


@router.post("/pages", response_model=ApiResponse[PageRead], status_code=201)
async def create_page(body: PageCreate):
    factory = get_session_factory()
    async with factory() as session:
        page = Page(**body.model_dump())
        session.add(page)
        await commit_or_conflict(session, "Page")
        logger.info("page_created", page_id=page.id, slug=page.slug)
        return ApiResponse(data=PageRead.model_validate(page))


@router.put("/pages/{page_id}", response_model=ApiResponse[PageRead])
async def update_page(page_id: int, body: PageUpdate):
    factory = get_session_factory()
    async with factory() as session:
        page = await load_one(session, Page, page_id)
        for field, value in body.model_dump(exclude_unset=True).items():
            setattr(page, field, value)
        await commit_or_conflict(session, "Page")
        return ApiResponse(data=PageRead.model_validate(page))


@router.delete("/pages/{page_id}", response_model=ApiResponse[None])
async def delete_page(page_id: int):
    """Delete a page and all of its sections."""
    factory = get_session_factory()
    async with factory() as session:
        page = await load_one(session, Page, page_id)
        await session.delete(page)
        await session.commit()
        logger.info("page_deleted", page_id=page_id)
        return ApiResponse(message="Page deleted")


# ---------- Page sections ----------


@router.get("/page-sections", response_model=ApiResponse[list[PageSectionRead]])
async def list_page_sections(
    page_slug: str | None = Query(None, alias="pageSlug"),
    page_id: int | None = Query(None, alias="pageId"),
):
    """Sections with their linked content, ordered by position on the page."""
    factory = get_session_factory()
    async with factory() as session:
        query = select(PageSection).options(*page_section_load_options())
        if page_slug:
            page = (await session.execute(select(Page).where(Page.slug == page_slug))).scalar_one_or_none()
            if page is None:
                raise HTTPException(status_code=404, detail="Page not found")
            query = query.where(PageSection.page_id == page.id)
        elif page_id is not None:
            query = query.where(PageSection.page_id == page_id)

        result = await session.execute(query.order_by(PageSection.page_id, PageSection.sort_order, PageSection.id))
        return ApiResponse(data=[PageSectionRead.model_validate(s) for s in result.scalars().all()])


@router.get("/page-sections/{section_id}", response_model=ApiResponse[PageSectionRead])
async def get_page_section(section_id: int):
    factory = get_session_factory()
    async with factory() as session:
        section = await load_one(session, PageSection, section_id, page_section_load_options())
        return ApiResponse(data=PageSectionRead.model_validate(section))


@router.post("/page-sections", response_model=ApiResponse[PageSectionRead], status_code=201)
async def create_page_section(body: PageSectionCreate):
    """Add a section; without a sort order it goes after the page's last section."""
    factory = get_session_factory()
    async with factory() as session:
        await load_one(session, Page, body.page_id)
        values = body.model_dump()
        _check_relations(body.section_type, None, values)

        if values["sort_order"] is None:
            result = await session.execute(
                select(func.max(PageSection.sort_order)).where(PageSection.page_id == body.page_id)
            )
            values["sort_order"] = (result.scalar_one_or_none() or 0) + 1

        section = PageSection(**values)
        session.add(section)
        await commit_or_conflict(session, "PageSection")
        logger.info("page_section_created", page_id=body.page_id, section_id=section.id, type=body.section_type)

        section = await load_one(session, PageSection, section.id, page_section_load_options())
        return ApiResponse(data=PageSectionRead.model_validate(section))


@router.put("/page-sections/{section_id}", response_model=ApiResponse[PageSectionRead])
async def update_page_section(section_id: int, body: PageSectionUpdate):
    factory = get_session_factory()
    async with factory() as session:
        section = await load_one(session, PageSection, section_id)
        changes = body.model_dump(exclude_unset=True)
        _check_relations(changes.get("section_type") or section.section_type, section, changes)

        for field, value in changes.items():
            if value is None and field in ("section_type", "sort_order", "is_visible"):
                continue
            setattr(section, field, value)
        await commit_or_conflict(session, "PageSection")

        section = await load_one(session, PageSection, section_id, page_section_load_options())
        return ApiResponse(data=PageSectionRead.model_validate(section))


@router.delete("/page-sections/{section_id}", response_model=ApiResponse[None])
async def delete_page_section(section_id: int):
    factory = get_session_factory()
    async with factory() as session:
        section = await load_one(session, PageSection, section_id)
        await session.delete(section)
        await session.commit()
        return ApiResponse(message="PageSection deleted")


@router.patch("/page-sections/reorder", response_model=ApiResponse[list[PageSectionRead]])
async def reorder_page_sections(body: PageSectionReorder):
    """Renumber sections 1..n in the given order.

    Every id must belong to the page; sections left out keep their order.
    """
    factory = get_session_factory()
    async with factory() as session:
        result = await session.execute(select(PageSection).where(PageSection.page_id == body.page_id))
        by_id = {s.id: s for s in result.scalars().all()}

        unknown = [sid for sid in body.section_ids if sid not in by_id]
        if unknown:
            raise HTTPException(
                status_code=400,
                detail=f"Sections not on page {body.page_id}: {', '.join(str(s) for s in unknown)}",
            )

        for index, sid in enumerate(body.section_ids):
            by_id[sid].sort_order = index + 1
        await session.commit()
        logger.info("page_sections_reordered", page_id=body.page_id, count=len(body.section_ids))

        result = await session.execute(
            select(PageSection)
            .where(PageSection.page_id == body.page_id)
            .options(*page_section_load_options())
            .order_by(PageSection.sort_order, PageSection.id)
            .execution_options(populate_existing=True)
        )
        return ApiResponse(data=[PageSectionRead.model_validate(s) for s in result.scalars().all()])
