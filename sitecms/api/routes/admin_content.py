"""Admin API routes: section content (hero, features, media, FAQ, HTML)."""

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from sitecms.api.routes.crud import add_crud_routes, commit_or_conflict, load_one
from sitecms.api.schemas.admin import (
    CTAButtonCreate,
    CTAButtonUpdate,
    FAQCategoryCreate,
    FAQCategoryUpdate,
    FAQCreate,
    FAQSectionCreate,
    FAQSectionUpdate,
    FAQUpdate,
    FeatureCreate,
    FeatureGroupCreate,
    FeatureGroupItemWrite,
    FeatureGroupUpdate,
    FeatureUpdate,
    HeroSectionCreate,
    HeroSectionUpdate,
    HtmlSectionCreate,
    HtmlSectionUpdate,
    MediaSectionCreate,
    MediaSectionUpdate,
)
from sitecms.core.auth import require_admin
from sitecms.db.base import get_session_factory
from sitecms.db.models.faq import FAQ, FAQCategory, FAQSection, FAQSectionCategory
from sitecms.db.models.feature_group import Feature, FeatureGroup, FeatureGroupItem
from sitecms.db.models.hero_section import CTAButton, HeroSection
from sitecms.db.models.html_section import HtmlSection
from sitecms.db.models.media_section import MediaSection, MediaSectionFeature
from sitecms.schemas.base import ApiResponse
from sitecms.schemas.pages import (
    CTAButtonRead,
    FAQCategoryRead,
    FAQRead,
    FAQSectionRead,
    FeatureGroupRead,
    FeatureRead,
    HeroSectionRead,
    HtmlSectionRead,
    MediaSectionRead,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["admin-content"], dependencies=[Depends(require_admin)])

add_crud_routes(
    router,
    "/cta-buttons",
    CTAButton,
    CTAButtonRead,
    CTAButtonCreate,
    CTAButtonUpdate,
    order_by=(CTAButton.id,),
)

add_crud_routes(
    router,
    "/hero-sections",
    HeroSection,
    HeroSectionRead,
    HeroSectionCreate,
    HeroSectionUpdate,
    order_by=(HeroSection.id,),
    options=(selectinload(HeroSection.cta_primary), selectinload(HeroSection.cta_secondary)),
)

add_crud_routes(
    router,
    "/features",
    Feature,
    FeatureRead,
    FeatureCreate,
    FeatureUpdate,
    order_by=(Feature.sort_order, Feature.id),
)

add_crud_routes(
    router,
    "/faq-categories",
    FAQCategory,
    FAQCategoryRead,
    FAQCategoryCreate,
    FAQCategoryUpdate,
    order_by=(FAQCategory.sort_order, FAQCategory.id),
    options=(selectinload(FAQCategory.faqs),),
)

add_crud_routes(
    router,
    "/faqs",
    FAQ,
    FAQRead,
    FAQCreate,
    FAQUpdate,
    order_by=(FAQ.category_id, FAQ.sort_order, FAQ.id),
)

add_crud_routes(
    router,
    "/html-sections",
    HtmlSection,
    HtmlSectionRead,
    HtmlSectionCreate,
    HtmlSectionUpdate,
    order_by=(HtmlSection.name,),
)


# ---------- Feature groups ----------

FEATURE_GROUP_OPTIONS = (selectinload(FeatureGroup.items).selectinload(FeatureGroupItem.feature),)


async def _feature_items(session: AsyncSession, items: list[FeatureGroupItemWrite]) -> list[FeatureGroupItem]:
    feature_ids = {item.feature_id for item in items}
    if feature_ids:
        result = await session.execute(select(Feature.id).where(Feature.id.in_(feature_ids)))
        missing = feature_ids - set(result.scalars().all())
        if missing:
            raise HTTPException(
                status_code=400,
                detail=f"Unknown features: {', '.join(str(i) for i in sorted(missing))}",
            )
    return [FeatureGroupItem(**item.model_dump()) for item in items]


@router.get("/feature-groups", response_model=ApiResponse[list[FeatureGroupRead]])
async def list_feature_groups():
    factory = get_session_factory()
    async with factory() as session:
        result = await session.execute(select(FeatureGroup).options(*FEATURE_GROUP_OPTIONS).order_by(FeatureGroup.name))
        return ApiResponse(data=[FeatureGroupRead.model_validate(g) for g in result.scalars().all()])


@router.get("/feature-groups/{group_id}", response_model=ApiResponse[FeatureGroupRead])
async def get_feature_group(group_id: int):
    factory = get_session_factory()
    async with factory() as session:
        group = await load_one(session, FeatureGroup, group_id, FEATURE_GROUP_OPTIONS)
        return ApiResponse(data=FeatureGroupRead.model_validate(group))


@router.post("/feature-groups", response_model=ApiResponse[FeatureGroupRead], status_code=201)
async def create_feature_group(body: FeatureGroupCreate):
    factory = get_session_factory()
    async with factory() as session:
        group = FeatureGroup(**body.model_dump(exclude={"items"}))
        group.items = await _feature_items(session, body.items)
        session.add(group)
        await commit_or_conflict(session, "FeatureGroup")
        group = await load_one(session, FeatureGroup, group.id, FEATURE_GROUP_OPTIONS)
        return ApiResponse(data=FeatureGroupRead.model_validate(group))


@router.put("/feature-groups/{group_id}", response_model=ApiResponse[FeatureGroupRead])
async def update_feature_group(group_id: int, body: FeatureGroupUpdate):
    """Update a group; a given ``items`` list replaces every item."""
    factory = get_session_factory()
    async with factory() as session:
        group = await load_one(session, FeatureGroup, group_id, FEATURE_GROUP_OPTIONS)
        changes = body.model_dump(exclude_unset=True, exclude={"items"})
        for field, value in changes.items():
            setattr(group, field, value)

        if body.items is not None:
            new_items = await _feature_items(session, body.items)
            # Old rows must be gone before the new ones insert
            group.items.clear()
            await session.flush()
            group.items.extend(new_items)

        await commit_or_conflict(session, "FeatureGroup")
        group = await load_one(session, FeatureGroup, group_id, FEATURE_GROUP_OPTIONS)
        return ApiResponse(data=FeatureGroupRead.model_validate(group))


@router.delete("/feature-groups/{group_id}", response_model=ApiResponse[None])
async def delete_feature_group(group_id: int):
    factory = get_session_factory()
    async with factory() as session:
        group = await load_one(session, FeatureGroup, group_id, FEATURE_GROUP_OPTIONS)
        await session.delete(group)
        await session.commit()
        return ApiResponse(message="FeatureGroup deleted")


# ---------- Media sections ----------

MEDIA_SECTION_OPTIONS = (selectinload(MediaSection.features),)


@router.get("/media-sections", response_model=ApiResponse[list[MediaSectionRead]])
async def list_media_sections():
    factory = get_session_factory()
    async with factory() as session:
        result = await session.execute(select(MediaSection).options(*MEDIA_SECTION_OPTIONS).order_by(MediaSection.id))
        return ApiResponse(data=[MediaSectionRead.model_validate(m) for m in result.scalars().all()])


@router.get("/media-sections/{media_id}", response_model=ApiResponse[MediaSectionRead])
async def get_media_section(media_id: int):
    factory = get_session_factory()
    async with factory() as session:
        media = await load_one(session, MediaSection, media_id, MEDIA_SECTION_OPTIONS)
        return ApiResponse(data=MediaSectionRead.model_validate(media))


@router.post("/media-sections", response_model=ApiResponse[MediaSectionRead], status_code=201)
async def create_media_section(body: MediaSectionCreate):
    factory = get_session_factory()
    async with factory() as session:
        media = MediaSection(**body.model_dump(exclude={"features"}))
        media.features = [MediaSectionFeature(**f.model_dump()) for f in body.features]
        session.add(media)
        await commit_or_conflict(session, "MediaSection")
        media = await load_one(session, MediaSection, media.id, MEDIA_SECTION_OPTIONS)
        return ApiResponse(data=MediaSectionRead.model_validate(media))


@router.put("/media-sections/{media_id}", response_model=ApiResponse[MediaSectionRead])
async def update_media_section(media_id: int, body: MediaSectionUpdate):
    factory = get_session_factory()
    async with factory() as session:
        media = await load_one(session, MediaSection, media_id, MEDIA_SECTION_OPTIONS)
        for field, value in body.model_dump(exclude_unset=True, exclude={"features"}).items():
            setattr(media, field, value)

        if body.features is not None:
            media.features.clear()
            await session.flush()
            media.features.extend(MediaSectionFeature(**f.model_dump()) for f in body.features)

        await commit_or_conflict(session, "MediaSection")
        media = await load_one(session, MediaSection, media_id, MEDIA_SECTION_OPTIONS)
        return ApiResponse(data=MediaSectionRead.model_validate(media))


@router.delete("/media-sections/{media_id}", response_model=ApiResponse[None])
async def delete_media_section(media_id: int):
    factory = get_session_factory()
    async with factory() as session:
        media = await load_one(session, MediaSection, media_id, MEDIA_SECTION_OPTIONS)
        await session.delete(media)
        await session.commit()
        return ApiResponse(message="MediaSection deleted")


# ---------- FAQ sections ----------

FAQ_SECTION_OPTIONS = (
    selectinload(FAQSection.section_categories)
    .selectinload(FAQSectionCategory.category)
    .selectinload(FAQCategory.faqs),
)


async def _section_categories(session: AsyncSession, category_ids: list[int]) -> list[FAQSectionCategory]:
    """Category links in the given order, duplicates dropped."""
    ordered = list(dict.fromkeys(category_ids))
    if ordered:
        result = await session.execute(select(FAQCategory.id).where(FAQCategory.id.in_(ordered)))
        missing = set(ordered) - set(result.scalars().all())
        if missing:
            raise HTTPException(
                status_code=400,
                detail=f"Unknown FAQ categories: {', '.join(str(i) for i in sorted(missing))}",
            )
    return [FAQSectionCategory(category_id=cid, sort_order=index) for index, cid in enumerate(ordered)]


@router.get("/faq-sections", response_model=ApiResponse[list[FAQSectionRead]])
async def list_faq_sections():
    factory = get_session_factory()
    async with factory() as session:
        result = await session.execute(select(FAQSection).options(*FAQ_SECTION_OPTIONS).order_by(FAQSection.name))
        return ApiResponse(data=[FAQSectionRead.model_validate(s) for s in result.scalars().all()])


@router.get("/faq-sections/{section_id}", response_model=ApiResponse[FAQSectionRead])
async def get_faq_section(section_id: int):
    factory = get_session_factory()
    async with factory() as session:
        section = await load_one(session, FAQSection, section_id, FAQ_SECTION_OPTIONS)
        return ApiResponse(data=FAQSectionRead.model_validate(section))


@router.post("/faq-sections", response_model=ApiResponse[FAQSectionRead], status_code=201)
async def create_faq_section(body: FAQSectionCreate):
    factory = get_session_factory()
    async with factory() as session:
        section = FAQSection(**body.model_dump(exclude={"category_ids"}))
        section.section_categories = await _section_categories(session, body.category_ids)
        session.add(section)
        await commit_or_conflict(session, "FAQSection")
        section = await load_one(session, FAQSection, section.id, FAQ_SECTION_OPTIONS)
        return ApiResponse(data=FAQSectionRead.model_validate(section))


@router.put("/faq-sections/{section_id}", response_model=ApiResponse[FAQSectionRead])
async def update_faq_section(section_id: int, body: FAQSectionUpdate):
    factory = get_session_factory()
    async with factory() as session:
        section = await load_one(session, FAQSection, section_id, FAQ_SECTION_OPTIONS)
        for field, value in body.model_dump(exclude_unset=True, exclude={"category_ids"}).items():
            setattr(section, field, value)

        if body.category_ids is not None:
            links = await _section_categories(session, body.category_ids)
            section.section_categories.clear()
            await session.flush()
            section.section_categories.extend(links)

        await commit_or_conflict(session, "FAQSection")
        section = await load_one(session, FAQSection, section_id, FAQ_SECTION_OPTIONS)
        return ApiResponse(data=FAQSectionRead.model_validate(section))


@router.delete("/faq-sections/{section_id}", response_model=ApiResponse[None])
async def delete_faq_section(section_id: int):
    factory = get_session_factory()
    async with factory() as session:
        section = await load_one(session, FAQSection, section_id, FAQ_SECTION_OPTIONS)
        await session.delete(section)
        await session.commit()
        logger.info("faq_section_deleted", faq_section_id=section_id)
        return ApiResponse(message="FAQSection deleted")
