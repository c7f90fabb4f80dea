"""Admin API routes: plans, billing cycles, pricing, feature limits, pricing sections."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from sitecms.api.routes.crud import add_crud_routes, commit_or_conflict, load_one
from sitecms.api.schemas.admin import (
    BasicFeatureCreate,
    BasicFeatureRead,
    BasicFeatureUpdate,
    BillingCycleCreate,
    BillingCycleRead,
    BillingCycleUpdate,
    PlanBasicFeatureLink,
    PlanBasicFeatureRead,
    PlanCreate,
    PlanFeatureLimitRead,
    PlanFeatureLimitUpsert,
    PlanFeatureTypeCreate,
    PlanFeatureTypeRead,
    PlanFeatureTypeUpdate,
    PlanPricingRead,
    PlanPricingUpsert,
    PlanRead,
    PlanUpdate,
    PricingSectionCreate,
    PricingSectionPlanCreate,
    PricingSectionPlanRead,
    PricingSectionPlanUpdate,
    PricingSectionUpdate,
)
from sitecms.core.auth import require_admin
from sitecms.core.exceptions import EntityInUseError, NotFoundError
from sitecms.db.base import get_session_factory
from sitecms.db.models.billing_cycle import BillingCycle, PlanPricing
from sitecms.db.models.plan import Plan
from sitecms.db.models.plan_feature import BasicFeature, PlanBasicFeature, PlanFeatureLimit, PlanFeatureType
from sitecms.db.models.pricing_section import PricingSection, PricingSectionPlan
from sitecms.schemas.base import ApiResponse
from sitecms.schemas.pricing import PricingSectionRead
from sitecms.services.defaults import set_default

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["admin-pricing"], dependencies=[Depends(require_admin)])


# ---------- Plans ----------


@router.get("/plans", response_model=ApiResponse[list[PlanRead]])
async def list_plans():
    """All plans in display order."""
    factory = get_session_factory()
    async with factory() as session:
        result = await session.execute(select(Plan).order_by(Plan.position, Plan.name))
        return ApiResponse(data=[PlanRead.model_validate(p) for p in result.scalars().all()])


@router.get("/plans/{plan_id}", response_model=ApiResponse[PlanRead])
async def get_plan(plan_id: str):
    factory = get_session_factory()
    async with factory() as session:
        plan = await load_one(session, Plan, plan_id)
        return ApiResponse(data=PlanRead.model_validate(plan))


@router.post("/plans", response_model=ApiResponse[PlanRead], status_code=201)
async def create_plan(body: PlanCreate):
    factory = get_session_factory()
    async with factory() as session:
        plan = Plan(**body.model_dump())
        session.add(plan)
        await commit_or_conflict(session, "Plan")
        logger.info("plan_created", plan_id=plan.id)
        return ApiResponse(data=PlanRead.model_validate(plan))


@router.put("/plans/{plan_id}", response_model=ApiResponse[PlanRead])
async def update_plan(plan_id: str, body: PlanUpdate):
    factory = get_session_factory()
    async with factory() as session:
        plan = await load_one(session, Plan, plan_id)
        for field, value in body.model_dump(exclude_unset=True).items():
            setattr(plan, field, value)
        await commit_or_conflict(session, "Plan")
        return ApiResponse(data=PlanRead.model_validate(plan))


@router.delete("/plans/{plan_id}", response_model=ApiResponse[None])
async def delete_plan(plan_id: str):
    """Delete a plan with its pricing, limits and basic features.

    Refused with 409 while any pricing section still shows the plan.
    """
    factory = get_session_factory()
    async with factory() as session:
        plan = await load_one(session, Plan, plan_id)
        usage = await session.execute(
            select(PricingSection.name)
            .join(PricingSectionPlan, PricingSectionPlan.pricing_section_id == PricingSection.id)
            .where(PricingSectionPlan.plan_id == plan_id)
            .order_by(PricingSection.name)
        )
        usages = list(usage.scalars().all())
        if usages:
            error = EntityInUseError("Plan", usages)
            raise HTTPException(status_code=409, detail=str(error))

        await session.delete(plan)
        await session.commit()
        logger.info("plan_deleted", plan_id=plan_id)
        return ApiResponse(message="Plan deleted")


# ---------- Billing cycles ----------


@router.get("/billing-cycles", response_model=ApiResponse[list[BillingCycleRead]])
async def list_billing_cycles():
    factory = get_session_factory()
    async with factory() as session:
        result = await session.execute(select(BillingCycle).order_by(BillingCycle.multiplier, BillingCycle.label))
        return ApiResponse(data=[BillingCycleRead.model_validate(c) for c in result.scalars().all()])


@router.post("/billing-cycles", response_model=ApiResponse[BillingCycleRead], status_code=201)
async def create_billing_cycle(body: BillingCycleCreate):
    factory = get_session_factory()
    async with factory() as session:
        cycle = BillingCycle(**body.model_dump(exclude={"is_default"}), is_default=False)
        session.add(cycle)
        await commit_or_conflict(session, "BillingCycle")
        if body.is_default:
            cycle = await set_default(session, BillingCycle, cycle.id)
        return ApiResponse(data=BillingCycleRead.model_validate(cycle))


@router.put("/billing-cycles/{cycle_id}", response_model=ApiResponse[BillingCycleRead])
async def update_billing_cycle(cycle_id: str, body: BillingCycleUpdate):
    factory = get_session_factory()
    async with factory() as session:
        cycle = await load_one(session, BillingCycle, cycle_id)
        changes = body.model_dump(exclude_unset=True)
        make_default = changes.pop("is_default", None)
        for field, value in changes.items():
            setattr(cycle, field, value)
        if make_default is False:
            cycle.is_default = False
        await commit_or_conflict(session, "BillingCycle")
        if make_default:
            cycle = await set_default(session, BillingCycle, cycle_id)
        return ApiResponse(data=BillingCycleRead.model_validate(cycle))


@router.post("/billing-cycles/{cycle_id}/default", response_model=ApiResponse[BillingCycleRead])
async def make_default_billing_cycle(cycle_id: str):
    """Make this cycle the only default."""
    factory = get_session_factory()
    async with factory() as session:
        try:
            cycle = await set_default(session, BillingCycle, cycle_id)
        except NotFoundError:
            raise HTTPException(status_code=404, detail="BillingCycle not found")
        return ApiResponse(data=BillingCycleRead.model_validate(cycle))


@router.delete("/billing-cycles/{cycle_id}", response_model=ApiResponse[None])
async def delete_billing_cycle(cycle_id: str):
    factory = get_session_factory()
    async with factory() as session:
        cycle = await load_one(session, BillingCycle, cycle_id)
        await session.delete(cycle)
        await session.commit()
        return ApiResponse(message="BillingCycle deleted")


# ---------- Plan pricing ----------


@router.get("/plan-pricing", response_model=ApiResponse[list[PlanPricingRead]])
async def list_plan_pricing(plan_id: str | None = Query(None, alias="planId")):
    factory = get_session_factory()
    async with factory() as session:
        query = select(PlanPricing).order_by(PlanPricing.plan_id, PlanPricing.id)
        if plan_id:
            query = query.where(PlanPricing.plan_id == plan_id)
        result = await session.execute(query)
        return ApiResponse(data=[PlanPricingRead.model_validate(p) for p in result.scalars().all()])


@router.post("/plan-pricing", response_model=ApiResponse[PlanPricingRead])
async def upsert_plan_pricing(body: PlanPricingUpsert):
    """Create or replace the price for a (plan, billing cycle) pair."""
    factory = get_session_factory()
    async with factory() as session:
        await load_one(session, Plan, body.plan_id)
        await load_one(session, BillingCycle, body.billing_cycle_id)

        result = await session.execute(
            select(PlanPricing).where(
                PlanPricing.plan_id == body.plan_id,
                PlanPricing.billing_cycle_id == body.billing_cycle_id,
            )
        )
        pricing = result.scalar_one_or_none()
        if pricing is None:
            pricing = PlanPricing(**body.model_dump())
            session.add(pricing)
        else:
            pricing.price_cents = body.price_cents
            pricing.stripe_price_id = body.stripe_price_id
            pricing.cta_url = body.cta_url
        await commit_or_conflict(session, "PlanPricing")
        return ApiResponse(data=PlanPricingRead.model_validate(pricing))


@router.delete("/plan-pricing/{pricing_id}", response_model=ApiResponse[None])
async def delete_plan_pricing(pricing_id: int):
    factory = get_session_factory()
    async with factory() as session:
        pricing = await load_one(session, PlanPricing, pricing_id)
        await session.delete(pricing)
        await session.commit()
        return ApiResponse(message="PlanPricing deleted")


# ---------- Feature types & limits ----------

add_crud_routes(
    router,
    "/plan-feature-types",
    PlanFeatureType,
    PlanFeatureTypeRead,
    PlanFeatureTypeCreate,
    PlanFeatureTypeUpdate,
    order_by=(PlanFeatureType.sort_order, PlanFeatureType.name),
    id_type=str,
)


@router.get("/plan-feature-limits", response_model=ApiResponse[list[PlanFeatureLimitRead]])
async def list_plan_feature_limits(plan_id: str | None = Query(None, alias="planId")):
    factory = get_session_factory()
    async with factory() as session:
        query = select(PlanFeatureLimit).order_by(PlanFeatureLimit.plan_id, PlanFeatureLimit.id)
        if plan_id:
            query = query.where(PlanFeatureLimit.plan_id == plan_id)
        result = await session.execute(query)
        return ApiResponse(data=[PlanFeatureLimitRead.model_validate(x) for x in result.scalars().all()])


@router.post("/plan-feature-limits", response_model=ApiResponse[PlanFeatureLimitRead])
async def upsert_plan_feature_limit(body: PlanFeatureLimitUpsert):
    """Create or replace the limit for a (plan, feature type) pair."""
    factory = get_session_factory()
    async with factory() as session:
        await load_one(session, Plan, body.plan_id)
        await load_one(session, PlanFeatureType, body.feature_type_id)

        result = await session.execute(
            select(PlanFeatureLimit).where(
                PlanFeatureLimit.plan_id == body.plan_id,
                PlanFeatureLimit.feature_type_id == body.feature_type_id,
            )
        )
        limit = result.scalar_one_or_none()
        if limit is None:
            limit = PlanFeatureLimit(**body.model_dump())
            session.add(limit)
        else:
            limit.value = body.value
            limit.is_unlimited = body.is_unlimited
        await commit_or_conflict(session, "PlanFeatureLimit")
        return ApiResponse(data=PlanFeatureLimitRead.model_validate(limit))


@router.delete("/plan-feature-limits/{limit_id}", response_model=ApiResponse[None])
async def delete_plan_feature_limit(limit_id: int):
    factory = get_session_factory()
    async with factory() as session:
        limit = await load_one(session, PlanFeatureLimit, limit_id)
        await session.delete(limit)
        await session.commit()
        return ApiResponse(message="PlanFeatureLimit deleted")


# ---------- Basic features ----------

add_crud_routes(
    router,
    "/basic-features",
    BasicFeature,
    BasicFeatureRead,
    BasicFeatureCreate,
    BasicFeatureUpdate,
    order_by=(BasicFeature.sort_order, BasicFeature.name),
    id_type=str,
)


@router.get("/plan-basic-features", response_model=ApiResponse[list[PlanBasicFeatureRead]])
async def list_plan_basic_features(plan_id: str | None = Query(None, alias="planId")):
    factory = get_session_factory()
    async with factory() as session:
        query = select(PlanBasicFeature).order_by(PlanBasicFeature.id)
        if plan_id:
            query = query.where(PlanBasicFeature.plan_id == plan_id)
        result = await session.execute(query)
        return ApiResponse(data=[PlanBasicFeatureRead.model_validate(x) for x in result.scalars().all()])


@router.post("/plan-basic-features", response_model=ApiResponse[PlanBasicFeatureRead])
async def add_plan_basic_feature(body: PlanBasicFeatureLink):
    """Enable a basic feature for a plan; enabling twice is a no-op."""
    factory = get_session_factory()
    async with factory() as session:
        await load_one(session, Plan, body.plan_id)
        await load_one(session, BasicFeature, body.basic_feature_id)

        result = await session.execute(
            select(PlanBasicFeature).where(
                PlanBasicFeature.plan_id == body.plan_id,
                PlanBasicFeature.basic_feature_id == body.basic_feature_id,
            )
        )
        link = result.scalar_one_or_none()
        if link is None:
            link = PlanBasicFeature(plan_id=body.plan_id, basic_feature_id=body.basic_feature_id)
            session.add(link)
            await commit_or_conflict(session, "PlanBasicFeature")
        return ApiResponse(data=PlanBasicFeatureRead.model_validate(link))


@router.delete("/plan-basic-features", response_model=ApiResponse[None])
async def remove_plan_basic_feature(
    plan_id: str = Query(alias="planId"),
    basic_feature_id: str = Query(alias="basicFeatureId"),
):
    factory = get_session_factory()
    async with factory() as session:
        result = await session.execute(
            select(PlanBasicFeature).where(
                PlanBasicFeature.plan_id == plan_id,
                PlanBasicFeature.basic_feature_id == basic_feature_id,
            )
        )
        link = result.scalar_one_or_none()
        if link is None:
            raise HTTPException(status_code=404, detail="PlanBasicFeature not found")
        await session.delete(link)
        await session.commit()
        return ApiResponse(message="PlanBasicFeature removed")


# ---------- Pricing sections ----------


@router.get("/pricing-sections", response_model=ApiResponse[list[PricingSectionRead]])
async def list_pricing_sections():
    factory = get_session_factory()
    async with factory() as session:
        result = await session.execute(select(PricingSection).order_by(PricingSection.name))
        return ApiResponse(data=[PricingSectionRead.model_validate(s) for s in result.scalars().all()])


@router.get("/pricing-sections/{section_id}", response_model=ApiResponse[PricingSectionRead])
async def get_pricing_section(section_id: int):
    factory = get_session_factory()
    async with factory() as session:
        section = await load_one(session, PricingSection, section_id)
        return ApiResponse(data=PricingSectionRead.model_validate(section))


@router.post("/pricing-sections", response_model=ApiResponse[PricingSectionRead], status_code=201)
async def create_pricing_section(body: PricingSectionCreate):
    factory = get_session_factory()
    async with factory() as session:
        section = PricingSection(**body.model_dump(exclude={"is_default"}), is_default=False)
        session.add(section)
        await commit_or_conflict(session, "PricingSection")
        if body.is_default:
            section = await set_default(session, PricingSection, section.id)
        return ApiResponse(data=PricingSectionRead.model_validate(section))


@router.put("/pricing-sections/{section_id}", response_model=ApiResponse[PricingSectionRead])
async def update_pricing_section(section_id: int, body: PricingSectionUpdate):
    factory = get_session_factory()
    async with factory() as session:
        section = await load_one(session, PricingSection, section_id)
        changes = body.model_dump(exclude_unset=True)
        make_default = changes.pop("is_default", None)
        for field, value in changes.items():
            setattr(section, field, value)
        if make_default is False:
            section.is_default = False
        await commit_or_conflict(session, "PricingSection")
        if make_default:
            section = await set_default(session, PricingSection, section_id)
        return ApiResponse(data=PricingSectionRead.model_validate(section))


@router.post("/pricing-sections/{section_id}/default", response_model=ApiResponse[PricingSectionRead])
async def make_default_pricing_section(section_id: int):
    factory = get_session_factory()
    async with factory() as session:
        try:
            section = await set_default(session, PricingSection, section_id)
        except NotFoundError:
            raise HTTPException(status_code=404, detail="PricingSection not found")
        return ApiResponse(data=PricingSectionRead.model_validate(section))


@router.delete("/pricing-sections/{section_id}", response_model=ApiResponse[None])
async def delete_pricing_section(section_id: int):
    factory = get_session_factory()
    async with factory() as session:
        section = await load_one(session, PricingSection, section_id)
        await session.delete(section)
        await session.commit()
        return ApiResponse(message="PricingSection deleted")


# ---------- Pricing section plans ----------


@router.get("/pricing-section-plans", response_model=ApiResponse[list[PricingSectionPlanRead]])
async def list_pricing_section_plans(pricing_section_id: int | None = Query(None, alias="pricingSectionId")):
    factory = get_session_factory()
    async with factory() as session:
        query = (
            select(PricingSectionPlan)
            .options(selectinload(PricingSectionPlan.plan))
            .order_by(PricingSectionPlan.pricing_section_id, PricingSectionPlan.sort_order)
        )
        if pricing_section_id is not None:
            query = query.where(PricingSectionPlan.pricing_section_id == pricing_section_id)
        result = await session.execute(query)
        return ApiResponse(data=[PricingSectionPlanRead.model_validate(x) for x in result.scalars().all()])


@router.post("/pricing-section-plans", response_model=ApiResponse[PricingSectionPlanRead], status_code=201)
async def add_pricing_section_plan(body: PricingSectionPlanCreate):
    factory = get_session_factory()
    async with factory() as session:
        await load_one(session, PricingSection, body.pricing_section_id)
        await load_one(session, Plan, body.plan_id)

        existing = await session.execute(
            select(func.count())
            .select_from(PricingSectionPlan)
            .where(
                PricingSectionPlan.pricing_section_id == body.pricing_section_id,
                PricingSectionPlan.plan_id == body.plan_id,
            )
        )
        if existing.scalar_one():
            raise HTTPException(status_code=409, detail="Plan is already in this pricing section")

        link = PricingSectionPlan(**body.model_dump())
        session.add(link)
        await commit_or_conflict(session, "PricingSectionPlan")
        link = await load_one(session, PricingSectionPlan, link.id, (selectinload(PricingSectionPlan.plan),))
        return ApiResponse(data=PricingSectionPlanRead.model_validate(link))


@router.put("/pricing-section-plans/{link_id}", response_model=ApiResponse[PricingSectionPlanRead])
async def update_pricing_section_plan(link_id: int, body: PricingSectionPlanUpdate):
    factory = get_session_factory()
    async with factory() as session:
        link = await load_one(session, PricingSectionPlan, link_id, (selectinload(PricingSectionPlan.plan),))
        for field, value in body.model_dump(exclude_unset=True).items():
            setattr(link, field, value)
        await session.commit()
        return ApiResponse(data=PricingSectionPlanRead.model_validate(link))


@router.delete("/pricing-section-plans/{link_id}", response_model=ApiResponse[None])
async def remove_pricing_section_plan(link_id: int):
    factory = get_session_factory()
    async with factory() as session:
        link = await load_one(session, PricingSectionPlan, link_id)
        await session.delete(link)
        await session.commit()
        return ApiResponse(message="Plan removed from pricing section")
