"""PricingResolver: turns a pricing section into a render-ready matrix.

Loads the section, its visible plans with pricing/limits/basic features, the
billing cycles and the active feature catalogs, then applies the display
rules in ``sitecms.domain.pricing``.
"""

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from sitecms.db.models.billing_cycle import BillingCycle
from sitecms.db.models.plan import Plan
from sitecms.db.models.plan_feature import BasicFeature, PlanFeatureType
from sitecms.db.models.pricing_section import PricingSection, PricingSectionPlan
from sitecms.domain.pricing import (
    CARD_BASIC_FEATURE_COUNT,
    HIGHLIGHT_COUNT,
    NO_BASIC_FEATURES_MESSAGE,
    NO_PLANS_MESSAGE,
    calculate_savings,
    display_limit,
    display_price,
    find_base_cycle,
    select_billing_cycle,
)
from sitecms.schemas.pricing import (
    BasicFeatureRef,
    BasicFeatureRow,
    CycleOption,
    FeatureRow,
    FeatureValue,
    PlanCard,
    PlanPrice,
    PricingMatrix,
)

logger = structlog.get_logger(__name__)

FETCH_ERROR_MESSAGE = "Unable to load pricing. Please try again."


def period_label(cycle: BillingCycle | None) -> str:
    """Price suffix from the months one payment covers: 1 -> ``/month``, 12 -> ``/year``."""
    months = cycle.multiplier if cycle is not None and cycle.multiplier else 1
    if months == 1:
        return "/month"
    if months == 12:
        return "/year"
    return f"/{months} months"


class PricingResolver:
    """Builds a PricingMatrix for one pricing section and billing cycle.

    Never raises for missing pricing or limits; a failed fetch returns a
    matrix in the ``error`` state so callers can tell it apart from ``empty``.
    """

    async def resolve(
        self,
        session: AsyncSession,
        pricing_section_id: int,
        billing_cycle_id: str | None = None,
    ) -> PricingMatrix:
        try:
            return await self._resolve(session, pricing_section_id, billing_cycle_id)
        except SQLAlchemyError:
            logger.exception("pricing_resolve_failed", pricing_section_id=pricing_section_id)
            return PricingMatrix(
                state="error",
                message=FETCH_ERROR_MESSAGE,
                pricing_section_id=pricing_section_id,
            )

    async def _resolve(
        self,
        session: AsyncSession,
        pricing_section_id: int,
        billing_cycle_id: str | None,
    ) -> PricingMatrix:
        result = await session.execute(
            select(PricingSection)
            .where(PricingSection.id == pricing_section_id)
            .options(
                selectinload(PricingSection.section_plans)
                .selectinload(PricingSectionPlan.plan)
                .options(
                    selectinload(Plan.pricing),
                    selectinload(Plan.feature_limits),
                    selectinload(Plan.basic_features),
                )
            )
        )
        section = result.scalar_one_or_none()
        if section is None:
            return PricingMatrix(state="empty", message=NO_PLANS_MESSAGE, pricing_section_id=pricing_section_id)

        section_plans = sorted(
            (sp for sp in section.section_plans if sp.is_visible and sp.plan.is_active),
            key=lambda sp: (sp.sort_order, sp.plan.position),
        )
        plans = [sp.plan for sp in section_plans]

        cycles = list(
            (await session.execute(select(BillingCycle).order_by(BillingCycle.multiplier, BillingCycle.label)))
            .scalars()
            .all()
        )
        feature_types = list(
            (
                await session.execute(
                    select(PlanFeatureType)
                    .where(PlanFeatureType.is_active.is_(True))
                    .order_by(PlanFeatureType.sort_order, PlanFeatureType.name)
                )
            )
            .scalars()
            .all()
        )
        basic_features = list(
            (
                await session.execute(
                    select(BasicFeature)
                    .where(BasicFeature.is_active.is_(True))
                    .order_by(BasicFeature.sort_order, BasicFeature.name)
                )
            )
            .scalars()
            .all()
        )

        matrix = PricingMatrix(
            state="ok",
            pricing_section_id=section.id,
            heading=section.heading,
            subheading=section.subheading,
            layout_type=section.layout_type,
            background_color=section.background_color,
            text_color=section.text_color,
        )

        if not plans:
            matrix.state = "empty"
            matrix.message = NO_PLANS_MESSAGE
            return matrix

        selected = select_billing_cycle(cycles, billing_cycle_id)
        if billing_cycle_id is not None and selected is not None and selected.id != billing_cycle_id:
            logger.warning(
                "billing_cycle_not_found",
                requested=billing_cycle_id,
                fallback=selected.id,
            )
        matrix.selected_billing_cycle_id = selected.id if selected else None
        matrix.billing_cycles = self._cycle_options(cycles, selected, plans[0])
        matrix.plans = [self._plan_card(plan, selected, feature_types, basic_features) for plan in plans]
        matrix.feature_rows = [
            FeatureRow(
                feature_type_id=ft.id,
                name=ft.name,
                unit=ft.unit,
                description=ft.description,
                icon=ft.icon,
                values=[display_limit(self._limit_for(plan, ft.id)) for plan in plans],
            )
            for ft in feature_types
        ]
        matrix.basic_feature_rows = [
            BasicFeatureRow(
                basic_feature_id=bf.id,
                name=bf.name,
                description=bf.description,
                included=[self._has_basic_feature(plan, bf.id) for plan in plans],
            )
            for bf in basic_features
        ]
        return matrix

    @staticmethod
    def _price_for(plan: Plan, cycle_id: str | None):
        if cycle_id is None:
            return None
        for pricing in plan.pricing:
            if pricing.billing_cycle_id == cycle_id:
                return pricing
        return None

    @staticmethod
    def _limit_for(plan: Plan, feature_type_id: str):
        for limit in plan.feature_limits:
            if limit.feature_type_id == feature_type_id:
                return limit
        return None

    @staticmethod
    def _has_basic_feature(plan: Plan, basic_feature_id: str) -> bool:
        return any(link.basic_feature_id == basic_feature_id for link in plan.basic_features)

    def _cycle_options(
        self,
        cycles: list[BillingCycle],
        selected: BillingCycle | None,
        first_plan: Plan,
    ) -> list[CycleOption]:
        # Savings are measured on the first displayed plan only
        base = find_base_cycle(cycles)
        base_pricing = self._price_for(first_plan, base.id) if base else None
        monthly_cents = base_pricing.price_cents if base_pricing else None

        options = []
        for cycle in cycles:
            cycle_pricing = self._price_for(first_plan, cycle.id)
            options.append(
                CycleOption(
                    id=cycle.id,
                    label=cycle.label,
                    multiplier=cycle.multiplier,
                    is_default=cycle.is_default,
                    is_selected=selected is not None and cycle.id == selected.id,
                    savings_percent=calculate_savings(
                        cycle.multiplier,
                        monthly_cents,
                        cycle_pricing.price_cents if cycle_pricing else None,
                    ),
                )
            )
        return options

    def _plan_card(
        self,
        plan: Plan,
        cycle: BillingCycle | None,
        feature_types: list[PlanFeatureType],
        basic_features: list[BasicFeature],
    ) -> PlanCard:
        pricing = self._price_for(plan, cycle.id if cycle else None)
        price = PlanPrice(
            price_cents=pricing.price_cents if pricing else None,
            display=display_price(pricing.price_cents if pricing else None),
            period_label=period_label(cycle),
            stripe_price_id=pricing.stripe_price_id if pricing else None,
            cta_url=pricing.cta_url if pricing else None,
        )

        highlights = [
            FeatureValue(
                feature_type_id=ft.id,
                name=ft.name,
                unit=ft.unit,
                icon=ft.icon,
                icon_url=ft.icon_url,
                data_type=ft.data_type,
                value=display_limit(self._limit_for(plan, ft.id)),
            )
            for ft in feature_types[:HIGHLIGHT_COUNT]
        ]

        included = [
            BasicFeatureRef(id=bf.id, name=bf.name, description=bf.description)
            for bf in basic_features
            if self._has_basic_feature(plan, bf.id)
        ]

        return PlanCard(
            id=plan.id,
            name=plan.name,
            description=plan.description,
            position=plan.position,
            is_popular=plan.is_popular,
            price=price,
            highlights=highlights,
            basic_features=included[:CARD_BASIC_FEATURE_COUNT],
            basic_features_message=None if included else NO_BASIC_FEATURES_MESSAGE,
        )
