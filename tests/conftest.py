"""Shared test fixtures for all test groups."""

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from sitecms.db.base import Base, build_engine


@pytest.fixture
async def engine(tmp_path) -> AsyncEngine:
    """SQLite test engine with every table created.

    Also installs the global session factory so code calling
    get_session_factory() (routes, seeds) shares this database.
    """
    import sitecms.db.base as db_mod

    # Import all models so metadata is populated
    import sitecms.db.models  # noqa: F401

    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'sitecms-test.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    db_mod._engine = engine
    db_mod._session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    yield engine

    db_mod._engine = None
    db_mod._session_factory = None
    await engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncSession:
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
async def pricing_catalog(db_session: AsyncSession) -> dict:
    """Monthly/Yearly cycles, two visible plans, one inactive plan and one hidden link.

    Starter: $29/month, $290/year (17% yearly savings); 3 assistants; no basic features.
    Pro: $79/month, no yearly price; unlimited assistants; SSO.
    """
    from sitecms.db.models import (
        BasicFeature,
        BillingCycle,
        Plan,
        PlanBasicFeature,
        PlanFeatureLimit,
        PlanFeatureType,
        PlanPricing,
        PricingSection,
        PricingSectionPlan,
    )

    monthly = BillingCycle(label="Monthly", multiplier=1, is_default=True)
    yearly = BillingCycle(label="Yearly", multiplier=12, is_default=False)
    starter = Plan(name="Starter", position=0)
    pro = Plan(name="Pro", position=1, is_popular=True)
    retired = Plan(name="Retired", position=2, is_active=False)
    hidden = Plan(name="Hidden", position=3)
    assistants = PlanFeatureType(name="Assistants", unit="active assistants", sort_order=0)
    storage = PlanFeatureType(name="Storage", unit="GB", sort_order=1)
    sso = BasicFeature(name="SSO", sort_order=0)
    section = PricingSection(name="Main", heading="Simple pricing")
    db_session.add_all([monthly, yearly, starter, pro, retired, hidden, assistants, storage, sso, section])
    await db_session.flush()

    db_session.add_all([
        PlanPricing(plan_id=starter.id, billing_cycle_id=monthly.id, price_cents=2900),
        PlanPricing(plan_id=starter.id, billing_cycle_id=yearly.id, price_cents=29000),
        PlanPricing(plan_id=pro.id, billing_cycle_id=monthly.id, price_cents=7900),
        PlanFeatureLimit(plan_id=starter.id, feature_type_id=assistants.id, value="3"),
        PlanFeatureLimit(plan_id=pro.id, feature_type_id=assistants.id, value="50", is_unlimited=True),
        PlanBasicFeature(plan_id=pro.id, basic_feature_id=sso.id),
        PricingSectionPlan(pricing_section_id=section.id, plan_id=pro.id, sort_order=2),
        PricingSectionPlan(pricing_section_id=section.id, plan_id=starter.id, sort_order=1),
        PricingSectionPlan(pricing_section_id=section.id, plan_id=retired.id, sort_order=3),
        PricingSectionPlan(pricing_section_id=section.id, plan_id=hidden.id, sort_order=4, is_visible=False),
    ])
    await db_session.commit()

    ids = {
        "monthly": monthly.id,
        "yearly": yearly.id,
        "starter": starter.id,
        "pro": pro.id,
        "retired": retired.id,
        "assistants": assistants.id,
        "storage": storage.id,
        "sso": sso.id,
        "section": section.id,
    }
    # Later loads must come from the database, not these half-loaded instances
    db_session.expunge_all()
    return ids
