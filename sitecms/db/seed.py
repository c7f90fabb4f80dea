"""Idempotent seed data: billing cycles and the site settings row."""

from sqlalchemy import select

from sitecms.db.base import get_session_factory
from sitecms.db.models.billing_cycle import BillingCycle
from sitecms.db.models.site_settings import SiteSettings

BILLING_CYCLES = [
    {"label": "Monthly", "multiplier": 1, "is_default": True},
    {"label": "Yearly", "multiplier": 12, "is_default": False},
]


async def seed_billing_cycles() -> None:
    """Insert Monthly/Yearly cycles when the table is empty."""
    factory = get_session_factory()

    async with factory() as session:
        result = await session.execute(select(BillingCycle.id).limit(1))
        if result.scalar_one_or_none() is not None:
            return

        for cycle_data in BILLING_CYCLES:
            session.add(BillingCycle(**cycle_data))

        await session.commit()


async def seed_site_settings() -> None:
    """Create the single site settings row if missing."""
    factory = get_session_factory()

    async with factory() as session:
        result = await session.execute(select(SiteSettings.id).limit(1))
        if result.scalar_one_or_none() is None:
            session.add(SiteSettings())
            await session.commit()
