"""Tests for PricingResolver and single-default selection."""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from sitecms.core.exceptions import NotFoundError
from sitecms.db.models import BillingCycle, PricingSection
from sitecms.domain.pricing import NO_BASIC_FEATURES_MESSAGE, NO_PLANS_MESSAGE
from sitecms.services.defaults import set_default
from sitecms.services.pricing_service import FETCH_ERROR_MESSAGE, PricingResolver, period_label

pytestmark = pytest.mark.integration


class BrokenSession:
    async def execute(self, *args, **kwargs):
        raise SQLAlchemyError("database unavailable")


async def test_default_cycle_matrix(db_session, pricing_catalog):
    matrix = await PricingResolver().resolve(db_session, pricing_catalog["section"])

    assert matrix.state == "ok"
    assert matrix.heading == "Simple pricing"
    assert matrix.selected_billing_cycle_id == pricing_catalog["monthly"]
    # Inactive and hidden plans are left out; section order wins
    assert [p.name for p in matrix.plans] == ["Starter", "Pro"]

    starter, pro = matrix.plans
    assert starter.price.display == "$29"
    assert starter.price.period_label == "/month"
    assert pro.price.display == "$79"
    assert pro.is_popular is True


async def test_yearly_savings_from_first_plan(db_session, pricing_catalog):
    matrix = await PricingResolver().resolve(db_session, pricing_catalog["section"])

    savings = {c.label: c.savings_percent for c in matrix.billing_cycles}
    assert savings == {"Monthly": 0, "Yearly": 17}
    selected = [c.label for c in matrix.billing_cycles if c.is_selected]
    assert selected == ["Monthly"]


async def test_requested_cycle_and_missing_price(db_session, pricing_catalog):
    matrix = await PricingResolver().resolve(db_session, pricing_catalog["section"], pricing_catalog["yearly"])

    starter, pro = matrix.plans
    assert starter.price.display == "$290"
    assert starter.price.period_label == "/year"
    assert pro.price.price_cents is None
    assert pro.price.display == "$0.00"


async def test_unknown_cycle_falls_back_to_default(db_session, pricing_catalog):
    matrix = await PricingResolver().resolve(db_session, pricing_catalog["section"], "no-such-cycle")
    assert matrix.selected_billing_cycle_id == pricing_catalog["monthly"]


async def test_limits_and_basic_features(db_session, pricing_catalog):
    matrix = await PricingResolver().resolve(db_session, pricing_catalog["section"])
    starter, pro = matrix.plans

    assert [(h.name, h.value) for h in starter.highlights] == [("Assistants", "3"), ("Storage", "0")]
    assert [(h.name, h.value) for h in pro.highlights] == [("Assistants", "∞"), ("Storage", "0")]

    assert starter.basic_features == []
    assert starter.basic_features_message == NO_BASIC_FEATURES_MESSAGE
    assert [f.name for f in pro.basic_features] == ["SSO"]
    assert pro.basic_features_message is None

    rows = {row.name: row.values for row in matrix.feature_rows}
    assert rows == {"Assistants": ["3", "∞"], "Storage": ["0", "0"]}
    assert [(r.name, r.included) for r in matrix.basic_feature_rows] == [("SSO", [False, True])]


async def test_unknown_section_is_empty(db_session, pricing_catalog):
    matrix = await PricingResolver().resolve(db_session, 9999)
    assert matrix.state == "empty"
    assert matrix.message == NO_PLANS_MESSAGE


async def test_section_without_plans_is_empty(db_session):
    section = PricingSection(name="Empty")
    db_session.add(section)
    await db_session.commit()

    matrix = await PricingResolver().resolve(db_session, section.id)
    assert matrix.state == "empty"
    assert matrix.plans == []


async def test_fetch_failure_is_error_not_empty():
    matrix = await PricingResolver().resolve(BrokenSession(), 1)
    assert matrix.state == "error"
    assert matrix.message == FETCH_ERROR_MESSAGE


def test_period_label():
    assert period_label(None) == "/month"
    assert period_label(BillingCycle(label="Monthly", multiplier=1)) == "/month"
    assert period_label(BillingCycle(label="Yearly", multiplier=12)) == "/year"
    assert period_label(BillingCycle(label="Quarterly", multiplier=3)) == "/3 months"
    assert period_label(BillingCycle(label="Bi-annual", multiplier=6)) == "/6 months"
    # the label wording never leaks into the suffix
    assert period_label(BillingCycle(label="Annually", multiplier=12)) == "/year"


async def test_set_default_keeps_single_default(db_session, pricing_catalog):
    await set_default(db_session, BillingCycle, pricing_catalog["yearly"])

    result = await db_session.execute(select(BillingCycle).execution_options(populate_existing=True))
    defaults = {c.label: c.is_default for c in result.scalars().all()}
    assert defaults == {"Monthly": False, "Yearly": True}


async def test_set_default_unknown_row(db_session):
    with pytest.raises(NotFoundError):
        await set_default(db_session, BillingCycle, "missing")
