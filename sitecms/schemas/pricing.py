"""Render-ready pricing matrix returned by the pricing resolver."""

from typing import Literal

from pydantic import Field

from sitecms.schemas.base import CamelModel

PricingState = Literal["ok", "empty", "error"]


class PricingSectionRead(CamelModel):
    id: int
    name: str
    heading: str = "Pricing Plans"
    subheading: str | None = None
    layout_type: str = "standard"
    background_color: str | None = None
    text_color: str | None = None
    is_active: bool = True
    is_default: bool = False


class CycleOption(CamelModel):
    id: str
    label: str
    multiplier: int
    is_default: bool
    is_selected: bool
    savings_percent: int = Field(0, description="Badge value; 0 hides the badge")


class PlanPrice(CamelModel):
    price_cents: int | None = Field(None, description="None when the plan has no price for the cycle")
    display: str
    period_label: str
    stripe_price_id: str | None = None
    cta_url: str | None = None


class FeatureValue(CamelModel):
    feature_type_id: str
    name: str
    unit: str | None = None
    icon: str | None = None
    icon_url: str | None = None
    data_type: str = "number"
    value: str


class BasicFeatureRef(CamelModel):
    id: str
    name: str
    description: str | None = None


class PlanCard(CamelModel):
    id: str
    name: str
    description: str | None = None
    position: int
    is_popular: bool
    price: PlanPrice
    highlights: list[FeatureValue] = Field(default_factory=list)
    basic_features: list[BasicFeatureRef] = Field(default_factory=list)
    basic_features_message: str | None = None


class FeatureRow(CamelModel):
    feature_type_id: str
    name: str
    unit: str | None = None
    description: str | None = None
    icon: str | None = None
    values: list[str] = Field(default_factory=list, description="One value per plan, in plan order")


class BasicFeatureRow(CamelModel):
    basic_feature_id: str
    name: str
    description: str | None = None
    included: list[bool] = Field(default_factory=list, description="One flag per plan, in plan order")


class PricingMatrix(CamelModel):
    state: PricingState = "ok"
    message: str | None = None
    pricing_section_id: int | None = None
    heading: str = "Pricing Plans"
    subheading: str | None = None
    layout_type: str = "standard"
    background_color: str | None = None
    text_color: str | None = None
    selected_billing_cycle_id: str | None = None
    billing_cycles: list[CycleOption] = Field(default_factory=list)
    plans: list[PlanCard] = Field(default_factory=list)
    feature_rows: list[FeatureRow] = Field(default_factory=list)
    basic_feature_rows: list[BasicFeatureRow] = Field(default_factory=list)
