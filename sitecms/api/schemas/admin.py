"""Admin API Pydantic schemas.

Read models for content that the public pages also serve live in
``sitecms.schemas``; this module adds the write models and the admin-only
read models.
"""

import json
from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from sitecms.domain.forms import FIELD_TYPES
from sitecms.schemas.base import CamelModel
from sitecms.schemas.pages import FormRead

# ---------- Plans & pricing ----------


class PlanRead(CamelModel):
    id: str
    name: str
    description: str | None = None
    position: int = 0
    is_active: bool = True
    is_popular: bool = False


class PlanCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None
    position: int = 0
    is_active: bool = True
    is_popular: bool = False


class PlanUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    position: int | None = None
    is_active: bool | None = None
    is_popular: bool | None = None


class BillingCycleRead(CamelModel):
    id: str
    label: str
    multiplier: int
    is_default: bool = False


class BillingCycleCreate(CamelModel):
    label: str = Field(min_length=1, max_length=50)
    multiplier: int = Field(1, ge=1)
    is_default: bool = False


class BillingCycleUpdate(CamelModel):
    label: str | None = Field(None, min_length=1, max_length=50)
    multiplier: int | None = Field(None, ge=1)
    is_default: bool | None = None


class PlanPricingRead(CamelModel):
    id: int
    plan_id: str
    billing_cycle_id: str
    price_cents: int
    stripe_price_id: str | None = None
    cta_url: str | None = None


class PlanPricingUpsert(CamelModel):
    plan_id: str
    billing_cycle_id: str
    price_cents: int = Field(ge=0)
    stripe_price_id: str | None = None
    cta_url: str | None = None


class PlanFeatureTypeRead(CamelModel):
    id: str
    name: str
    unit: str | None = None
    description: str | None = None
    icon: str | None = None
    icon_url: str | None = None
    data_type: str = "number"
    sort_order: int = 0
    is_active: bool = True


class PlanFeatureTypeCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    unit: str | None = None
    description: str | None = None
    icon: str | None = None
    icon_url: str | None = None
    data_type: str = Field("number", pattern="^(number|text)$")
    sort_order: int = 0
    is_active: bool = True


class PlanFeatureTypeUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    unit: str | None = None
    description: str | None = None
    icon: str | None = None
    icon_url: str | None = None
    data_type: str | None = Field(None, pattern="^(number|text)$")
    sort_order: int | None = None
    is_active: bool | None = None


class PlanFeatureLimitRead(CamelModel):
    id: int
    plan_id: str
    feature_type_id: str
    value: str
    is_unlimited: bool = False


class PlanFeatureLimitUpsert(CamelModel):
    plan_id: str
    feature_type_id: str
    value: str = "0"
    is_unlimited: bool = False


class BasicFeatureRead(CamelModel):
    id: str
    name: str
    description: str | None = None
    sort_order: int = 0
    is_active: bool = True


class BasicFeatureCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    sort_order: int = 0
    is_active: bool = True


class BasicFeatureUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    sort_order: int | None = None
    is_active: bool | None = None


class PlanBasicFeatureRead(CamelModel):
    id: int
    plan_id: str
    basic_feature_id: str


class PlanBasicFeatureLink(CamelModel):
    plan_id: str
    basic_feature_id: str


class PricingSectionCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    heading: str = "Pricing Plans"
    subheading: str | None = None
    layout_type: str = "standard"
    background_color: str | None = None
    text_color: str | None = None
    is_active: bool = True
    is_default: bool = False


class PricingSectionUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    heading: str | None = None
    subheading: str | None = None
    layout_type: str | None = None
    background_color: str | None = None
    text_color: str | None = None
    is_active: bool | None = None
    is_default: bool | None = None


class PricingSectionPlanRead(CamelModel):
    id: int
    pricing_section_id: int
    plan_id: str
    sort_order: int = 0
    is_visible: bool = True
    plan: PlanRead | None = None


class PricingSectionPlanCreate(CamelModel):
    pricing_section_id: int
    plan_id: str
    sort_order: int = 0
    is_visible: bool = True


class PricingSectionPlanUpdate(CamelModel):
    sort_order: int | None = None
    is_visible: bool | None = None


# ---------- Pages ----------


class PageCreate(CamelModel):
    slug: str = Field(min_length=1, max_length=200, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    title: str = Field(min_length=1, max_length=255)
    meta_title: str | None = None
    meta_description: str | None = None
    sort_order: int = 0
    show_in_header: bool = True
    show_in_footer: bool = False


class PageUpdate(CamelModel):
    slug: str | None = Field(None, min_length=1, max_length=200, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    title: str | None = Field(None, min_length=1, max_length=255)
    meta_title: str | None = None
    meta_description: str | None = None
    sort_order: int | None = None
    show_in_header: bool | None = None
    show_in_footer: bool | None = None


class PageSectionWrite(CamelModel):
    """Fields shared by page-section create and update."""

    title: str | None = None
    subtitle: str | None = None
    content: str | None = None
    is_visible: bool | None = None
    hero_section_id: int | None = None
    feature_group_id: int | None = None
    media_section_id: int | None = None
    pricing_section_id: int | None = None
    faq_section_id: int | None = None
    faq_category_id: int | None = None
    form_id: int | None = None
    html_section_id: int | None = None


class PageSectionCreate(PageSectionWrite):
    page_id: int
    section_type: str = Field(min_length=1, max_length=50)
    sort_order: int | None = Field(None, description="Defaults to after the page's last section")
    is_visible: bool = True


class PageSectionUpdate(PageSectionWrite):
    section_type: str | None = Field(None, min_length=1, max_length=50)
    sort_order: int | None = None


class PageSectionReorder(CamelModel):
    page_id: int
    section_ids: list[int] = Field(min_length=1)


# ---------- Section content ----------


class CTAButtonCreate(CamelModel):
    text: str = Field(min_length=1, max_length=100)
    url: str = Field(min_length=1, max_length=500)
    icon: str | None = None
    style: str = "primary"
    target: str = "_self"
    is_active: bool = True


class CTAButtonUpdate(CamelModel):
    text: str | None = Field(None, min_length=1, max_length=100)
    url: str | None = Field(None, min_length=1, max_length=500)
    icon: str | None = None
    style: str | None = None
    target: str | None = None
    is_active: bool | None = None


class HeroSectionCreate(CamelModel):
    name: str | None = None
    layout_type: str = "split"
    tagline: str | None = None
    headline: str = Field(min_length=1, max_length=255)
    subheading: str | None = None
    text_alignment: str = "left"
    media_url: str | None = None
    media_type: str = "image"
    media_alt: str | None = None
    background_type: str = "color"
    background_value: str = "#FFFFFF"
    cta_primary_id: int | None = None
    cta_secondary_id: int | None = None
    visible: bool = True


class HeroSectionUpdate(CamelModel):
    name: str | None = None
    layout_type: str | None = None
    tagline: str | None = None
    headline: str | None = Field(None, min_length=1, max_length=255)
    subheading: str | None = None
    text_alignment: str | None = None
    media_url: str | None = None
    media_type: str | None = None
    media_alt: str | None = None
    background_type: str | None = None
    background_value: str | None = None
    cta_primary_id: int | None = None
    cta_secondary_id: int | None = None
    visible: bool | None = None


class FeatureCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = ""
    icon_url: str | None = None
    category: str | None = None
    sort_order: int = 0
    is_active: bool = True


class FeatureUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    icon_url: str | None = None
    category: str | None = None
    sort_order: int | None = None
    is_active: bool | None = None


class FeatureGroupItemWrite(CamelModel):
    feature_id: int
    sort_order: int = 0
    is_visible: bool = True


class FeatureGroupCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    layout_type: str = "grid"
    background_color: str | None = None
    is_active: bool = True
    items: list[FeatureGroupItemWrite] = Field(default_factory=list)


class FeatureGroupUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    layout_type: str | None = None
    background_color: str | None = None
    is_active: bool | None = None
    items: list[FeatureGroupItemWrite] | None = Field(None, description="Replaces every item when given")


class MediaSectionFeatureWrite(CamelModel):
    icon: str | None = None
    label: str = Field(min_length=1, max_length=200)
    color: str | None = None
    sort_order: int = 0


class MediaSectionCreate(CamelModel):
    headline: str = Field(min_length=1, max_length=255)
    subheading: str | None = None
    media_url: str = Field(min_length=1, max_length=500)
    media_type: str = "image"
    layout_type: str = "media_right"
    badge_text: str | None = None
    show_badge: bool = False
    show_cta_button: bool = False
    cta_text: str | None = None
    cta_url: str | None = None
    alignment: str = "left"
    background_color: str = "#FFFFFF"
    text_color: str = "#111827"
    is_active: bool = True
    features: list[MediaSectionFeatureWrite] = Field(default_factory=list)


class MediaSectionUpdate(CamelModel):
    headline: str | None = Field(None, min_length=1, max_length=255)
    subheading: str | None = None
    media_url: str | None = Field(None, min_length=1, max_length=500)
    media_type: str | None = None
    layout_type: str | None = None
    badge_text: str | None = None
    show_badge: bool | None = None
    show_cta_button: bool | None = None
    cta_text: str | None = None
    cta_url: str | None = None
    alignment: str | None = None
    background_color: str | None = None
    text_color: str | None = None
    is_active: bool | None = None
    features: list[MediaSectionFeatureWrite] | None = Field(None, description="Replaces every badge when given")


class FAQCategoryCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    icon: str | None = None
    color: str = "#6366F1"
    sort_order: int = 0
    is_active: bool = True


class FAQCategoryUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    icon: str | None = None
    color: str | None = None
    sort_order: int | None = None
    is_active: bool | None = None


class FAQCreate(CamelModel):
    category_id: int | None = None
    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)
    sort_order: int = 0
    is_active: bool = True


class FAQUpdate(CamelModel):
    category_id: int | None = None
    question: str | None = Field(None, min_length=1)
    answer: str | None = Field(None, min_length=1)
    sort_order: int | None = None
    is_active: bool | None = None


class FAQSectionCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    heading: str = "Frequently Asked Questions"
    subheading: str | None = None
    search_placeholder: str | None = None
    show_categories: bool = True
    background_color: str | None = None
    is_active: bool = True
    category_ids: list[int] = Field(default_factory=list)


class FAQSectionUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    heading: str | None = None
    subheading: str | None = None
    search_placeholder: str | None = None
    show_categories: bool | None = None
    background_color: str | None = None
    is_active: bool | None = None
    category_ids: list[int] | None = Field(None, description="Replaces the category list when given")


class HtmlSectionCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    html_content: str = ""
    css_content: str | None = None
    js_content: str | None = None
    is_active: bool = True


class HtmlSectionUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    html_content: str | None = None
    css_content: str | None = None
    js_content: str | None = None
    is_active: bool | None = None


# ---------- Forms ----------


class FormFieldWrite(CamelModel):
    field_type: str
    field_name: str = Field(min_length=1, max_length=100)
    label: str = Field(min_length=1, max_length=255)
    placeholder: str | None = None
    help_text: str | None = None
    is_required: bool = False
    field_width: str = "full"
    field_options: list[str] | None = None
    sort_order: int | None = None

    @field_validator("field_type")
    @classmethod
    def _known_field_type(cls, value: str) -> str:
        if value not in FIELD_TYPES:
            raise ValueError(f"Unknown field type: {value}")
        return value


class FormAdminRead(FormRead):
    error_message: str | None = None
    redirect_url: str | None = None
    email_notification: bool = False
    email_recipients: str | None = None
    dynamic_email_recipients: bool = False
    email_field_recipients: str | None = None
    send_to_submitter_email: bool = False
    submitter_email_field: str | None = None
    admin_email_subject: str | None = None
    admin_email_template: str | None = None
    submitter_email_subject: str | None = None
    submitter_email_template: str | None = None
    newsletter_action: bool = False
    newsletter_email_field: str | None = None


class FormSettingsWrite(CamelModel):
    title: str | None = None
    subheading: str | None = None
    success_message: str | None = None
    error_message: str | None = None
    cta_text: str | None = None
    redirect_url: str | None = None
    is_active: bool | None = None
    email_notification: bool | None = None
    email_recipients: str | None = None
    dynamic_email_recipients: bool | None = None
    email_field_recipients: str | None = None
    send_to_submitter_email: bool | None = None
    submitter_email_field: str | None = None
    admin_email_subject: str | None = None
    admin_email_template: str | None = None
    submitter_email_subject: str | None = None
    submitter_email_template: str | None = None
    newsletter_action: bool | None = None
    newsletter_email_field: str | None = None


class FormCreate(FormSettingsWrite):
    name: str = Field(min_length=1, max_length=200)
    fields: list[FormFieldWrite] = Field(default_factory=list)


class FormUpdate(FormSettingsWrite):
    name: str | None = Field(None, min_length=1, max_length=200)
    fields: list[FormFieldWrite] | None = Field(None, description="Replaces every field when given")


class FormSubmissionRead(CamelModel):
    id: int
    form_id: int
    form_data: dict[str, Any]
    ip_address: str | None = None
    user_agent: str | None = None
    referrer: str | None = None
    email_status: str
    email_error: str | None = None
    email_message_id: str | None = None
    email_recipients: str | None = None
    email_subject: str | None = None
    email_sent_at: datetime | None = None
    created_at: datetime

    @field_validator("form_data", mode="before")
    @classmethod
    def _decode_form_data(cls, value: Any) -> Any:
        return json.loads(value) if isinstance(value, str) else value


class NewsletterSubscriberRead(CamelModel):
    id: int
    email: str
    subscribed: bool
    created_at: datetime


class NewsletterSubscriberCreate(CamelModel):
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class NewsletterSubscriberUpdate(CamelModel):
    subscribed: bool


# ---------- Site settings ----------


class SiteSettingsRead(CamelModel):
    id: int
    site_name: str
    footer_company_name: str
    logo_url: str | None = None
    smtp_enabled: bool = False
    smtp_host: str | None = None
    smtp_port: int | None = None
    smtp_username: str | None = None
    smtp_password_set: bool = False
    smtp_from_email: str | None = None
    smtp_from_name: str | None = None
    smtp_reply_to: str | None = None


class SiteSettingsUpdate(CamelModel):
    site_name: str | None = None
    footer_company_name: str | None = None
    logo_url: str | None = None
    smtp_enabled: bool | None = None
    smtp_host: str | None = None
    smtp_port: int | None = Field(None, ge=1, le=65535)
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_from_email: str | None = None
    smtp_from_name: str | None = None
    smtp_reply_to: str | None = None
