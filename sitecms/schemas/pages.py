"""Wire format for pages and page sections with their nested content.

This is the loose shape served by ``GET /api/admin/page-sections``: every
content relation is optional and the section type is a plain string. The
composer turns it into the tagged variants in ``schemas.sections``.
"""

from pydantic import Field

from sitecms.schemas.base import CamelModel
from sitecms.schemas.pricing import PricingSectionRead


class CTAButtonRead(CamelModel):
    id: int
    text: str
    url: str
    icon: str | None = None
    style: str = "primary"
    target: str = "_self"
    is_active: bool = True


class HeroSectionRead(CamelModel):
    id: int
    name: str | None = None
    layout_type: str = "split"
    tagline: str | None = None
    headline: str
    subheading: str | None = None
    text_alignment: str = "left"
    media_url: str | None = None
    media_type: str = "image"
    media_alt: str | None = None
    background_type: str = "color"
    background_value: str = "#FFFFFF"
    visible: bool = True
    cta_primary_id: int | None = None
    cta_secondary_id: int | None = None
    cta_primary: CTAButtonRead | None = None
    cta_secondary: CTAButtonRead | None = None


class FeatureRead(CamelModel):
    id: int
    name: str
    description: str = ""
    icon_url: str | None = None
    category: str | None = None
    sort_order: int = 0
    is_active: bool = True


class FeatureGroupItemRead(CamelModel):
    id: int
    sort_order: int = 0
    is_visible: bool = True
    feature: FeatureRead


class FeatureGroupRead(CamelModel):
    id: int
    name: str
    description: str | None = None
    layout_type: str = "grid"
    background_color: str | None = None
    is_active: bool = True
    items: list[FeatureGroupItemRead] = Field(default_factory=list)


class MediaSectionFeatureRead(CamelModel):
    id: int
    icon: str | None = None
    label: str
    color: str | None = None
    sort_order: int = 0


class MediaSectionRead(CamelModel):
    id: int
    headline: str
    subheading: str | None = None
    media_url: str
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
    features: list[MediaSectionFeatureRead] = Field(default_factory=list)


class FAQRead(CamelModel):
    id: int
    category_id: int | None = None
    question: str
    answer: str
    sort_order: int = 0
    is_active: bool = True


class FAQCategoryRead(CamelModel):
    id: int
    name: str
    description: str | None = None
    icon: str | None = None
    color: str = "#6366F1"
    sort_order: int = 0
    is_active: bool = True
    faqs: list[FAQRead] = Field(default_factory=list)


class FAQSectionCategoryRead(CamelModel):
    id: int
    category_id: int
    sort_order: int = 0
    category: FAQCategoryRead


class FAQSectionRead(CamelModel):
    id: int
    name: str
    heading: str = "Frequently Asked Questions"
    subheading: str | None = None
    search_placeholder: str | None = None
    show_categories: bool = True
    background_color: str | None = None
    is_active: bool = True
    section_categories: list[FAQSectionCategoryRead] = Field(default_factory=list)


class FormFieldRead(CamelModel):
    id: int
    field_type: str
    field_name: str
    label: str
    placeholder: str | None = None
    help_text: str | None = None
    is_required: bool = False
    field_width: str = "full"
    field_options: list[str] | None = None
    sort_order: int = 0


class FormRead(CamelModel):
    id: int
    name: str
    title: str | None = None
    subheading: str | None = None
    cta_text: str = "Send Message"
    success_message: str | None = None
    is_active: bool = True
    fields: list[FormFieldRead] = Field(default_factory=list)


class HtmlSectionRead(CamelModel):
    id: int
    name: str
    description: str | None = None
    html_content: str = ""
    css_content: str | None = None
    js_content: str | None = None
    is_active: bool = True


class PageRef(CamelModel):
    id: int
    slug: str
    title: str


class PageRead(CamelModel):
    id: int
    slug: str
    title: str
    meta_title: str | None = None
    meta_description: str | None = None
    sort_order: int = 0
    show_in_header: bool = True
    show_in_footer: bool = False


class PageSectionRead(CamelModel):
    id: int
    page_id: int
    section_type: str
    title: str | None = None
    subtitle: str | None = None
    content: str | None = None
    sort_order: int = 0
    is_visible: bool = True

    hero_section_id: int | None = None
    feature_group_id: int | None = None
    media_section_id: int | None = None
    pricing_section_id: int | None = None
    faq_section_id: int | None = None
    faq_category_id: int | None = None
    form_id: int | None = None
    html_section_id: int | None = None

    page: PageRef | None = None
    hero_section: HeroSectionRead | None = None
    feature_group: FeatureGroupRead | None = None
    media_section: MediaSectionRead | None = None
    pricing_section: PricingSectionRead | None = None
    faq_section: FAQSectionRead | None = None
    faq_category: FAQCategoryRead | None = None
    form: FormRead | None = None
    html_section: HtmlSectionRead | None = None


class PageWithSections(CamelModel):
    """A page plus every section row, as loaded by a section source."""

    page: PageRead
    sections: list[PageSectionRead] = Field(default_factory=list)
    # section id -> why its content could not be read; rendered as an error block
    section_errors: dict[int, str] = Field(default_factory=dict)
