"""Tagged section content variants.

Each variant carries exactly the payload its renderer needs, so a renderer
can never receive a tag with a mismatched payload.
"""

from typing import Annotated, Literal, Union

from pydantic import Field

from sitecms.schemas.base import CamelModel
from sitecms.schemas.pages import FormRead, HeroSectionRead, HtmlSectionRead, MediaSectionRead
from sitecms.schemas.pricing import PricingMatrix


class FeatureItem(CamelModel):
    id: int
    title: str
    description: str = ""
    icon_name: str | None = None
    category: str | None = None
    sort_order: int = 0


class FAQItem(CamelModel):
    id: int
    question: str
    answer: str


class FAQCategoryBlock(CamelModel):
    id: int
    name: str
    description: str | None = None
    icon: str | None = None
    color: str = "#6366F1"
    faqs: list[FAQItem] = Field(default_factory=list)


class HeroContent(CamelModel):
    type: Literal["hero"] = "hero"
    headline: str
    subheading: str | None = None
    hero: HeroSectionRead


class FeaturesContent(CamelModel):
    type: Literal["features"] = "features"
    heading: str
    subheading: str | None = None
    layout_type: str = "grid"
    background_color: str | None = None
    features: list[FeatureItem] = Field(default_factory=list)


class MediaContent(CamelModel):
    type: Literal["media"] = "media"
    media: MediaSectionRead


class PricingContent(CamelModel):
    type: Literal["pricing"] = "pricing"
    pricing_section_id: int
    heading: str
    subheading: str | None = None
    layout_type: str = "standard"
    matrix: PricingMatrix | None = None


class FAQContent(CamelModel):
    type: Literal["faq"] = "faq"
    heading: str
    subheading: str | None = None
    search_placeholder: str | None = None
    show_categories: bool = True
    background_color: str | None = None
    categories: list[FAQCategoryBlock] = Field(default_factory=list)


class FormContent(CamelModel):
    type: Literal["form"] = "form"
    title: str | None = None
    subtitle: str | None = None
    form: FormRead


class HtmlContent(CamelModel):
    type: Literal["html"] = "html"
    html: HtmlSectionRead


class GenericContent(CamelModel):
    """Static blocks without a backing entity: testimonials, cta, custom."""

    type: Literal["generic"] = "generic"
    section_type: str
    heading: str
    subheading: str | None = None
    body: str | None = None


class PlaceholderContent(CamelModel):
    """Unknown types and known types whose content row is missing."""

    type: Literal["placeholder"] = "placeholder"
    section_type: str
    heading: str
    message: str


SectionContent = Annotated[
    Union[
        HeroContent,
        FeaturesContent,
        MediaContent,
        PricingContent,
        FAQContent,
        FormContent,
        HtmlContent,
        GenericContent,
        PlaceholderContent,
    ],
    Field(discriminator="type"),
]


class ComposedSection(CamelModel):
    id: int
    section_type: str
    sort_order: int
    content: SectionContent
    html: str | None = None
    error: str | None = None


class ComposedPage(CamelModel):
    slug: str
    state: Literal["ok", "empty", "not_found", "error"]
    title: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    message: str | None = None
    sections: list[ComposedSection] = Field(default_factory=list)
