"""Page section rules: visibility, ordering, and the tagged-variant mapping.

Pure functions with no external dependencies beyond the schema types.
"""

from enum import Enum

from sitecms.schemas.pages import PageSectionRead
from sitecms.schemas.sections import (
    FAQCategoryBlock,
    FAQContent,
    FAQItem,
    FeatureItem,
    FeaturesContent,
    FormContent,
    GenericContent,
    HeroContent,
    HtmlContent,
    MediaContent,
    PlaceholderContent,
    PricingContent,
)


class SectionType(str, Enum):
    HERO = "hero"
    FEATURES = "features"
    MEDIA = "media"
    PRICING = "pricing"
    FAQ = "faq"
    FORM = "form"
    HTML = "html"
    TESTIMONIALS = "testimonials"
    CTA = "cta"
    CUSTOM = "custom"


# Foreign keys that may be populated for each section type
RELATION_KEYS: dict[SectionType, tuple[str, ...]] = {
    SectionType.HERO: ("hero_section_id",),
    SectionType.FEATURES: ("feature_group_id",),
    SectionType.MEDIA: ("media_section_id",),
    SectionType.PRICING: ("pricing_section_id",),
    SectionType.FAQ: ("faq_section_id", "faq_category_id"),
    SectionType.FORM: ("form_id",),
    SectionType.HTML: ("html_section_id",),
    SectionType.TESTIMONIALS: (),
    SectionType.CTA: (),
    SectionType.CUSTOM: (),
}

ALL_RELATION_KEYS: tuple[str, ...] = tuple(
    sorted({key for keys in RELATION_KEYS.values() for key in keys})
)

GENERIC_DEFAULTS: dict[SectionType, tuple[str, str | None]] = {
    SectionType.TESTIMONIALS: ("What Our Customers Say", "Testimonials section coming soon..."),
    SectionType.CTA: ("Ready to Get Started?", "Join thousands of businesses already using our platform."),
    SectionType.CUSTOM: ("Custom Section", None),
}

MISSING_CONTENT_MESSAGE = "This section has no content configured yet."


def parse_section_type(value: str) -> SectionType | None:
    try:
        return SectionType(value)
    except ValueError:
        return None


def validate_section_relations(section_type: str, relation_ids: dict[str, int | None]) -> list[str]:
    """Return the foreign keys that are set but belong to a different section type.

    Unknown section types may not carry any relation.
    """
    parsed = parse_section_type(section_type)
    allowed = RELATION_KEYS.get(parsed, ()) if parsed else ()
    return [
        key for key in ALL_RELATION_KEYS
        if relation_ids.get(key) is not None and key not in allowed
    ]


def visible_in_order(sections: list[PageSectionRead]) -> list[PageSectionRead]:
    """Visible sections in ascending sort order (ties broken by id)."""
    return sorted(
        (s for s in sections if s.is_visible),
        key=lambda s: (s.sort_order, s.id),
    )


def _placeholder(section: PageSectionRead, heading: str | None = None, message: str | None = None) -> PlaceholderContent:
    label = section.section_type.replace("_", " ").title()
    return PlaceholderContent(
        section_type=section.section_type,
        heading=section.title or heading or f"{label} Section",
        message=section.subtitle or message or MISSING_CONTENT_MESSAGE,
    )


def _features_content(section: PageSectionRead) -> FeaturesContent:
    group = section.feature_group
    items = [
        FeatureItem(
            id=item.feature.id,
            title=item.feature.name,
            description=item.feature.description,
            icon_name=item.feature.icon_url,
            category=item.feature.category,
            sort_order=item.feature.sort_order,
        )
        for item in group.items
        if item.is_visible
    ]
    items.sort(key=lambda f: (f.sort_order, f.id))
    return FeaturesContent(
        heading=section.title or group.name,
        subheading=section.subtitle or group.description,
        layout_type=group.layout_type or "grid",
        background_color=group.background_color,
        features=items,
    )


def _faq_content(section: PageSectionRead) -> FAQContent:
    faq_section = section.faq_section
    if faq_section is not None:
        categories = [sc.category for sc in sorted(faq_section.section_categories, key=lambda sc: sc.sort_order)]
    else:
        categories = [section.faq_category]

    blocks = [
        FAQCategoryBlock(
            id=category.id,
            name=category.name,
            description=category.description,
            icon=category.icon,
            color=category.color,
            faqs=[
                FAQItem(id=faq.id, question=faq.question, answer=faq.answer)
                for faq in sorted(category.faqs, key=lambda f: (f.sort_order, f.id))
                if faq.is_active
            ],
        )
        for category in categories
        if category.is_active
    ]
    return FAQContent(
        heading=section.title or (faq_section.heading if faq_section else None) or "Frequently Asked Questions",
        subheading=section.subtitle or (faq_section.subheading if faq_section else None),
        search_placeholder=faq_section.search_placeholder if faq_section else None,
        show_categories=faq_section.show_categories if faq_section else True,
        background_color=faq_section.background_color if faq_section else None,
        categories=blocks,
    )


def build_section_content(section: PageSectionRead):
    """Map a loose section row to its tagged content variant.

    Never raises: a known type without its content row and any unknown type
    become a placeholder block.
    """
    section_type = parse_section_type(section.section_type)

    if section_type is SectionType.HERO and section.hero_section is not None:
        return HeroContent(
            headline=section.title or section.hero_section.headline,
            subheading=section.subtitle or section.hero_section.subheading,
            hero=section.hero_section,
        )

    if section_type is SectionType.FEATURES and section.feature_group is not None:
        return _features_content(section)

    if section_type is SectionType.MEDIA and section.media_section is not None:
        return MediaContent(media=section.media_section)

    if section_type is SectionType.PRICING:
        if section.pricing_section is not None:
            return PricingContent(
                pricing_section_id=section.pricing_section.id,
                heading=section.title or section.pricing_section.heading,
                subheading=section.subtitle or section.pricing_section.subheading,
                layout_type=section.pricing_section.layout_type,
            )
        return _placeholder(section, "Pricing Plans", "Pricing section coming soon...")

    if section_type is SectionType.FAQ and (section.faq_section is not None or section.faq_category is not None):
        return _faq_content(section)

    if section_type is SectionType.FORM and section.form is not None:
        return FormContent(
            title=section.title or section.form.title,
            subtitle=section.subtitle or section.form.subheading,
            form=section.form,
        )

    if section_type is SectionType.HTML and section.html_section is not None:
        return HtmlContent(html=section.html_section)

    if section_type in GENERIC_DEFAULTS:
        heading, subheading = GENERIC_DEFAULTS[section_type]
        return GenericContent(
            section_type=section_type.value,
            heading=section.title or heading,
            subheading=section.subtitle or subheading,
            body=section.content,
        )

    if section_type is None:
        label = section.section_type
        return _placeholder(section, f"{label} Section", f"{label} section coming soon...")

    return _placeholder(section)
