"""Page and PageSection models.

A PageSection is tagged by ``section_type`` and points at most one content
row through the matching foreign key (hero -> hero_section_id, ...).
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from sitecms.db.base import Base, utcnow


class Page(Base):
    __tablename__ = "pages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    slug = Column(String(200), unique=True, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    meta_title = Column(String(255), nullable=True)
    meta_description = Column(Text, nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    show_in_header = Column(Boolean, nullable=False, default=True)
    show_in_footer = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    sections = relationship("PageSection", back_populates="page", cascade="all, delete-orphan")


class PageSection(Base):
    __tablename__ = "page_sections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    page_id = Column(Integer, ForeignKey("pages.id", ondelete="CASCADE"), nullable=False, index=True)
    section_type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=True)  # overrides the content heading
    subtitle = Column(Text, nullable=True)
    content = Column(Text, nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    is_visible = Column(Boolean, nullable=False, default=True)

    hero_section_id = Column(Integer, ForeignKey("hero_sections.id", ondelete="SET NULL"), nullable=True)
    feature_group_id = Column(Integer, ForeignKey("feature_groups.id", ondelete="SET NULL"), nullable=True)
    media_section_id = Column(Integer, ForeignKey("media_sections.id", ondelete="SET NULL"), nullable=True)
    pricing_section_id = Column(Integer, ForeignKey("pricing_sections.id", ondelete="SET NULL"), nullable=True)
    faq_section_id = Column(Integer, ForeignKey("faq_sections.id", ondelete="SET NULL"), nullable=True)
    faq_category_id = Column(Integer, ForeignKey("faq_categories.id", ondelete="SET NULL"), nullable=True)
    form_id = Column(Integer, ForeignKey("forms.id", ondelete="SET NULL"), nullable=True)
    html_section_id = Column(Integer, ForeignKey("html_sections.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    page = relationship("Page", back_populates="sections")
    hero_section = relationship("HeroSection")
    feature_group = relationship("FeatureGroup")
    media_section = relationship("MediaSection")
    pricing_section = relationship("PricingSection")
    faq_section = relationship("FAQSection")
    faq_category = relationship("FAQCategory")
    form = relationship("Form")
    html_section = relationship("HtmlSection")
