"""FAQ categories, questions, and the sections that group them."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from sitecms.db.base import Base, utcnow


class FAQCategory(Base):
    __tablename__ = "faq_categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String(100), nullable=True)
    color = Column(String(20), nullable=False, default="#6366F1")
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    faqs = relationship("FAQ", back_populates="category", order_by="FAQ.sort_order")


class FAQ(Base):
    __tablename__ = "faqs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_id = Column(Integer, ForeignKey("faq_categories.id", ondelete="SET NULL"), nullable=True, index=True)
    question = Column(Text, nullable=False)
    answer = Column(Text, nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    category = relationship("FAQCategory", back_populates="faqs")


class FAQSection(Base):
    __tablename__ = "faq_sections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    heading = Column(String(255), nullable=False, default="Frequently Asked Questions")
    subheading = Column(Text, nullable=True)
    search_placeholder = Column(String(255), nullable=True)
    show_categories = Column(Boolean, nullable=False, default=True)
    background_color = Column(String(20), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    section_categories = relationship(
        "FAQSectionCategory",
        back_populates="faq_section",
        cascade="all, delete-orphan",
        order_by="FAQSectionCategory.sort_order",
    )


class FAQSectionCategory(Base):
    __tablename__ = "faq_section_categories"
    __table_args__ = (UniqueConstraint("faq_section_id", "category_id", name="uq_faq_section_category"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    faq_section_id = Column(Integer, ForeignKey("faq_sections.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("faq_categories.id", ondelete="CASCADE"), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)

    faq_section = relationship("FAQSection", back_populates="section_categories")
    category = relationship("FAQCategory")
