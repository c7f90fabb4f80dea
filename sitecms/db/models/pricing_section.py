"""PricingSection: a configurable pricing block showing a subset of plans."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from sitecms.db.base import Base, utcnow


class PricingSection(Base):
    __tablename__ = "pricing_sections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    heading = Column(String(255), nullable=False, default="Pricing Plans")
    subheading = Column(String(500), nullable=True)
    layout_type = Column(String(50), nullable=False, default="standard")
    background_color = Column(String(20), nullable=True)
    text_color = Column(String(20), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    is_default = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    section_plans = relationship(
        "PricingSectionPlan",
        back_populates="pricing_section",
        cascade="all, delete-orphan",
        order_by="PricingSectionPlan.sort_order",
    )


class PricingSectionPlan(Base):
    __tablename__ = "pricing_section_plans"
    __table_args__ = (UniqueConstraint("pricing_section_id", "plan_id", name="uq_pricing_section_plan"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    pricing_section_id = Column(Integer, ForeignKey("pricing_sections.id", ondelete="CASCADE"), nullable=False, index=True)
    plan_id = Column(String(36), ForeignKey("plans.id"), nullable=False, index=True)
    sort_order = Column(Integer, nullable=False, default=0)
    is_visible = Column(Boolean, nullable=False, default=True)

    pricing_section = relationship("PricingSection", back_populates="section_plans")
    plan = relationship("Plan", back_populates="section_plans")
