"""BillingCycle and PlanPricing models."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from sitecms.db.base import Base, utcnow


class BillingCycle(Base):
    __tablename__ = "billing_cycles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    label = Column(String(50), nullable=False)  # "Monthly", "Yearly"
    multiplier = Column(Integer, nullable=False, default=1)  # months covered by one payment
    # Written only through services.defaults.set_default
    is_default = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    pricing = relationship("PlanPricing", back_populates="billing_cycle", cascade="all, delete-orphan")


class PlanPricing(Base):
    __tablename__ = "plan_pricing"
    __table_args__ = (UniqueConstraint("plan_id", "billing_cycle_id", name="uq_plan_pricing_plan_cycle"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    plan_id = Column(String(36), ForeignKey("plans.id", ondelete="CASCADE"), nullable=False, index=True)
    billing_cycle_id = Column(String(36), ForeignKey("billing_cycles.id", ondelete="CASCADE"), nullable=False)
    price_cents = Column(Integer, nullable=False, default=0)
    stripe_price_id = Column(String(255), nullable=True)
    cta_url = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    plan = relationship("Plan", back_populates="pricing")
    billing_cycle = relationship("BillingCycle", back_populates="pricing")
