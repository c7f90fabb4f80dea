"""Plan model: a purchasable tier shown in pricing sections."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from sitecms.db.base import Base, utcnow


class Plan(Base):
    __tablename__ = "plans"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    position = Column(Integer, nullable=False, default=0)  # display order
    is_active = Column(Boolean, nullable=False, default=True)
    is_popular = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    pricing = relationship("PlanPricing", back_populates="plan", cascade="all, delete-orphan")
    feature_limits = relationship("PlanFeatureLimit", back_populates="plan", cascade="all, delete-orphan")
    basic_features = relationship("PlanBasicFeature", back_populates="plan", cascade="all, delete-orphan")
    section_plans = relationship("PricingSectionPlan", back_populates="plan")
