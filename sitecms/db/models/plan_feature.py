"""Configurable plan metrics (feature types + per-plan limits) and basic features."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from sitecms.db.base import Base, utcnow


class PlanFeatureType(Base):
    __tablename__ = "plan_feature_types"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)  # e.g. "Assistants"
    unit = Column(String(100), nullable=True)  # e.g. "active assistants"
    description = Column(Text, nullable=True)
    icon = Column(String(100), nullable=True)
    icon_url = Column(String(500), nullable=True)
    data_type = Column(String(20), nullable=False, default="number")  # number | text
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    limits = relationship("PlanFeatureLimit", back_populates="feature_type", cascade="all, delete-orphan")


class PlanFeatureLimit(Base):
    __tablename__ = "plan_feature_limits"
    __table_args__ = (UniqueConstraint("plan_id", "feature_type_id", name="uq_plan_feature_limit"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    plan_id = Column(String(36), ForeignKey("plans.id", ondelete="CASCADE"), nullable=False, index=True)
    feature_type_id = Column(String(36), ForeignKey("plan_feature_types.id", ondelete="CASCADE"), nullable=False)
    value = Column(String(100), nullable=False, default="0")  # kept as text, shown verbatim
    is_unlimited = Column(Boolean, nullable=False, default=False)

    plan = relationship("Plan", back_populates="feature_limits")
    feature_type = relationship("PlanFeatureType", back_populates="limits")


class BasicFeature(Base):
    __tablename__ = "basic_features"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    plan_links = relationship("PlanBasicFeature", back_populates="basic_feature", cascade="all, delete-orphan")


class PlanBasicFeature(Base):
    """Presence-only join: a row means the plan includes the feature."""

    __tablename__ = "plan_basic_features"
    __table_args__ = (UniqueConstraint("plan_id", "basic_feature_id", name="uq_plan_basic_feature"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    plan_id = Column(String(36), ForeignKey("plans.id", ondelete="CASCADE"), nullable=False, index=True)
    basic_feature_id = Column(String(36), ForeignKey("basic_features.id", ondelete="CASCADE"), nullable=False)

    plan = relationship("Plan", back_populates="basic_features")
    basic_feature = relationship("BasicFeature", back_populates="plan_links")
