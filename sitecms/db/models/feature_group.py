"""Features and the groups that arrange them into a section."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from sitecms.db.base import Base, utcnow


class Feature(Base):
    __tablename__ = "features"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    icon_url = Column(String(500), nullable=True)  # icon name or image URL
    category = Column(String(100), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


class FeatureGroup(Base):
    __tablename__ = "feature_groups"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    layout_type = Column(String(20), nullable=False, default="grid")  # grid | list
    background_color = Column(String(20), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    items = relationship("FeatureGroupItem", back_populates="feature_group", cascade="all, delete-orphan")


class FeatureGroupItem(Base):
    __tablename__ = "feature_group_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    feature_group_id = Column(Integer, ForeignKey("feature_groups.id", ondelete="CASCADE"), nullable=False, index=True)
    feature_id = Column(Integer, ForeignKey("features.id", ondelete="CASCADE"), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    is_visible = Column(Boolean, nullable=False, default=True)

    feature_group = relationship("FeatureGroup", back_populates="items")
    feature = relationship("Feature")
