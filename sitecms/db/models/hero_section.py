"""HeroSection and the CTA buttons it links to."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from sitecms.db.base import Base, utcnow


class CTAButton(Base):
    __tablename__ = "cta_buttons"

    id = Column(Integer, primary_key=True, autoincrement=True)
    text = Column(String(100), nullable=False)
    url = Column(String(500), nullable=False)
    icon = Column(String(100), nullable=True)
    style = Column(String(50), nullable=False, default="primary")
    target = Column(String(20), nullable=False, default="_self")
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


class HeroSection(Base):
    __tablename__ = "hero_sections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=True)
    layout_type = Column(String(50), nullable=False, default="split")  # split | centered | overlay
    tagline = Column(String(255), nullable=True)
    headline = Column(String(255), nullable=False)
    subheading = Column(Text, nullable=True)
    text_alignment = Column(String(20), nullable=False, default="left")
    media_url = Column(String(500), nullable=True)
    media_type = Column(String(20), nullable=False, default="image")
    media_alt = Column(String(255), nullable=True)
    background_type = Column(String(20), nullable=False, default="color")
    background_value = Column(String(255), nullable=False, default="#FFFFFF")
    cta_primary_id = Column(Integer, ForeignKey("cta_buttons.id", ondelete="SET NULL"), nullable=True)
    cta_secondary_id = Column(Integer, ForeignKey("cta_buttons.id", ondelete="SET NULL"), nullable=True)
    visible = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    cta_primary = relationship("CTAButton", foreign_keys=[cta_primary_id])
    cta_secondary = relationship("CTAButton", foreign_keys=[cta_secondary_id])
