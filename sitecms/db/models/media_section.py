"""MediaSection model: headline + media block with feature badges."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from sitecms.db.base import Base, utcnow


class MediaSection(Base):
    __tablename__ = "media_sections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    headline = Column(String(255), nullable=False)
    subheading = Column(Text, nullable=True)
    media_url = Column(String(500), nullable=False)
    media_type = Column(String(20), nullable=False, default="image")  # image | video
    layout_type = Column(String(50), nullable=False, default="media_right")
    badge_text = Column(String(100), nullable=True)
    show_badge = Column(Boolean, nullable=False, default=False)
    show_cta_button = Column(Boolean, nullable=False, default=False)
    cta_text = Column(String(100), nullable=True)
    cta_url = Column(String(500), nullable=True)
    alignment = Column(String(20), nullable=False, default="left")
    background_color = Column(String(20), nullable=False, default="#FFFFFF")
    text_color = Column(String(20), nullable=False, default="#111827")
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    features = relationship(
        "MediaSectionFeature",
        back_populates="media_section",
        cascade="all, delete-orphan",
        order_by="MediaSectionFeature.sort_order",
    )


class MediaSectionFeature(Base):
    __tablename__ = "media_section_features"

    id = Column(Integer, primary_key=True, autoincrement=True)
    media_section_id = Column(Integer, ForeignKey("media_sections.id", ondelete="CASCADE"), nullable=False, index=True)
    icon = Column(String(100), nullable=True)
    label = Column(String(200), nullable=False)
    color = Column(String(20), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)

    media_section = relationship("MediaSection", back_populates="features")
