"""HtmlSection model: admin-authored markup rendered as-is."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from sitecms.db.base import Base, utcnow


class HtmlSection(Base):
    __tablename__ = "html_sections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    html_content = Column(Text, nullable=False, default="")
    css_content = Column(Text, nullable=True)
    js_content = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
