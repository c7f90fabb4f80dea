"""SiteSettings model: one row of site-wide configuration, including SMTP."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from sitecms.db.base import Base, utcnow


class SiteSettings(Base):
    __tablename__ = "site_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    site_name = Column(String(200), nullable=False, default="Website")
    footer_company_name = Column(String(200), nullable=False, default="Your Company")
    logo_url = Column(String(500), nullable=True)

    # SMTP
    smtp_enabled = Column(Boolean, nullable=False, default=False)
    smtp_host = Column(String(255), nullable=True)
    smtp_port = Column(Integer, nullable=True)
    smtp_username = Column(String(255), nullable=True)
    smtp_password = Column(String(255), nullable=True)
    smtp_from_email = Column(String(255), nullable=True)
    smtp_from_name = Column(String(255), nullable=True)
    smtp_reply_to = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
