"""Form builder models: forms, their fields, and stored submissions."""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from sitecms.db.base import Base, utcnow

DEFAULT_ADMIN_TEMPLATE = (
    "You have received a new form submission.\n\n{{FORM_DATA}}\n\nSubmitted at: {{SUBMITTED_AT}}"
)
DEFAULT_SUBMITTER_TEMPLATE = (
    "Dear {{SUBMITTER_NAME}},\n\nThank you for contacting us! We have received your message "
    "and will get back to you soon.\n\nBest regards,\nThe Team"
)


class Form(Base):
    __tablename__ = "forms"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    title = Column(String(255), nullable=True)
    subheading = Column(Text, nullable=True)
    success_message = Column(Text, nullable=False, default="Thank you! Your message has been sent successfully.")
    error_message = Column(Text, nullable=False, default="Sorry, there was an error. Please try again.")
    cta_text = Column(String(100), nullable=False, default="Send Message")
    redirect_url = Column(String(500), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    # Notifications
    email_notification = Column(Boolean, nullable=False, default=False)
    email_recipients = Column(Text, nullable=True)  # comma-separated
    dynamic_email_recipients = Column(Boolean, nullable=False, default=False)
    email_field_recipients = Column(Text, nullable=True)  # JSON list of field names (comma list tolerated)
    send_to_submitter_email = Column(Boolean, nullable=False, default=False)
    submitter_email_field = Column(String(100), nullable=True)
    admin_email_subject = Column(String(255), nullable=False, default="New Form Submission")
    admin_email_template = Column(Text, nullable=False, default=DEFAULT_ADMIN_TEMPLATE)
    submitter_email_subject = Column(String(255), nullable=False, default="Thank you for your submission")
    submitter_email_template = Column(Text, nullable=False, default=DEFAULT_SUBMITTER_TEMPLATE)

    # Newsletter
    newsletter_action = Column(Boolean, nullable=False, default=False)
    newsletter_email_field = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    fields = relationship(
        "FormField",
        back_populates="form",
        cascade="all, delete-orphan",
        order_by="FormField.sort_order",
    )
    submissions = relationship("FormSubmission", back_populates="form", cascade="all, delete-orphan")


class FormField(Base):
    __tablename__ = "form_fields"

    id = Column(Integer, primary_key=True, autoincrement=True)
    form_id = Column(Integer, ForeignKey("forms.id", ondelete="CASCADE"), nullable=False, index=True)
    field_type = Column(String(50), nullable=False)  # text, email, tel, url, number, date, select, ...
    field_name = Column(String(100), nullable=False)
    label = Column(String(255), nullable=False)
    placeholder = Column(String(255), nullable=True)
    help_text = Column(Text, nullable=True)
    is_required = Column(Boolean, nullable=False, default=False)
    field_width = Column(String(20), nullable=False, default="full")
    field_options = Column(JSON, nullable=True)  # ["Option A", "Option B"] for select/radio/checkbox
    sort_order = Column(Integer, nullable=False, default=0)

    form = relationship("Form", back_populates="fields")


class FormSubmission(Base):
    __tablename__ = "form_submissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    form_id = Column(Integer, ForeignKey("forms.id", ondelete="CASCADE"), nullable=False, index=True)
    form_data = Column(Text, nullable=False)  # JSON-serialized field values
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(500), nullable=True)
    referrer = Column(String(500), nullable=True)

    # pending | not_configured | sent | failed
    email_status = Column(String(20), nullable=False, default="not_configured")
    email_error = Column(Text, nullable=True)
    email_message_id = Column(String(255), nullable=True)
    email_recipients = Column(Text, nullable=True)
    email_subject = Column(String(255), nullable=True)
    email_sent_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    form = relationship("Form", back_populates="submissions")
