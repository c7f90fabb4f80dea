"""Public form submission request/response models."""

from typing import Any

from pydantic import Field

from sitecms.schemas.base import CamelModel


class SubmissionMetadata(CamelModel):
    ip_address: str | None = None
    user_agent: str | None = None
    url: str | None = None


class FormSubmitRequest(CamelModel):
    form_id: int
    form_data: dict[str, Any]
    metadata: SubmissionMetadata | None = None


class EmailDetails(CamelModel):
    message_id: str | None = None
    recipients: list[str] = Field(default_factory=list)
    subject: str | None = None
    sent_at: str | None = None
    error: str | None = None


class EmailOutcome(CamelModel):
    success: bool = True
    details: EmailDetails | None = None
    error: str | None = None


class FormSubmitResponse(CamelModel):
    success: bool = True
    submission_id: int
    message: str | None = None
    redirect_url: str | None = None
    email: EmailOutcome


class RetryEmailRequest(CamelModel):
    submission_id: int
