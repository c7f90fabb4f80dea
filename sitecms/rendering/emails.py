"""Notification and confirmation emails for form submissions.

Form templates are plain text with ``{{NAME}}`` placeholders. Plain-text
templates are converted to HTML line by line, with ``{{FORM_DATA}}``
rendered as a field/value table; templates that already contain markup are
sent as authored.
"""

from dataclasses import dataclass
from typing import Any

from jinja2 import Environment, FileSystemLoader

from sitecms.db.models.form import DEFAULT_ADMIN_TEMPLATE, DEFAULT_SUBMITTER_TEMPLATE, Form
from sitecms.domain.forms import fill_template, format_value, template_variables
from sitecms.rendering.renderer import TEMPLATE_DIR
from sitecms.services.email_service import EmailMessage

FORM_DATA_PLACEHOLDER = "{{FORM_DATA}}"


@dataclass
class _Part:
    lines: list[str]
    rows: list[tuple[str, str]] | None = None


class EmailComposer:
    def __init__(self) -> None:
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=True,
        )

    def _to_html(self, template: str, variables: dict[str, str], form_data: dict[str, Any]) -> str:
        if "<" in template:
            return fill_template(template, variables)

        parts: list[_Part] = []
        rows = [(key, format_value(value)) for key, value in form_data.items()]
        chunks = template.split(FORM_DATA_PLACEHOLDER)
        for index, chunk in enumerate(chunks):
            parts.append(_Part(lines=fill_template(chunk, variables).split("\n")))
            if index < len(chunks) - 1:
                parts.append(_Part(lines=[], rows=rows))

        return self.env.get_template("emails/message.html").render(parts=parts)

    def admin_notification(
        self,
        form: Form,
        recipient: str,
        form_data: dict[str, Any],
        submission_id: int,
        submitted_at: str,
    ) -> EmailMessage:
        variables = template_variables(
            form_name=form.name or form.title or "Form",
            form_data=form_data,
            submitted_at=submitted_at,
            submission_id=submission_id,
        )
        template = form.admin_email_template or DEFAULT_ADMIN_TEMPLATE
        subject = form.admin_email_subject or f"New {form.title or form.name} Submission"
        return EmailMessage(
            to=recipient,
            subject=fill_template(subject, variables),
            html=self._to_html(template, variables, form_data),
            text=fill_template(template, variables),
        )

    def submitter_confirmation(
        self,
        form: Form,
        recipient: str,
        form_data: dict[str, Any],
        submission_id: int,
        submitted_at: str,
    ) -> EmailMessage:
        variables = template_variables(
            form_name=form.name or form.title or "Form",
            form_data=form_data,
            submitted_at=submitted_at,
            submission_id=submission_id,
            fallback_email=recipient,
        )
        template = form.submitter_email_template or DEFAULT_SUBMITTER_TEMPLATE
        subject = form.submitter_email_subject or "Thank you for your submission"
        return EmailMessage(
            to=recipient,
            subject=fill_template(subject, variables),
            html=self._to_html(template, variables, form_data),
            text=fill_template(template, variables),
        )
