"""Form field validation, recipient resolution and email template filling.

Pure functions with no external dependencies. ``form_data`` is the raw
``{field_name: value}`` mapping posted by the browser.
"""

import json
import re
from datetime import date
from typing import Any, Iterable, Protocol
from urllib.parse import urlparse

FIELD_TYPES = frozenset({
    "text",
    "email",
    "tel",
    "textarea",
    "select",
    "checkbox",
    "radio",
    "date",
    "number",
    "url",
    "first_name",
    "last_name",
    "company",
    "street_address",
    "address_line_2",
    "city",
    "province_state",
    "postal_code",
    "country",
    "terms",
})

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
TEL_RE = re.compile(r"^\+?[\d\s().-]{6,}$")

NO_RECIPIENTS_ERROR = "No valid email recipients configured"

# Lookup order for the greeting name in confirmation emails
SUBMITTER_NAME_KEYS = ("first_name", "firstName", "name", "fullName")
SUBMITTER_EMAIL_KEYS = ("email", "emailAddress")


class FieldLike(Protocol):
    field_type: str
    field_name: str
    label: str
    is_required: bool
    field_options: list[str] | None


class FormLike(Protocol):
    email_recipients: str | None
    dynamic_email_recipients: bool
    email_field_recipients: str | None
    send_to_submitter_email: bool
    submitter_email_field: str | None


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value.strip()))


def _is_blank(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def _check_type(field: FieldLike, value: Any) -> str | None:
    """Type check for a present value; returns an error message or None."""
    field_type = field.field_type
    options = field.field_options or []

    if field_type == "email":
        if not isinstance(value, str) or not is_valid_email(value):
            return "Please enter a valid email address"
    elif field_type == "tel":
        if not isinstance(value, str) or not TEL_RE.match(value.strip()):
            return "Please enter a valid phone number"
    elif field_type == "url":
        parsed = urlparse(str(value).strip())
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            return "Please enter a valid URL"
    elif field_type == "number":
        try:
            float(value)
        except (TypeError, ValueError):
            return "Please enter a valid number"
    elif field_type == "date":
        try:
            date.fromisoformat(str(value))
        except ValueError:
            return "Please enter a valid date"
    elif field_type in ("select", "radio"):
        if options and value not in options:
            return "Please select a valid option"
    elif field_type == "checkbox" and options:
        values = value if isinstance(value, list) else [value]
        if any(v not in options for v in values if not isinstance(v, bool)):
            return "Please select a valid option"
    return None


def validate_submission(fields: Iterable[FieldLike], form_data: dict[str, Any]) -> dict[str, str]:
    """Validate posted values against the form's field definitions.

    Required presence is checked first, then the type rule for any value
    that was supplied. Returns ``{field_name: message}``; empty means valid.
    """
    errors: dict[str, str] = {}
    for field in fields:
        value = form_data.get(field.field_name)
        if _is_blank(value):
            if field.is_required:
                if field.field_type == "terms":
                    errors[field.field_name] = "You must accept the terms to continue"
                else:
                    errors[field.field_name] = f"{field.label} is required"
            continue

        message = _check_type(field, value)
        if message:
            errors[field.field_name] = message
    return errors


def parse_field_names(raw: str | None) -> list[str]:
    """Field names holding recipient addresses.

    Stored as a JSON array; older rows hold a comma-separated list.
    """
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except ValueError:
        parsed = None
    if isinstance(parsed, list):
        return [str(name).strip() for name in parsed if str(name).strip()]
    return [name.strip() for name in raw.split(",") if name.strip()]


def submitter_email(form: FormLike, form_data: dict[str, Any]) -> str | None:
    """Lower-cased submitter address when confirmations are enabled."""
    if not form.send_to_submitter_email or not form.submitter_email_field:
        return None
    value = form_data.get(form.submitter_email_field)
    if isinstance(value, str) and is_valid_email(value):
        return value.strip().lower()
    return None


def resolve_recipients(form: FormLike, form_data: dict[str, Any]) -> list[str]:
    """Admin notification recipients for one submission.

    Static addresses first, then addresses taken from the configured fields,
    deduplicated case-insensitively. Anything that is not a single well-formed
    address is dropped before it can reach a mail header. The submitter's own
    address is removed because they receive the confirmation email instead.
    """
    candidates: list[str] = []
    if form.email_recipients:
        candidates.extend(e.strip() for e in form.email_recipients.split(",") if is_valid_email(e))

    if form.dynamic_email_recipients:
        for name in parse_field_names(form.email_field_recipients):
            value = form_data.get(name)
            if isinstance(value, str) and is_valid_email(value):
                candidates.append(value.strip())

    excluded = submitter_email(form, form_data)
    seen: set[str] = set()
    recipients: list[str] = []
    for address in candidates:
        key = address.lower()
        if key == excluded or key in seen:
            continue
        seen.add(key)
        recipients.append(address)
    return recipients


def newsletter_email(newsletter_action: bool, email_field: str | None, form_data: dict[str, Any]) -> str | None:
    """Normalized address to subscribe, or None when the form does not subscribe."""
    if not newsletter_action or not email_field:
        return None
    value = form_data.get(email_field)
    if isinstance(value, str) and is_valid_email(value):
        return value.strip().lower()
    return None


def _first_value(form_data: dict[str, Any], keys: tuple[str, ...], default: str) -> str:
    for key in keys:
        value = form_data.get(key)
        if value:
            return str(value)
    return default


def submitter_name(form_data: dict[str, Any]) -> str:
    return _first_value(form_data, SUBMITTER_NAME_KEYS, "there")


def format_value(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return "" if value is None else str(value)


def format_form_data(form_data: dict[str, Any]) -> str:
    """One ``key: value`` line per submitted field."""
    return "\n".join(f"{key}: {format_value(value)}" for key, value in form_data.items())


def template_variables(
    form_name: str,
    form_data: dict[str, Any],
    submitted_at: str,
    submission_id: int | None = None,
    fallback_email: str = "",
) -> dict[str, str]:
    return {
        "FORM_DATA": format_form_data(form_data),
        "FORM_NAME": form_name,
        "SUBMITTED_AT": submitted_at,
        "SUBMISSION_ID": "" if submission_id is None else str(submission_id),
        "SUBMITTER_NAME": submitter_name(form_data),
        "SUBMITTER_EMAIL": _first_value(form_data, SUBMITTER_EMAIL_KEYS, fallback_email),
    }


def fill_template(template: str, variables: dict[str, str]) -> str:
    """Replace every ``{{NAME}}`` placeholder; unknown placeholders are left as-is."""
    for name, value in variables.items():
        template = template.replace("{{" + name + "}}", value)
    return template
