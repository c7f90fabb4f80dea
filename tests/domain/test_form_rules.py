"""Tests for form validation, recipient resolution and template filling."""

from types import SimpleNamespace

import pytest

from sitecms.domain.forms import (
    fill_template,
    format_form_data,
    newsletter_email,
    parse_field_names,
    resolve_recipients,
    submitter_email,
    submitter_name,
    template_variables,
    validate_submission,
)

pytestmark = pytest.mark.unit


def _field(name, field_type="text", label=None, required=False, options=None):
    return SimpleNamespace(
        field_name=name,
        field_type=field_type,
        label=label or name.title(),
        is_required=required,
        field_options=options,
    )


def _form(**overrides):
    values = dict(
        email_recipients=None,
        dynamic_email_recipients=False,
        email_field_recipients=None,
        send_to_submitter_email=False,
        submitter_email_field=None,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


class TestValidateSubmission:
    def test_complete_submission_is_valid(self):
        fields = [
            _field("name", required=True),
            _field("email", "email", required=True),
        ]
        assert validate_submission(fields, {"name": "Ann", "email": "ann@example.com"}) == {}

    def test_missing_required_field(self):
        fields = [_field("email", "email", label="Email", required=True)]
        assert validate_submission(fields, {}) == {"email": "Email is required"}

    def test_blank_string_counts_as_missing(self):
        fields = [_field("name", label="Name", required=True)]
        assert validate_submission(fields, {"name": "   "}) == {"name": "Name is required"}

    def test_optional_blank_field_is_skipped(self):
        fields = [_field("phone", "tel")]
        assert validate_submission(fields, {"phone": ""}) == {}

    def test_terms_must_be_accepted(self):
        fields = [_field("terms", "terms", required=True)]
        errors = validate_submission(fields, {"terms": False})
        assert errors == {"terms": "You must accept the terms to continue"}
        assert validate_submission(fields, {"terms": True}) == {}

    @pytest.mark.parametrize(
        "field_type,value",
        [
            ("email", "not-an-email"),
            ("tel", "abc"),
            ("url", "example.com"),
            ("number", "twelve"),
            ("date", "2024-13-40"),
        ],
    )
    def test_type_checks_reject_bad_values(self, field_type, value):
        errors = validate_submission([_field("f", field_type)], {"f": value})
        assert "f" in errors

    @pytest.mark.parametrize(
        "field_type,value",
        [
            ("email", "a@b.co"),
            ("tel", "+1 (555) 010-0000"),
            ("url", "https://example.com/path"),
            ("number", "42.5"),
            ("date", "2024-02-29"),
        ],
    )
    def test_type_checks_accept_good_values(self, field_type, value):
        assert validate_submission([_field("f", field_type)], {"f": value}) == {}

    def test_select_value_must_be_an_option(self):
        fields = [_field("plan", "select", options=["Basic", "Pro"])]
        assert validate_submission(fields, {"plan": "Pro"}) == {}
        assert validate_submission(fields, {"plan": "Gold"}) == {"plan": "Please select a valid option"}

    def test_checkbox_list_values_must_be_options(self):
        fields = [_field("topics", "checkbox", options=["a", "b"])]
        assert validate_submission(fields, {"topics": ["a", "b"]}) == {}
        assert "topics" in validate_submission(fields, {"topics": ["a", "z"]})


class TestRecipients:
    def test_parse_json_field_list(self):
        assert parse_field_names('["manager_email", "team"]') == ["manager_email", "team"]

    def test_parse_comma_fallback(self):
        assert parse_field_names("manager_email, team ,") == ["manager_email", "team"]

    def test_parse_empty(self):
        assert parse_field_names(None) == []

    def test_static_then_dynamic_deduplicated(self):
        form = _form(
            email_recipients="sales@example.com, Ops@example.com",
            dynamic_email_recipients=True,
            email_field_recipients='["manager"]',
        )
        data = {"manager": "ops@EXAMPLE.com"}
        assert resolve_recipients(form, data) == ["sales@example.com", "Ops@example.com"]

    def test_dynamic_values_without_at_are_ignored(self):
        form = _form(dynamic_email_recipients=True, email_field_recipients="manager")
        assert resolve_recipients(form, {"manager": "nobody"}) == []

    def test_header_injection_values_are_dropped(self):
        form = _form(
            email_recipients="ops@example.com, bad\nBcc: x@z.com",
            dynamic_email_recipients=True,
            email_field_recipients="cc",
            send_to_submitter_email=True,
            submitter_email_field="email",
        )
        data = {"cc": "x@y.com\nBcc: evil@z.com", "email": "me@a.com\r\nBcc: evil@z.com"}
        assert resolve_recipients(form, data) == ["ops@example.com"]
        assert submitter_email(form, data) is None

    def test_submitter_is_excluded_from_admin_list(self):
        form = _form(
            email_recipients="admin@example.com,visitor@example.com",
            send_to_submitter_email=True,
            submitter_email_field="email",
        )
        data = {"email": "Visitor@Example.com"}
        assert resolve_recipients(form, data) == ["admin@example.com"]
        assert submitter_email(form, data) == "visitor@example.com"

    def test_submitter_email_disabled(self):
        form = _form(submitter_email_field="email")
        assert submitter_email(form, {"email": "a@b.co"}) is None


class TestNewsletter:
    def test_address_is_normalized(self):
        assert newsletter_email(True, "email", {"email": "  Ann@Example.COM "}) == "ann@example.com"

    def test_disabled_or_invalid(self):
        assert newsletter_email(False, "email", {"email": "a@b.co"}) is None
        assert newsletter_email(True, None, {"email": "a@b.co"}) is None
        assert newsletter_email(True, "email", {"email": "nope"}) is None


class TestTemplates:
    def test_form_data_lines(self):
        text = format_form_data({"name": "Ann", "topics": ["a", "b"], "terms": True})
        assert text == "name: Ann\ntopics: a, b\nterms: Yes"

    def test_submitter_name_lookup(self):
        assert submitter_name({"firstName": "Ann"}) == "Ann"
        assert submitter_name({}) == "there"

    def test_placeholders_replaced(self):
        variables = template_variables("Contact", {"first_name": "Ann", "email": "a@b.co"}, "2024-01-01", 7)
        filled = fill_template("Hi {{SUBMITTER_NAME}} ({{SUBMITTER_EMAIL}}) #{{SUBMISSION_ID}} {{FORM_NAME}}", variables)
        assert filled == "Hi Ann (a@b.co) #7 Contact"

    def test_unknown_placeholder_left_alone(self):
        assert fill_template("{{OTHER}}", {"FORM_NAME": "x"}) == "{{OTHER}}"
