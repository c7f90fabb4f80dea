"""Public form submission, admin form management, submissions and site settings."""

import pytest

pytestmark = pytest.mark.integration

CONTACT_FORM = {
    "name": "Contact",
    "title": "Contact us",
    "successMessage": "Thanks, we'll be in touch.",
    "fields": [
        {"fieldType": "text", "fieldName": "name", "label": "Name", "isRequired": True},
        {"fieldType": "email", "fieldName": "email", "label": "Email", "isRequired": True},
        {"fieldType": "textarea", "fieldName": "message", "label": "Message"},
    ],
}


async def _create_form(client, **overrides) -> dict:
    response = await client.post("/api/admin/forms", json={**CONTACT_FORM, **overrides})
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def _submissions(client) -> list[dict]:
    return (await client.get("/api/admin/form-submissions")).json()["data"]


async def _enable_smtp(client) -> None:
    response = await client.put(
        "/api/admin/site-settings",
        json={"smtpEnabled": True, "smtpHost": "smtp.example.com", "smtpFromEmail": "noreply@example.com"},
    )
    assert response.status_code == 200


class TestSubmit:
    async def test_valid_submission_is_created(self, client):
        form = await _create_form(client)

        response = await client.post(
            "/api/forms/submit",
            json={"formId": form["id"], "formData": {"name": "Ann", "email": "ann@example.com"}},
            headers={"User-Agent": "pytest-agent", "Referer": "http://test/contact"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Thanks, we'll be in touch."
        assert body["email"]["success"] is True

        [stored] = await _submissions(client)
        assert stored["id"] == body["submissionId"]
        assert stored["formData"] == {"name": "Ann", "email": "ann@example.com"}
        assert stored["userAgent"] == "pytest-agent"
        assert stored["referrer"] == "http://test/contact"
        assert stored["emailStatus"] == "not_configured"

    async def test_invalid_submission_is_400_and_not_stored(self, client):
        form = await _create_form(client)

        response = await client.post(
            "/api/forms/submit",
            json={"formId": form["id"], "formData": {"name": "Ann", "email": "not-an-email"}},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Validation failed"
        assert set(body["errors"]) == {"email"}
        assert await _submissions(client) == []

    async def test_unknown_form_is_404(self, client):
        response = await client.post("/api/forms/submit", json={"formId": 999, "formData": {}})
        assert response.status_code == 404
        assert response.json()["error"] == "Form not found"

    async def test_missing_form_id_is_400(self, client):
        response = await client.post("/api/forms/submit", json={"formData": {}})
        assert response.status_code == 400

    async def test_notification_is_sent(self, client, outbox):
        await _enable_smtp(client)
        form = await _create_form(client, emailNotification=True, emailRecipients="ops@example.com")

        response = await client.post(
            "/api/forms/submit",
            json={"formId": form["id"], "formData": {"name": "Ann", "email": "ann@example.com"}},
        )

        assert response.status_code == 201
        assert response.json()["email"]["details"]["recipients"] == ["ops@example.com"]
        assert [m.to for m in outbox.messages] == ["ops@example.com"]
        [stored] = await _submissions(client)
        assert stored["emailStatus"] == "sent"

    async def test_email_failure_still_creates_submission(self, client):
        form = await _create_form(client, emailNotification=True)

        response = await client.post(
            "/api/forms/submit",
            json={"formId": form["id"], "formData": {"name": "Ann", "email": "ann@example.com"}},
        )

        assert response.status_code == 201
        assert response.json()["email"]["success"] is False
        [stored] = await _submissions(client)
        assert stored["emailStatus"] == "failed"


class TestAdminForms:
    async def test_defaults_and_field_order(self, client):
        form = await _create_form(client)

        assert form["adminEmailSubject"] == "New Form Submission"
        assert form["ctaText"] == "Send Message"
        assert [(f["fieldName"], f["sortOrder"]) for f in form["fields"]] == [
            ("name", 0),
            ("email", 1),
            ("message", 2),
        ]

    async def test_duplicate_field_names_rejected(self, client):
        fields = [
            {"fieldType": "text", "fieldName": "name", "label": "Name"},
            {"fieldType": "text", "fieldName": "name", "label": "Name again"},
        ]
        response = await client.post("/api/admin/forms", json={"name": "Broken", "fields": fields})
        assert response.status_code == 400

    async def test_unknown_field_type_rejected(self, client):
        fields = [{"fieldType": "hologram", "fieldName": "x", "label": "X"}]
        response = await client.post("/api/admin/forms", json={"name": "Broken", "fields": fields})
        assert response.status_code == 400

    async def test_update_replaces_fields(self, client):
        form = await _create_form(client)

        response = await client.put(
            f"/api/admin/forms/{form['id']}",
            json={
                "title": "Talk to sales",
                "fields": [
                    {"fieldType": "email", "fieldName": "email", "label": "Work email", "isRequired": True},
                ],
            },
        )

        data = response.json()["data"]
        assert data["title"] == "Talk to sales"
        assert data["name"] == "Contact"
        assert [(f["fieldName"], f["label"]) for f in data["fields"]] == [("email", "Work email")]

    async def test_retry_email(self, client, outbox):
        form = await _create_form(client, emailNotification=True, emailRecipients="ops@example.com")
        submitted = await client.post(
            "/api/forms/submit",
            json={"formId": form["id"], "formData": {"name": "Ann", "email": "ann@example.com"}},
        )
        submission_id = submitted.json()["submissionId"]

        await _enable_smtp(client)
        response = await client.post("/api/admin/form-submissions/retry-email", json={"submissionId": submission_id})

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert [m.to for m in outbox.messages] == ["ops@example.com"]

    async def test_retry_email_errors(self, client):
        missing = await client.post("/api/admin/form-submissions/retry-email", json={"submissionId": 999})
        assert missing.status_code == 404

        form = await _create_form(client)
        submitted = await client.post(
            "/api/forms/submit",
            json={"formId": form["id"], "formData": {"name": "Ann", "email": "ann@example.com"}},
        )
        disabled = await client.post(
            "/api/admin/form-submissions/retry-email",
            json={"submissionId": submitted.json()["submissionId"]},
        )
        assert disabled.status_code == 400


class TestNewsletterAndSettings:
    async def test_subscriber_email_is_normalized_and_unique(self, client):
        created = await client.post("/api/admin/newsletter-subscribers", json={"email": "Ann@Example.com"})
        assert created.status_code == 201
        assert created.json()["data"]["email"] == "ann@example.com"

        duplicate = await client.post("/api/admin/newsletter-subscribers", json={"email": "ann@example.com"})
        assert duplicate.status_code == 409

    async def test_unsubscribe_filter(self, client):
        created = (await client.post("/api/admin/newsletter-subscribers", json={"email": "a@example.com"})).json()
        await client.post("/api/admin/newsletter-subscribers", json={"email": "b@example.com"})
        await client.put(f"/api/admin/newsletter-subscribers/{created['data']['id']}", json={"subscribed": False})

        response = await client.get("/api/admin/newsletter-subscribers", params={"subscribed": "true"})
        assert [s["email"] for s in response.json()["data"]] == ["b@example.com"]

    async def test_smtp_password_is_write_only(self, client):
        response = await client.put(
            "/api/admin/site-settings",
            json={"siteName": "Acme", "smtpPassword": "hunter2"},
        )
        data = response.json()["data"]
        assert data["siteName"] == "Acme"
        assert data["smtpPasswordSet"] is True
        assert "hunter2" not in response.text

        # An empty password keeps the stored one
        response = await client.put("/api/admin/site-settings", json={"smtpPassword": ""})
        assert response.json()["data"]["smtpPasswordSet"] is True
