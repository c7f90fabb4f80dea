"""Admin API routes: forms, submissions, newsletter subscribers, site settings."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from sitecms.api.deps import get_form_service
from sitecms.api.routes.crud import commit_or_conflict, load_one
from sitecms.api.schemas.admin import (
    FormAdminRead,
    FormCreate,
    FormFieldWrite,
    FormSubmissionRead,
    FormUpdate,
    NewsletterSubscriberCreate,
    NewsletterSubscriberRead,
    NewsletterSubscriberUpdate,
    SiteSettingsRead,
    SiteSettingsUpdate,
)
from sitecms.core.auth import require_admin
from sitecms.core.exceptions import EmailNotConfiguredError, NotFoundError
from sitecms.db.base import get_session_factory
from sitecms.db.models.form import Form, FormField, FormSubmission
from sitecms.db.models.newsletter import NewsletterSubscriber
from sitecms.db.models.site_settings import SiteSettings
from sitecms.schemas.base import ApiResponse
from sitecms.schemas.forms import EmailOutcome, RetryEmailRequest
from sitecms.services.form_service import FormSubmissionService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["admin-forms"], dependencies=[Depends(require_admin)])

FORM_OPTIONS = (selectinload(Form.fields),)


def _build_fields(fields: list[FormFieldWrite]) -> list[FormField]:
    names = [f.field_name for f in fields]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise HTTPException(status_code=400, detail=f"Duplicate field names: {', '.join(duplicates)}")

    built = []
    for index, field in enumerate(fields):
        values = field.model_dump()
        if values["sort_order"] is None:
            values["sort_order"] = index
        built.append(FormField(**values))
    return built


# ---------- Forms ----------


@router.get("/forms", response_model=ApiResponse[list[FormAdminRead]])
async def list_forms():
    factory = get_session_factory()
    async with factory() as session:
        result = await session.execute(select(Form).options(*FORM_OPTIONS).order_by(Form.name))
        return ApiResponse(data=[FormAdminRead.model_validate(f) for f in result.scalars().all()])


@router.get("/forms/{form_id}", response_model=ApiResponse[FormAdminRead])
async def get_form(form_id: int):
    factory = get_session_factory()
    async with factory() as session:
        form = await load_one(session, Form, form_id, FORM_OPTIONS)
        return ApiResponse(data=FormAdminRead.model_validate(form))


@router.post("/forms", response_model=ApiResponse[FormAdminRead], status_code=201)
async def create_form(body: FormCreate):
    factory = get_session_factory()
    async with factory() as session:
        # Unset settings fall back to the column defaults
        form = Form(**body.model_dump(exclude={"fields"}, exclude_none=True))
        form.fields = _build_fields(body.fields)
        session.add(form)
        await commit_or_conflict(session, "Form")
        logger.info("form_created", form_id=form.id, fields=len(body.fields))

        form = await load_one(session, Form, form.id, FORM_OPTIONS)
        return ApiResponse(data=FormAdminRead.model_validate(form))


@router.put("/forms/{form_id}", response_model=ApiResponse[FormAdminRead])
async def update_form(form_id: int, body: FormUpdate):
    """Update form settings; a given ``fields`` list replaces every field.

    Settings and field replacement commit together or not at all.
    """
    factory = get_session_factory()
    async with factory() as session:
        form = await load_one(session, Form, form_id, FORM_OPTIONS)
        for field, value in body.model_dump(exclude_unset=True, exclude={"fields"}).items():
            if value is None and not Form.__table__.c[field].nullable:
                continue
            setattr(form, field, value)

        if body.fields is not None:
            new_fields = _build_fields(body.fields)
            form.fields.clear()
            await session.flush()
            form.fields.extend(new_fields)

        await commit_or_conflict(session, "Form")
        logger.info("form_updated", form_id=form_id, fields_replaced=body.fields is not None)

        form = await load_one(session, Form, form_id, FORM_OPTIONS)
        return ApiResponse(data=FormAdminRead.model_validate(form))


@router.delete("/forms/{form_id}", response_model=ApiResponse[None])
async def delete_form(form_id: int):
    """Delete a form with its fields and stored submissions."""
    factory = get_session_factory()
    async with factory() as session:
        form = await load_one(session, Form, form_id, FORM_OPTIONS)
        await session.delete(form)
        await session.commit()
        logger.info("form_deleted", form_id=form_id)
        return ApiResponse(message="Form deleted")


# ---------- Submissions ----------


@router.get("/form-submissions", response_model=ApiResponse[list[FormSubmissionRead]])
async def list_form_submissions(form_id: int | None = Query(None, alias="formId")):
    """Submissions, newest first."""
    factory = get_session_factory()
    async with factory() as session:
        query = select(FormSubmission).order_by(FormSubmission.created_at.desc(), FormSubmission.id.desc())
        if form_id is not None:
            query = query.where(FormSubmission.form_id == form_id)
        result = await session.execute(query)
        return ApiResponse(data=[FormSubmissionRead.model_validate(s) for s in result.scalars().all()])


@router.post("/form-submissions/retry-email", response_model=ApiResponse[EmailOutcome])
async def retry_submission_email(
    body: RetryEmailRequest,
    service: FormSubmissionService = Depends(get_form_service),
):
    """Send the notification emails for a stored submission again."""
    factory = get_session_factory()
    async with factory() as session:
        try:
            outcome = await service.retry_email(session, body.submission_id)
        except NotFoundError:
            raise HTTPException(status_code=404, detail="FormSubmission not found")
        except EmailNotConfiguredError as exc:
            raise HTTPException(status_code=400, detail=str(exc))

        return ApiResponse(
            success=outcome.success,
            data=outcome,
            message="Email sent" if outcome.success else outcome.error,
        )


@router.get("/form-submissions/{submission_id}", response_model=ApiResponse[FormSubmissionRead])
async def get_form_submission(submission_id: int):
    factory = get_session_factory()
    async with factory() as session:
        submission = await load_one(session, FormSubmission, submission_id)
        return ApiResponse(data=FormSubmissionRead.model_validate(submission))


@router.delete("/form-submissions/{submission_id}", response_model=ApiResponse[None])
async def delete_form_submission(submission_id: int):
    factory = get_session_factory()
    async with factory() as session:
        submission = await load_one(session, FormSubmission, submission_id)
        await session.delete(submission)
        await session.commit()
        return ApiResponse(message="FormSubmission deleted")


# ---------- Newsletter ----------


@router.get("/newsletter-subscribers", response_model=ApiResponse[list[NewsletterSubscriberRead]])
async def list_newsletter_subscribers(subscribed: bool | None = None):
    factory = get_session_factory()
    async with factory() as session:
        query = select(NewsletterSubscriber).order_by(NewsletterSubscriber.created_at.desc())
        if subscribed is not None:
            query = query.where(NewsletterSubscriber.subscribed == subscribed)
        result = await session.execute(query)
        return ApiResponse(data=[NewsletterSubscriberRead.model_validate(s) for s in result.scalars().all()])


@router.post("/newsletter-subscribers", response_model=ApiResponse[NewsletterSubscriberRead], status_code=201)
async def create_newsletter_subscriber(body: NewsletterSubscriberCreate):
    factory = get_session_factory()
    async with factory() as session:
        email = body.email.strip().lower()
        existing = await session.execute(select(NewsletterSubscriber).where(NewsletterSubscriber.email == email))
        if existing.scalar_one_or_none() is not None:
            raise HTTPException(status_code=409, detail="Email is already on the newsletter list")

        subscriber = NewsletterSubscriber(email=email, subscribed=True)
        session.add(subscriber)
        await commit_or_conflict(session, "NewsletterSubscriber")
        return ApiResponse(data=NewsletterSubscriberRead.model_validate(subscriber))


@router.put("/newsletter-subscribers/{subscriber_id}", response_model=ApiResponse[NewsletterSubscriberRead])
async def update_newsletter_subscriber(subscriber_id: int, body: NewsletterSubscriberUpdate):
    factory = get_session_factory()
    async with factory() as session:
        subscriber = await load_one(session, NewsletterSubscriber, subscriber_id)
        subscriber.subscribed = body.subscribed
        await session.commit()
        return ApiResponse(data=NewsletterSubscriberRead.model_validate(subscriber))


@router.delete("/newsletter-subscribers/{subscriber_id}", response_model=ApiResponse[None])
async def delete_newsletter_subscriber(subscriber_id: int):
    factory = get_session_factory()
    async with factory() as session:
        subscriber = await load_one(session, NewsletterSubscriber, subscriber_id)
        await session.delete(subscriber)
        await session.commit()
        return ApiResponse(message="NewsletterSubscriber deleted")


# ---------- Site settings ----------


def _settings_read(row: SiteSettings) -> SiteSettingsRead:
    # The stored password never leaves the server
    return SiteSettingsRead(
        id=row.id,
        site_name=row.site_name,
        footer_company_name=row.footer_company_name,
        logo_url=row.logo_url,
        smtp_enabled=row.smtp_enabled,
        smtp_host=row.smtp_host,
        smtp_port=row.smtp_port,
        smtp_username=row.smtp_username,
        smtp_password_set=bool(row.smtp_password),
        smtp_from_email=row.smtp_from_email,
        smtp_from_name=row.smtp_from_name,
        smtp_reply_to=row.smtp_reply_to,
    )


async def _settings_row(session) -> SiteSettings:
    result = await session.execute(select(SiteSettings).order_by(SiteSettings.id).limit(1))
    row = result.scalar_one_or_none()
    if row is None:
        row = SiteSettings()
        session.add(row)
        await session.commit()
    return row


@router.get("/site-settings", response_model=ApiResponse[SiteSettingsRead])
async def get_site_settings():
    factory = get_session_factory()
    async with factory() as session:
        row = await _settings_row(session)
        return ApiResponse(data=_settings_read(row))


@router.put("/site-settings", response_model=ApiResponse[SiteSettingsRead])
async def update_site_settings(body: SiteSettingsUpdate):
    """Update the singleton settings row.

    An omitted or empty ``smtpPassword`` keeps the stored password.
    """
    factory = get_session_factory()
    async with factory() as session:
        row = await _settings_row(session)
        changes = body.model_dump(exclude_unset=True)
        if not changes.get("smtp_password"):
            changes.pop("smtp_password", None)
        for field, value in changes.items():
            if value is None and field in ("site_name", "footer_company_name", "smtp_enabled"):
                continue
            setattr(row, field, value)
        await session.commit()
        logger.info("site_settings_updated", fields=sorted(changes))
        return ApiResponse(data=_settings_read(row))
