"""FormSubmissionService: validate, store and notify for public form posts.

Order of operations for one submission:

1. load the form (missing or inactive -> NotFoundError)
2. validate every declared field (-> FormValidationError, nothing stored)
3. subscribe the newsletter address when the form asks for it (non-fatal)
4. store the FormSubmission
5. send admin notifications and the submitter confirmation, recording the
   outcome on the stored row
"""

import json
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from sitecms.core.exceptions import EmailNotConfiguredError, FormValidationError, NotFoundError
from sitecms.db.base import utcnow
from sitecms.db.models.form import Form, FormSubmission
from sitecms.db.models.newsletter import NewsletterSubscriber
from sitecms.domain.forms import (
    NO_RECIPIENTS_ERROR,
    newsletter_email,
    resolve_recipients,
    submitter_email,
    validate_submission,
)
from sitecms.rendering.emails import EmailComposer
from sitecms.schemas.forms import EmailDetails, EmailOutcome, FormSubmitResponse, SubmissionMetadata
from sitecms.services.email_service import EmailResult, EmailService

logger = structlog.get_logger(__name__)

NOTIFICATIONS_DISABLED_ERROR = "Email notifications are not enabled for this form"


class FormSubmissionService:
    def __init__(self, email_service: EmailService, composer: EmailComposer | None = None):
        self.email_service = email_service
        self.composer = composer or EmailComposer()

    async def submit(
        self,
        session: AsyncSession,
        form_id: int,
        form_data: dict[str, Any],
        metadata: SubmissionMetadata | None = None,
    ) -> FormSubmitResponse:
        result = await session.execute(
            select(Form).where(Form.id == form_id).options(selectinload(Form.fields))
        )
        form = result.scalar_one_or_none()
        if form is None or not form.is_active:
            raise NotFoundError("Form", form_id)

        errors = validate_submission(form.fields, form_data)
        if errors:
            logger.info("form_submission_invalid", form_id=form_id, fields=sorted(errors))
            raise FormValidationError(errors)

        await self._subscribe_newsletter(session, form, form_data)

        metadata = metadata or SubmissionMetadata()
        submission = FormSubmission(
            form_id=form.id,
            form_data=json.dumps(form_data),
            ip_address=metadata.ip_address,
            user_agent=metadata.user_agent,
            referrer=metadata.url,
            email_status="pending" if form.email_notification else "not_configured",
        )
        session.add(submission)
        await session.commit()
        await session.refresh(submission)
        logger.info("form_submission_created", form_id=form.id, submission_id=submission.id)

        outcome = EmailOutcome(success=True)
        if form.email_notification:
            outcome = await self.notify(session, form, submission, form_data)

        return FormSubmitResponse(
            submission_id=submission.id,
            message=form.success_message,
            redirect_url=form.redirect_url,
            email=outcome,
        )

    async def _subscribe_newsletter(self, session: AsyncSession, form: Form, form_data: dict[str, Any]) -> None:
        email = newsletter_email(form.newsletter_action, form.newsletter_email_field, form_data)
        if email is None:
            return

        form_id = form.id

        try:
            result = await session.execute(
                select(NewsletterSubscriber).where(NewsletterSubscriber.email == email)
            )
            subscriber = result.scalar_one_or_none()
            if subscriber is None:
                session.add(NewsletterSubscriber(email=email, subscribed=True))
            elif not subscriber.subscribed:
                subscriber.subscribed = True
            await session.commit()
            logger.info("newsletter_subscribed", form_id=form_id)
        except SQLAlchemyError:
            await session.rollback()
            logger.warning("newsletter_subscribe_failed", form_id=form_id, exc_info=True)
            # rollback expires every loaded instance
            await session.refresh(form)
            await session.refresh(form, attribute_names=["fields"])

    async def notify(
        self,
        session: AsyncSession,
        form: Form,
        submission: FormSubmission,
        form_data: dict[str, Any],
    ) -> EmailOutcome:
        """Send admin notifications and the submitter confirmation.

        Always records the outcome on the submission row; never raises for
        delivery problems.
        """
        recipients = resolve_recipients(form, form_data)
        if not recipients:
            submission.email_status = "failed"
            submission.email_error = NO_RECIPIENTS_ERROR
            await session.commit()
            logger.warning("form_email_no_recipients", submission_id=submission.id)
            return EmailOutcome(success=False, error=NO_RECIPIENTS_ERROR)

        try:
            config = await self.email_service.load_config(session)
        except EmailNotConfiguredError as exc:
            return await self._record_failure(session, submission, recipients, str(exc))

        submitted_at = submission.created_at.isoformat()
        results: list[EmailResult] = []
        subject = None
        for recipient in recipients:
            message = self.composer.admin_notification(form, recipient, form_data, submission.id, submitted_at)
            subject = subject or message.subject
            results.append(await self.email_service.send(config, message))

        submitter = submitter_email(form, form_data)
        if submitter:
            confirmation = self.composer.submitter_confirmation(
                form, submitter, form_data, submission.id, submitted_at
            )
            results.append(await self.email_service.send(config, confirmation))

        failed = [r.recipient for r in results if not r.success]
        succeeded = not failed
        error = f"Failed to send to: {', '.join(failed)}" if failed else None
        message_id = next((r.message_id for r in results if r.success and r.message_id), None)
        sent_at = utcnow() if succeeded else None

        submission.email_status = "sent" if succeeded else "failed"
        submission.email_error = error
        submission.email_message_id = message_id
        submission.email_recipients = ",".join(recipients)
        submission.email_subject = subject
        submission.email_sent_at = sent_at
        await session.commit()

        logger.info(
            "form_email_processed",
            submission_id=submission.id,
            status=submission.email_status,
            recipients=len(recipients),
            failed=len(failed),
        )
        return EmailOutcome(
            success=succeeded,
            details=EmailDetails(
                message_id=message_id,
                recipients=recipients,
                subject=subject,
                sent_at=sent_at.isoformat() if sent_at else None,
                error=error,
            ),
            error=error,
        )

    async def _record_failure(
        self,
        session: AsyncSession,
        submission: FormSubmission,
        recipients: list[str],
        error: str,
    ) -> EmailOutcome:
        submission.email_status = "failed"
        submission.email_error = error
        submission.email_recipients = ",".join(recipients)
        await session.commit()
        logger.warning("form_email_not_sent", submission_id=submission.id, error=error)
        return EmailOutcome(success=False, details=EmailDetails(recipients=recipients, error=error), error=error)

    async def retry_email(self, session: AsyncSession, submission_id: int) -> EmailOutcome:
        """Re-run notification delivery for a stored submission."""
        result = await session.execute(
            select(FormSubmission)
            .where(FormSubmission.id == submission_id)
            .options(selectinload(FormSubmission.form))
        )
        submission = result.scalar_one_or_none()
        if submission is None:
            raise NotFoundError("FormSubmission", submission_id)
        if not submission.form.email_notification:
            raise EmailNotConfiguredError(NOTIFICATIONS_DISABLED_ERROR)

        form_data = json.loads(submission.form_data)
        logger.info("form_email_retry", submission_id=submission_id)
        return await self.notify(session, submission.form, submission, form_data)
