"""Public form submission endpoint."""

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from sitecms.api.deps import get_form_service
from sitecms.core.exceptions import FormValidationError, NotFoundError
from sitecms.db.base import get_session_factory
from sitecms.schemas.forms import FormSubmitRequest, FormSubmitResponse, SubmissionMetadata
from sitecms.services.form_service import FormSubmissionService

logger = structlog.get_logger(__name__)

router = APIRouter()


def _metadata(request: Request, body: FormSubmitRequest) -> SubmissionMetadata:
    """Client-supplied metadata, with gaps filled from the request itself."""
    metadata = body.metadata or SubmissionMetadata()
    if metadata.ip_address is None and request.client is not None:
        metadata.ip_address = request.client.host
    if metadata.user_agent is None:
        metadata.user_agent = request.headers.get("user-agent")
    if metadata.url is None:
        metadata.url = request.headers.get("referer")
    return metadata


@router.post("/forms/submit", response_model=FormSubmitResponse, status_code=201)
async def submit_form(
    body: FormSubmitRequest,
    request: Request,
    service: FormSubmissionService = Depends(get_form_service),
):
    """Validate, store and notify. Answers 201 even when email delivery fails."""
    factory = get_session_factory()
    async with factory() as session:
        try:
            return await service.submit(session, body.form_id, body.form_data, _metadata(request, body))
        except NotFoundError:
            return JSONResponse(
                status_code=404,
                content={"success": False, "error": "Form not found", "message": "Form not found"},
            )
        except FormValidationError as exc:
            return JSONResponse(
                status_code=400,
                content={
                    "success": False,
                    "error": "Validation failed",
                    "message": "Please correct the highlighted fields.",
                    "errors": exc.errors,
                },
            )
