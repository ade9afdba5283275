"""Form Submission Route — public endpoint behind every storefront form.

Invariants:
    - Duplicate submissions answer 400 with {success: false} (error handler envelope)
    - Email failures never fail the request; they surface as emailErrors
"""

import logging

from fastapi import APIRouter, Depends

from storefront.api.deps import get_form_service
from storefront.schemas.forms import FormSubmitRequest, FormSubmitResponse
from storefront.services.form_submission import FormSubmissionService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/forms", tags=["forms"])


@router.post(
    "/submit",
    response_model=FormSubmitResponse,
    response_model_exclude_none=True,
    response_model_by_alias=True,
)
async def submit_form(
    body: FormSubmitRequest,
    service: FormSubmissionService = Depends(get_form_service),
):
    """Validate, persist, and notify for one form submission."""
    return await service.submit(body.form_id, body.submitted_fields)
