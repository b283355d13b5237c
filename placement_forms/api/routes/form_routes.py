"""
Form Routes (respondent side)

GET /forms/{form_id} - Published form, pre-filled from the student's profile
GET /forms/{form_id}/schema - JSON Schema for client-side validation
POST /forms/{form_id}/responses - Submit answers
"""

from fastapi import APIRouter, Depends

from placement_forms.api.dependencies import get_services
from placement_forms.core.auth import get_current_student
from placement_forms.schemas.schemas import (
    RespondentFormResponse, SubmissionCreatedResponse, SubmissionRequest
)
from placement_forms.services.container import ServiceContainer

router = APIRouter(prefix="/forms", tags=["Forms"])


@router.get("/{form_id}", response_model=RespondentFormResponse)
async def get_form(form_id: str, student: dict = Depends(get_current_student),
                   services: ServiceContainer = Depends(get_services)):
    """
    Get a published form.

    Fields bound to a profile value come back with `value` and
    `isReadOnly: true`. `hasSubmitted` tells the UI to show the
    existing submission instead of a blank form.
    """
    return services.respondent.fetch_form(form_id, student["user_id"])


@router.get("/{form_id}/schema")
async def get_form_schema(form_id: str, student: dict = Depends(get_current_student),
                          services: ServiceContainer = Depends(get_services)):
    return services.respondent.client_schema(form_id, student["user_id"])


@router.post("/{form_id}/responses", response_model=SubmissionCreatedResponse, status_code=201)
async def submit_response(
    form_id: str,
    data: SubmissionRequest,
    student: dict = Depends(get_current_student),
    services: ServiceContainer = Depends(get_services),
):
    """
    Submit answers.

    Returns 400 with every violation in `details` when the answers do not
    pass server-side validation; nothing is stored in that case.
    """
    response_id = services.submissions.submit(form_id, student["user_id"], data.responses)
    return SubmissionCreatedResponse(message="Response submitted successfully", response_id=response_id)
