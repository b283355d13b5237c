"""
Student Routes

GET /student/forms - Published forms visible to me, with submission status
GET /student/forms/{form_id}/submission - My latest submission to a form
"""

from fastapi import APIRouter, Depends

from placement_forms.api.dependencies import get_services
from placement_forms.core.auth import get_current_student
from placement_forms.schemas.schemas import StudentFormListResponse, StudentSubmissionResponse
from placement_forms.services.container import ServiceContainer

router = APIRouter(prefix="/student", tags=["Students"])


@router.get("/forms", response_model=StudentFormListResponse)
async def list_forms(student: dict = Depends(get_current_student),
                     services: ServiceContainer = Depends(get_services)):
    """Published forms, newest first."""
    return StudentFormListResponse(forms=services.respondent.list_published(student["user_id"]))


@router.get("/forms/{form_id}/submission", response_model=StudentSubmissionResponse)
async def get_submission(form_id: str, student: dict = Depends(get_current_student),
                         services: ServiceContainer = Depends(get_services)):
    """Answers shown under the form's current labels."""
    return StudentSubmissionResponse(submission=services.respondent.get_submission(form_id, student["user_id"]))
