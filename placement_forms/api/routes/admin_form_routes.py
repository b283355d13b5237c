"""
Admin Form Routes

POST /admin/forms - Create form template
GET /admin/forms - List own templates
GET /admin/forms/autofill-keys - Profile fields a field may auto-fill from
GET /admin/forms/{form_id} - Get template
PUT /admin/forms/{form_id} - Update template (field list replaced wholesale)
DELETE /admin/forms/{form_id} - Delete template
GET /admin/forms/{form_id}/responses - View responses
GET /admin/forms/{form_id}/export - Download responses as .xlsx
"""

from typing import List

from fastapi import APIRouter, Depends, Response

from placement_forms.api.dependencies import get_services
from placement_forms.core.auth import get_current_admin
from placement_forms.core.autofill_keys import list_autofill_keys
from placement_forms.schemas.schemas import (
    AdminResponsesResponse, AutoFillKeyResponse, FormCreatedResponse, FormDeletedResponse,
    FormDetailResponse, FormTemplateCreate, FormTemplateListResponse, FormTemplateUpdate,
    FormUpdatedResponse, MessageResponse
)
from placement_forms.services.container import ServiceContainer
from placement_forms.services.export_service import XLSX_MEDIA_TYPE

router = APIRouter(prefix="/admin/forms", tags=["Admin Forms"])


@router.post("", response_model=FormCreatedResponse, status_code=201)
async def create_form(
    data: FormTemplateCreate,
    admin: dict = Depends(get_current_admin),
    services: ServiceContainer = Depends(get_services),
):
    """Create a form template. Every problem in the definition is reported at once."""
    template = services.forms.create(admin["user_id"], data)
    return FormCreatedResponse(message="Form created successfully", form_id=template.id)


@router.get("", response_model=FormTemplateListResponse)
async def list_forms(admin: dict = Depends(get_current_admin), services: ServiceContainer = Depends(get_services)):
    """Templates created by the current admin, most recently edited first."""
    return FormTemplateListResponse(forms=services.forms.list_for_admin(admin["user_id"]))


# Declared before /{form_id} so "autofill-keys" is not taken as an id.
@router.get("/autofill-keys", response_model=List[AutoFillKeyResponse])
async def autofill_keys(admin: dict = Depends(get_current_admin)):
    """Profile fields a form field can be bound to."""
    return list_autofill_keys()


@router.get("/{form_id}", response_model=FormDetailResponse)
async def get_form(form_id: str, admin: dict = Depends(get_current_admin),
                   services: ServiceContainer = Depends(get_services)):
    return FormDetailResponse(form=services.forms.get_for_admin(form_id, admin["user_id"]))


@router.put("/{form_id}", response_model=FormUpdatedResponse)
async def update_form(
    form_id: str,
    data: FormTemplateUpdate,
    admin: dict = Depends(get_current_admin),
    services: ServiceContainer = Depends(get_services),
):
    """Update a template. A `fields` list in the body replaces the existing one."""
    template = services.forms.update(form_id, admin["user_id"], data)
    return FormUpdatedResponse(message="Form updated successfully", form=template)


@router.delete("/{form_id}", response_model=FormDeletedResponse)
async def delete_form(form_id: str, admin: dict = Depends(get_current_admin),
                      services: ServiceContainer = Depends(get_services)):
    removed = services.forms.delete(form_id, admin["user_id"])
    return FormDeletedResponse(message="Form deleted successfully", responses_deleted=removed)


@router.get("/{form_id}/responses", response_model=AdminResponsesResponse)
async def form_responses(form_id: str, admin: dict = Depends(get_current_admin),
                         services: ServiceContainer = Depends(get_services)):
    """All responses, newest first, with display values for each field."""
    return services.forms.list_responses(form_id, admin["user_id"])


@router.get("/{form_id}/export", responses={200: {"content": {XLSX_MEDIA_TYPE: {}}}})
async def export_responses(form_id: str, admin: dict = Depends(get_current_admin),
                           services: ServiceContainer = Depends(get_services)):
    """
    Download all responses as an Excel sheet.

    With no responses yet, returns a JSON message instead of an empty file.
    """
    result = services.exports.export(form_id, admin["user_id"])
    if result.is_empty:
        return MessageResponse(message=result.message, success=False)

    return Response(
        content=result.content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
    )
