"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Python attributes are snake_case; JSON bodies are camelCase.

Request schemas for templates are deliberately loose (plain strings,
optional everything): the semantic checks live in
models.form_template.validate_template so that authors get one complete
error list instead of a first-error 422.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import AliasChoices, Field

from placement_forms.models.base import CamelModel
from placement_forms.models.form_template import FormTemplate


# ============================================================
# TEMPLATE AUTHORING SCHEMAS
# ============================================================

class FieldOptionInput(CamelModel):
    label: Optional[str] = None
    value: Optional[str] = None


class FormFieldInput(CamelModel):
    id: Optional[str] = Field(None, validation_alias=AliasChoices("id", "_id"))
    label: Optional[str] = None
    field_type: Optional[str] = None
    placeholder: Optional[str] = None
    required: bool = False
    options: Optional[List[FieldOptionInput]] = None
    auto_fill_key: Optional[str] = None


class ColorSchemeInput(CamelModel):
    primary_color: Optional[str] = None
    background_color: Optional[str] = None
    text_color: Optional[str] = None


class FormTemplateCreate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    fields: List[FormFieldInput] = []
    color_scheme: Optional[ColorSchemeInput] = None
    unique_features: Optional[str] = None
    published: bool = False
    shared_with: List[str] = []


class FormTemplateUpdate(CamelModel):
    """Partial update. A provided `fields` list replaces the old one wholesale."""
    name: Optional[str] = None
    description: Optional[str] = None
    fields: Optional[List[FormFieldInput]] = None
    color_scheme: Optional[ColorSchemeInput] = None
    unique_features: Optional[str] = None
    published: Optional[bool] = None
    shared_with: Optional[List[str]] = None


class FormCreatedResponse(CamelModel):
    message: str
    form_id: str


class FormTemplateListResponse(CamelModel):
    forms: List[FormTemplate]


class FormDetailResponse(CamelModel):
    form: FormTemplate


class FormUpdatedResponse(CamelModel):
    message: str
    form: FormTemplate


class FormDeletedResponse(CamelModel):
    message: str
    responses_deleted: int = 0


class AutoFillKeyResponse(CamelModel):
    value: str
    label: str


# ============================================================
# RESPONDENT SCHEMAS
# ============================================================

class SubmittedAnswer(CamelModel):
    field_id: str
    field_label: Optional[str] = None  # ignored; labels come from the template
    value: Any = None


class SubmissionRequest(CamelModel):
    responses: List[SubmittedAnswer]


class SubmissionCreatedResponse(CamelModel):
    message: str
    response_id: str


class RespondentFormResponse(CamelModel):
    form: dict
    has_submitted: bool = False
    submission_id: Optional[str] = None


class StudentFormListItem(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    published: bool
    has_submitted: bool
    created_at: Optional[datetime] = None


class StudentFormListResponse(CamelModel):
    forms: List[StudentFormListItem]


class SubmissionField(CamelModel):
    field_id: str
    label: str
    value: Any = None
    field_type: str


class StudentSubmission(CamelModel):
    form_name: str
    form_description: Optional[str] = None
    submitted_at: datetime
    fields: List[SubmissionField]


class StudentSubmissionResponse(CamelModel):
    submission: StudentSubmission


# ============================================================
# ADMIN RESPONSE VIEW SCHEMAS
# ============================================================

class AdminAnswer(CamelModel):
    field_id: str
    field_label: str
    field_type: str
    value: Any = None
    display_value: str


class AdminResponseItem(CamelModel):
    id: str
    student_id: str
    student_name: Optional[str] = None
    student_email: Optional[str] = None
    student_branch: Optional[str] = None
    submitted_at: datetime
    responses: List[AdminAnswer]


class AdminResponsesResponse(CamelModel):
    form_name: str
    responses: List[AdminResponseItem]


# ============================================================
# UPLOAD SCHEMAS
# ============================================================

class UploadResponse(CamelModel):
    success: bool = True
    message: str
    file_url: str
    original_filename: str


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(CamelModel):
    message: str
    success: bool = True

