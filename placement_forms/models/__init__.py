"""
Models module - Pydantic models for the form engine domain.

These models are used for:
- Form templates and their embedded fields
- Stored responses (answers are a tagged union keyed by field type)
- The student profile record that auto-fill reads from
"""

from placement_forms.models.form_template import (
    FieldType, FieldOption, ColorScheme, FormField, FormTemplate
)
from placement_forms.models.response import FormResponse, Answer, build_answer
from placement_forms.models.profile import StudentProfile

__all__ = [
    "FieldType",
    "FieldOption",
    "ColorScheme",
    "FormField",
    "FormTemplate",
    "FormResponse",
    "Answer",
    "build_answer",
    "StudentProfile",
]
