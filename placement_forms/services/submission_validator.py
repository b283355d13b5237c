"""
Submission Validator

Server-side gate before a response is stored. Checks run in order and
every violation is collected; nothing short-circuits except the template
state check, which rejects the whole submission.

    1. template exists, is published and visible to the respondent
    2. required fields are present (False counts as present)
    3. auto-filled fields match what the profile resolves to right now
    4. file answers are http(s) URLs or root-relative paths
    5. values can be stored under their field type (numbers parse)
"""

import logging
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlparse

from placement_forms.core.exceptions import NotFoundError, ValidationFailed
from placement_forms.models.form_template import FieldType, FormField, FormTemplate
from placement_forms.models.profile import StudentProfile
from placement_forms.models.response import build_answer
from placement_forms.services.autofill_service import resolve_autofill, values_match

logger = logging.getLogger(__name__)

FILE_URL_SCHEMES = ("http", "https")


def violation(field: FormField, code: str, message: str) -> dict:
    return {
        "fieldId": field.id,
        "fieldLabel": field.label,
        "code": code,
        "message": message,
    }


def is_missing(value: Any) -> bool:
    """Absent, None or empty string. Boolean False is an answer."""
    return value is None or value == ""


def is_valid_file_reference(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    if value.startswith("/"):
        # "//host/..." is protocol-relative, not root-relative
        return not value.startswith("//")
    # only http(s) links; javascript: and data: are refused
    parsed = urlparse(value)
    return parsed.scheme.lower() in FILE_URL_SCHEMES and bool(parsed.netloc)


def index_submitted(answers: Iterable[Any]) -> Dict[str, Any]:
    """fieldId -> value; the first entry for a field wins."""
    indexed: Dict[str, Any] = {}
    for answer in answers:
        if answer.field_id not in indexed:
            indexed[answer.field_id] = answer.value
    return indexed


def check_template_state(template: Optional[FormTemplate], student_id: Optional[str] = None) -> FormTemplate:
    if template is None:
        raise NotFoundError("Form not found or not published")
    if not template.is_visible_to(student_id):
        raise NotFoundError("Form not found or not published")
    return template


class SubmissionValidator:
    """
    Field-level checks for one submission against one template.

    Stateless; the same instance is shared by every request.
    """

    def check_required(self, field: FormField, submitted: Dict[str, Any]) -> List[dict]:
        if field.required and is_missing(submitted.get(field.id)):
            return [violation(field, "required", f"Field '{field.label}' is required.")]
        return []

    def check_autofill(self, field: FormField, submitted: Dict[str, Any],
                       profile: Optional[StudentProfile]) -> List[dict]:
        if not field.auto_fill_key:
            return []
        expected = resolve_autofill(field.auto_fill_key, profile)
        # Nothing resolves: the field was editable, any answer is allowed.
        if expected is None:
            return []
        if values_match(expected, submitted.get(field.id), field.field_type):
            return []
        return [violation(
            field,
            "autofill_mismatch",
            f"Field '{field.label}' must match your profile value.",
        )]

    def check_file_reference(self, field: FormField, submitted: Dict[str, Any]) -> List[dict]:
        if field.field_type != FieldType.file:
            return []
        value = submitted.get(field.id)
        if is_missing(value) or is_valid_file_reference(value):
            return []
        return [violation(field, "invalid_file_reference", f"Field '{field.label}' has an invalid file URL.")]

    def check_value_type(self, field: FormField, submitted: Dict[str, Any]) -> List[dict]:
        if field.id not in submitted:
            return []
        try:
            build_answer(field, submitted[field.id])
        except ValueError:
            return [violation(field, "invalid_value", f"Field '{field.label}' has an invalid {field.field_type} value.")]
        return []

    def validate(self, template: FormTemplate, submitted: Dict[str, Any],
                 profile: Optional[StudentProfile]) -> List[dict]:
        """Every violation for this submission, in check order then field order."""
        violations: List[dict] = []
        for field in template.fields:
            violations.extend(self.check_required(field, submitted))
        for field in template.fields:
            violations.extend(self.check_autofill(field, submitted, profile))
        for field in template.fields:
            violations.extend(self.check_file_reference(field, submitted))
        for field in template.fields:
            violations.extend(self.check_value_type(field, submitted))
        return violations

    def validate_or_raise(self, template: FormTemplate, submitted: Dict[str, Any],
                          profile: Optional[StudentProfile]) -> None:
        violations = self.validate(template, submitted, profile)
        if violations:
            logger.info(f"Submission to form {template.id} rejected with {len(violations)} violation(s)")
            raise ValidationFailed(violations)
