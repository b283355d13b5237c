"""
Form Service - template authoring and respondent reads.

FormTemplateService   - admin side: create, list, read, update, delete,
                        and the responses view
RespondentFormService - student side: pre-filled form, client schema,
                        published form list, own submission
"""

import logging
from typing import List, Optional

from placement_forms.core.exceptions import (
    AuthorizationError, ExternalServiceError, NotFoundError, ValidationError
)
from placement_forms.models.form_template import FormTemplate, validate_template
from placement_forms.models.profile import StudentProfile
from placement_forms.schemas.schemas import FormTemplateCreate, FormTemplateUpdate
from placement_forms.services.autofill_service import apply_autofill
from placement_forms.services.client_schema import client_json_schema
from placement_forms.services.export_service import display_value
from placement_forms.services.submission_validator import check_template_state

logger = logging.getLogger(__name__)


class FormTemplateService:
    """Admin-side template operations. Every read checks ownership."""

    def __init__(self, templates, responses, profiles, settings):
        self.templates = templates
        self.responses = responses
        self.profiles = profiles
        self.settings = settings

    def create(self, admin_id: str, data: FormTemplateCreate) -> FormTemplate:
        fields, scheme, errors = validate_template(data.name, data.fields, data.color_scheme)
        if errors:
            raise ValidationError("Invalid form template", errors)

        template = FormTemplate(
            admin_id=admin_id,
            name=data.name.strip(),
            description=data.description,
            fields=fields,
            color_scheme=scheme,
            unique_features=data.unique_features,
            published=data.published,
            shared_with=data.shared_with,
        )
        saved = self.templates.insert(template)
        logger.info(f"Form template created: {saved.id} ({len(fields)} fields) by admin {admin_id}")
        return saved

    def list_for_admin(self, admin_id: str) -> List[FormTemplate]:
        return self.templates.list_by_admin(admin_id)

    def get_for_admin(self, form_id: str, admin_id: str) -> FormTemplate:
        template = self.templates.get(form_id)
        if template is None:
            raise NotFoundError("Form not found")
        if template.admin_id != admin_id:
            raise AuthorizationError("You do not have access to this form")
        return template

    def update(self, form_id: str, admin_id: str, data: FormTemplateUpdate) -> FormTemplate:
        """
        Partial update. A provided field list replaces the old one
        wholesale, and the merged template is validated as a whole.
        """
        current = self.get_for_admin(form_id, admin_id)

        name = data.name if data.name is not None else current.name
        raw_fields = data.fields if data.fields is not None else current.fields
        color_scheme = current.color_scheme
        if data.color_scheme is not None:
            color_scheme = current.color_scheme.model_copy(
                update=data.color_scheme.model_dump(exclude_none=True)
            )

        fields, scheme, errors = validate_template(name, raw_fields, color_scheme)
        if errors:
            raise ValidationError("Invalid form template", errors)

        changes = {"name": name.strip(), "fields": fields, "color_scheme": scheme}
        for attr in ("description", "unique_features", "published", "shared_with"):
            value = getattr(data, attr)
            if value is not None:
                changes[attr] = value

        saved = self.templates.update(form_id, current.model_copy(update=changes))
        if saved is None:
            raise NotFoundError("Form not found")
        logger.info(f"Form template updated: {form_id} ({len(fields)} fields)")
        return saved

    def delete(self, form_id: str, admin_id: str) -> int:
        """Delete a template; returns how many responses were removed with it."""
        self.get_for_admin(form_id, admin_id)
        self.templates.delete(form_id)

        removed = 0
        if self.settings.cascade_delete_responses:
            removed = self.responses.delete_for_form(form_id)
        logger.info(f"Form template deleted: {form_id} (responses removed: {removed})")
        return removed

    def list_responses(self, form_id: str, admin_id: str) -> dict:
        """Responses joined with the template's current fields and respondent details."""
        template = self.get_for_admin(form_id, admin_id)
        responses = self.responses.list_for_form(form_id)

        try:
            profiles = self.profiles.get_many(r.student_id for r in responses) if responses else {}
        except ExternalServiceError as e:
            logger.warning(f"Listing responses without respondent details: {e.message}")
            profiles = {}

        items = []
        for response in responses:
            profile = profiles.get(response.student_id)
            answers = response.answer_map()
            entries = []
            for field in template.fields:
                answer = answers.get(field.id)
                value = answer.value if answer else None
                entries.append({
                    "field_id": field.id,
                    "field_label": field.label,
                    "field_type": field.field_type,
                    "value": value,
                    "display_value": display_value(field.field_type, value),
                })
            items.append({
                "id": response.id,
                "student_id": response.student_id,
                "student_name": profile.name if profile else None,
                "student_email": profile.email if profile else None,
                "student_branch": profile.branch if profile else None,
                "submitted_at": response.submitted_at,
                "responses": entries,
            })
        return {"form_name": template.name, "responses": items}


class RespondentFormService:
    """Student-side reads of published templates."""

    def __init__(self, templates, responses, profiles):
        self.templates = templates
        self.responses = responses
        self.profiles = profiles

    def _visible_template(self, form_id: str, student_id: str) -> FormTemplate:
        return check_template_state(self.templates.get(form_id), student_id)

    def _profile_or_none(self, student_id: str) -> Optional[StudentProfile]:
        # Without a profile the form still renders, just without pre-filled values.
        try:
            return self.profiles.get(student_id)
        except ExternalServiceError as e:
            logger.warning(f"Auto-fill skipped for student {student_id}: {e.message}")
            return None

    def fetch_form(self, form_id: str, student_id: str) -> dict:
        template = self._visible_template(form_id, student_id)
        profile = self._profile_or_none(student_id)

        form = template.model_dump(mode="json", by_alias=True, exclude={"admin_id", "shared_with"})
        form["fields"] = apply_autofill(template.fields, profile)

        latest = self.responses.find_latest(form_id, student_id)
        return {
            "form": form,
            "has_submitted": latest is not None,
            "submission_id": latest.id if latest else None,
        }

    def client_schema(self, form_id: str, student_id: str) -> dict:
        template = self._visible_template(form_id, student_id)
        return client_json_schema(template.fields)

    def list_published(self, student_id: str) -> List[dict]:
        visible = [t for t in self.templates.list_published() if t.is_visible_to(student_id)]
        submitted = self.responses.submitted_form_ids(student_id, [t.id for t in visible]) if visible else set()
        return [
            {
                "id": t.id,
                "name": t.name,
                "description": t.description,
                "published": t.published,
                "has_submitted": t.id in submitted,
                "created_at": t.created_at,
            }
            for t in visible
        ]

    def get_submission(self, form_id: str, student_id: str) -> dict:
        """
        The student's latest submission, shown with the template's current
        labels. Fields added after submitting show as unanswered.
        """
        template = self.templates.get(form_id)
        if template is None:
            raise NotFoundError("Form not found")
        response = self.responses.find_latest(form_id, student_id)
        if response is None:
            raise NotFoundError("No submission found for this form")

        answers = response.answer_map()
        fields = []
        for field in template.fields:
            answer = answers.get(field.id)
            fields.append({
                "field_id": field.id,
                "label": field.label,
                "value": answer.value if answer else None,
                "field_type": field.field_type,
            })
        return {
            "form_name": template.name,
            "form_description": template.description,
            "submitted_at": response.submitted_at,
            "fields": fields,
        }
