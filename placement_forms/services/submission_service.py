"""
Submission Service - validate and store one respondent's answers.

Flow:
1. Load template; must exist, be published and visible to the student
2. Load the student's current profile (failure here rejects the submission)
3. Run SubmissionValidator over the submitted values
4. Enforce single-submission mode when it is configured
5. Insert one response document (the only write)
"""

import logging
from typing import Iterable

from placement_forms.core.exceptions import ConflictError
from placement_forms.models.response import FormResponse, build_answer
from placement_forms.services.mongo_service import utcnow
from placement_forms.services.submission_validator import (
    SubmissionValidator, check_template_state, index_submitted
)

logger = logging.getLogger(__name__)


class SubmissionService:

    def __init__(self, templates, responses, profiles, settings, validator: SubmissionValidator = None):
        self.templates = templates
        self.responses = responses
        self.profiles = profiles
        self.settings = settings
        self.validator = validator or SubmissionValidator()

    def submit(self, form_id: str, student_id: str, answers: Iterable) -> str:
        """
        Store a submission and return its id.

        Raises:
            NotFoundError: template missing, unpublished or not shared with the student
            ExternalServiceError: profile store unavailable
            ValidationFailed: one or more field violations
            ConflictError: already submitted while single-submission mode is on
        """
        template = check_template_state(self.templates.get(form_id), student_id)
        profile = self.profiles.get(student_id)

        submitted = index_submitted(answers)
        self.validator.validate_or_raise(template, submitted, profile)

        if not self.settings.allow_multiple_submissions:
            if self.responses.find_latest(form_id, student_id) is not None:
                raise ConflictError("You have already submitted this form.")

        # Template order, template labels; ids the template doesn't know are dropped.
        entries = [
            build_answer(field, submitted[field.id])
            for field in template.fields
            if field.id in submitted
        ]
        response = FormResponse(
            form_id=form_id,
            student_id=student_id,
            responses=entries,
            submitted_at=utcnow(),
        )
        response_id = self.responses.insert(response)
        logger.info(f"Response {response_id} stored for form {form_id} by student {student_id} ({len(entries)} answers)")
        return response_id
