"""
Schemas module - Request/Response schemas for API endpoints.

Difference from models:
- Models: Internal data structures (templates, responses, profiles)
- Schemas: API contract (what client sends/receives)
"""

from placement_forms.schemas.schemas import (
    FormTemplateCreate, FormTemplateUpdate, SubmissionRequest, SubmittedAnswer
)

__all__ = [
    "FormTemplateCreate",
    "FormTemplateUpdate",
    "SubmissionRequest",
    "SubmittedAnswer",
]
