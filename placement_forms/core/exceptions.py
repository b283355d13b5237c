"""
Domain errors raised by the form engine services.

Routes never build HTTP error bodies for these themselves; the handlers
registered in main.py translate each class to a status code.
"""

from typing import Any, Dict, List, Optional


class FormEngineError(Exception):
    """Base class for all form engine errors."""

    status_code = 500

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or []

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class AuthorizationError(FormEngineError):
    """Caller lacks the role or ownership required."""

    status_code = 403


class NotFoundError(FormEngineError):
    """Template or response does not exist or is not visible to the caller."""

    status_code = 404


class ValidationError(FormEngineError):
    """Malformed template definition at authoring time."""

    status_code = 400


class ValidationFailed(FormEngineError):
    """
    Submission-time violations.

    Always carries the complete list of (fieldId, fieldLabel, message)
    entries so the respondent can fix everything in one pass.
    """

    status_code = 400

    def __init__(self, violations: List[Dict[str, Any]]):
        super().__init__("Validation failed", violations)

    @property
    def violations(self) -> List[Dict[str, Any]]:
        return self.details


class ConflictError(FormEngineError):
    """Respondent already submitted while single-submission mode is on."""

    status_code = 409


class ExternalServiceError(FormEngineError):
    """Profile store or object storage failed."""

    status_code = 502
