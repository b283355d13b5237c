"""
Export Aggregator

Joins a template with its responses into one spreadsheet:

    Name | Email | Branch | Submitted At | <field 1 label> | <field 2 label> | ...

Columns after the fixed four follow the template's current field order,
so answers to fields that were since removed are not exported. Rows are
built as lists rather than dicts because two fields may share a label.
"""

import io
import logging
import re
from datetime import date, datetime, timezone
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

import pandas as pd

from placement_forms.core.exceptions import ExternalServiceError
from placement_forms.models.form_template import FieldType, FormTemplate
from placement_forms.models.profile import StudentProfile
from placement_forms.models.response import FormResponse, format_number

logger = logging.getLogger(__name__)

FIXED_COLUMNS = ["Name", "Email", "Branch", "Submitted At"]
SHEET_NAME = "Form Responses"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
NO_RESPONSES_MESSAGE = "No responses found for this form to export."
NOT_ANSWERED = "Not answered"


# ============================================================
# VALUE FORMATTING
# ============================================================

def format_value(value: Any, empty: str = "") -> str:
    """list -> comma-joined, bool -> Yes/No, None -> `empty`, else str()."""
    if value is None:
        return empty
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


def _format_date(value: Any, empty: str = "") -> str:
    if isinstance(value, (datetime, date)):
        return value.strftime("%Y-%m-%d")
    return format_value(value, empty)


_FORMATTERS = {
    FieldType.date: _format_date,
}


def format_answer(field_type: str, value: Any, empty: str = "") -> str:
    return _FORMATTERS.get(field_type, format_value)(value, empty)


def display_value(field_type: str, value: Any) -> str:
    """On-screen variant: missing answers read 'Not answered'."""
    return format_answer(field_type, value, empty=NOT_ANSWERED)


def format_submitted_at(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%d %H:%M:%S")


# ============================================================
# TABLE + FILE
# ============================================================

def build_export_table(template: FormTemplate, responses: List[FormResponse],
                       profiles: Dict[str, StudentProfile]) -> Tuple[List[str], List[List[str]]]:
    """Header row and one row per response, in the order given."""
    columns = FIXED_COLUMNS + [field.label for field in template.fields]
    rows = []
    for response in responses:
        profile = profiles.get(response.student_id)
        answers = response.answer_map()
        row = [
            format_value(profile.name if profile else None),
            format_value(profile.email if profile else None),
            format_value(profile.branch if profile else None),
            format_submitted_at(response.submitted_at),
        ]
        for field in template.fields:
            answer = answers.get(field.id)
            row.append(format_answer(field.field_type, answer.value if answer else None))
        rows.append(row)
    return columns, rows


def export_filename(form_name: str, today: Optional[date] = None) -> str:
    today = today or datetime.now(timezone.utc).date()
    safe_name = re.sub(r"[^a-zA-Z0-9]", "_", form_name).lower()
    return f"{safe_name}_responses_{today.isoformat()}.xlsx"


def to_excel(columns: List[str], rows: List[List[str]], sheet_name: str = SHEET_NAME) -> bytes:
    df = pd.DataFrame(rows, columns=columns)
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    return output.getvalue()


class ExportResult(NamedTuple):
    filename: Optional[str] = None
    content: Optional[bytes] = None
    row_count: int = 0
    message: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.row_count == 0


class ExportService:
    """Builds the spreadsheet export for one template."""

    def __init__(self, forms, responses, profiles):
        self.forms = forms
        self.responses = responses
        self.profiles = profiles

    def load_profiles(self, responses: List[FormResponse]) -> Dict[str, StudentProfile]:
        """Profiles by student id; an unavailable profile store leaves the cells blank."""
        try:
            return self.profiles.get_many(r.student_id for r in responses)
        except ExternalServiceError as e:
            logger.warning(f"Exporting without respondent details: {e.message}")
            return {}

    def export(self, form_id: str, admin_id: str) -> ExportResult:
        template = self.forms.get_for_admin(form_id, admin_id)
        responses = self.responses.list_for_form(form_id)
        if not responses:
            return ExportResult(message=NO_RESPONSES_MESSAGE)

        columns, rows = build_export_table(template, responses, self.load_profiles(responses))
        content = to_excel(columns, rows)
        filename = export_filename(template.name)
        logger.info(f"Exported {len(rows)} response(s) for form {form_id} to {filename}")
        return ExportResult(filename=filename, content=content, row_count=len(rows))
