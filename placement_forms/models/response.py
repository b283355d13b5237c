"""
Response model.

A response stores one answer per submitted field. Each answer is tagged
with the field type it was written under, so readers (export, display,
tamper checks) dispatch on `field_type` instead of guessing from the
Python type of `value`.

`field_label` is a snapshot of the label when the answer was written, so
old responses stay readable after the template is edited.
"""

import math
from datetime import datetime
from typing import Annotated, Any, Callable, Dict, List, Literal, Optional, Union

from pydantic import AliasChoices, Discriminator, Field, StrictBool, Tag

from placement_forms.models.base import CamelModel
from placement_forms.models.form_template import FieldType, FormField


# Text-like answers may carry a boolean (checkbox style) or a list
# (multi-value) when those are what the client sent.
TextValue = Union[StrictBool, str, List[str], None]


class _AnswerBase(CamelModel):
    field_id: str
    field_label: str


class TextAnswer(_AnswerBase):
    field_type: Literal["text"] = "text"
    value: TextValue = None


class EmailAnswer(_AnswerBase):
    field_type: Literal["email"] = "email"
    value: Optional[str] = None


class NumberAnswer(_AnswerBase):
    field_type: Literal["number"] = "number"
    value: Union[int, float, None] = None


class DateAnswer(_AnswerBase):
    field_type: Literal["date"] = "date"
    value: Optional[str] = None


class FileAnswer(_AnswerBase):
    field_type: Literal["file"] = "file"
    value: Optional[str] = None


class SelectAnswer(_AnswerBase):
    field_type: Literal["select"] = "select"
    value: TextValue = None


def _answer_tag(value: Any) -> Optional[str]:
    # stored documents use field_type, API payloads use fieldType
    if isinstance(value, dict):
        return value.get("field_type", value.get("fieldType"))
    return getattr(value, "field_type", None)


Answer = Annotated[
    Union[
        Annotated[TextAnswer, Tag("text")],
        Annotated[EmailAnswer, Tag("email")],
        Annotated[NumberAnswer, Tag("number")],
        Annotated[DateAnswer, Tag("date")],
        Annotated[FileAnswer, Tag("file")],
        Annotated[SelectAnswer, Tag("select")],
    ],
    Discriminator(_answer_tag),
]


class FormResponse(CamelModel):
    id: Optional[str] = Field(None, validation_alias=AliasChoices("id", "_id"))
    form_id: str
    student_id: str
    responses: List[Answer] = []
    submitted_at: datetime

    def answer_map(self) -> Dict[str, Any]:
        return {a.field_id: a for a in self.responses}


# ============================================================
# WRITE-TIME COERCION
# Turns a raw submitted value into the answer variant for its field.
# ============================================================

def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _as_text(value: Any) -> TextValue:
    if _blank(value):
        return None
    if isinstance(value, (bool, str)):
        return value
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return format_number(value) if isinstance(value, (int, float)) else str(value)


def _as_string(value: Any) -> Optional[str]:
    if _blank(value):
        return None
    if isinstance(value, bool) or isinstance(value, (list, tuple, dict)):
        raise ValueError("must be a single value")
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value).strip()


def _finite(number: float) -> float:
    if not math.isfinite(number):
        raise ValueError("must be a finite number")
    return number


def _as_number(value: Any) -> Union[int, float, None]:
    if _blank(value):
        return None
    if isinstance(value, bool):
        raise ValueError("must be a number")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return _finite(value)
    if isinstance(value, str):
        number = _finite(float(value.strip()))  # ValueError for non-numeric text
        return int(number) if number.is_integer() and "." not in value and "e" not in value.lower() else number
    raise ValueError("must be a number")


def format_number(value: Union[int, float]) -> str:
    """Render numbers the way they were typed: 9.0 -> '9', 8.5 -> '8.5'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


_BUILDERS: Dict[str, Callable[[str, str, Any], Any]] = {
    FieldType.text: lambda fid, label, v: TextAnswer(field_id=fid, field_label=label, value=_as_text(v)),
    FieldType.email: lambda fid, label, v: EmailAnswer(field_id=fid, field_label=label, value=_as_string(v)),
    FieldType.number: lambda fid, label, v: NumberAnswer(field_id=fid, field_label=label, value=_as_number(v)),
    FieldType.date: lambda fid, label, v: DateAnswer(field_id=fid, field_label=label, value=_as_string(v)),
    FieldType.file: lambda fid, label, v: FileAnswer(field_id=fid, field_label=label, value=_as_string(v)),
    FieldType.select: lambda fid, label, v: SelectAnswer(field_id=fid, field_label=label, value=_as_text(v)),
}


def build_answer(field: FormField, value: Any):
    """
    Build the tagged answer for `field` from a raw submitted value.

    Raises ValueError when the value cannot be stored under the field's type
    (e.g. non-numeric text for a number field).
    """
    return _BUILDERS[field.field_type](field.id, field.label, value)
