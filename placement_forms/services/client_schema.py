"""
Client Schema Generator

Builds a pydantic model at runtime from a template's field list. The
model validates respondent input keyed by field id before a submission
is attempted, and its JSON Schema is what the respondent UI renders
validation from.

Per-type rules:
    email  -> string that is an email address
    number -> numeric strings coerced to numbers, anything else (NaN, infinity)
              rejected
    date   -> string matching YYYY-MM-DD
    select -> plain string (the rendered control limits the choices)
    file   -> list of selected files when file handles are available,
              otherwise accepted as-is
    text   -> plain string

Required fields reject empty strings, missing/None numbers and empty
file selections; optional fields accept absence.
"""

import math
from typing import Annotated, Any, Dict, List, Optional, Type

from pydantic import (
    AllowInfNan, BaseModel, BeforeValidator, ConfigDict, EmailStr, Field, StringConstraints,
    ValidationError, create_model,
)
from pydantic_core import PydanticCustomError

from placement_forms.models.form_template import FieldType, FormField

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

REQUIRED_MESSAGE = "This field is required"

TYPE_MESSAGES = {
    FieldType.email: "Invalid email address",
    FieldType.number: "Must be a number",
    FieldType.date: "Invalid date format (YYYY-MM-DD)",
    FieldType.file: "Invalid file selection",
    FieldType.select: "Expected a string",
    FieldType.text: "Expected a string",
}


def _reject_empty(value: Any) -> Any:
    if value is None or value == "" or (isinstance(value, (list, tuple)) and len(value) == 0):
        raise PydanticCustomError("required", REQUIRED_MESSAGE)
    return value


def _blank_to_none(value: Any) -> Any:
    return None if value == "" else value


def _coerce_number(value: Any) -> Any:
    if isinstance(value, bool):
        raise PydanticCustomError("number", TYPE_MESSAGES[FieldType.number])
    if isinstance(value, str) and value.strip() != "":
        try:
            value = float(value)
        except ValueError:
            raise PydanticCustomError("number", TYPE_MESSAGES[FieldType.number])
    # "NaN", "inf" and overflowing literals parse as floats but are not numbers
    if isinstance(value, float) and not math.isfinite(value):
        raise PydanticCustomError("number", TYPE_MESSAGES[FieldType.number])
    return value


def _base_type(field_type: str, file_handles: bool) -> Any:
    if field_type == FieldType.email:
        return EmailStr
    if field_type == FieldType.number:
        return Annotated[float, BeforeValidator(_coerce_number), AllowInfNan(False)]
    if field_type == FieldType.date:
        return Annotated[str, StringConstraints(pattern=DATE_PATTERN)]
    if field_type == FieldType.file:
        return List[Any] if file_handles else Any
    return str


def _field_definition(field: FormField, file_handles: bool):
    base = _base_type(field.field_type, file_handles)

    # Outside a file-handle context there is nothing to check for files.
    if field.field_type == FieldType.file and not file_handles:
        return (Optional[base], Field(None, alias=field.id))

    if field.required:
        return (Annotated[base, BeforeValidator(_reject_empty)], Field(..., alias=field.id))
    # optional inputs left blank count as absent
    return (Annotated[Optional[base], BeforeValidator(_blank_to_none)], Field(None, alias=field.id))


def generate_client_schema(fields: List[FormField], file_handles: bool = False) -> Type[BaseModel]:
    """
    Validation model for `fields`, keyed by field id (the aliases).

    Attribute names are positional (field_0, field_1, ...) so that ids
    which are not Python identifiers still work, and so that the same
    field list always produces the same model shape.
    """
    definitions = {
        f"field_{index}": _field_definition(field, file_handles)
        for index, field in enumerate(fields)
    }
    return create_model(
        "ClientFormSchema",
        __config__=ConfigDict(extra="ignore"),
        **definitions,
    )


def client_json_schema(fields: List[FormField]) -> dict:
    """JSON Schema for the respondent UI (file handles are a browser concern)."""
    return generate_client_schema(fields).model_json_schema(by_alias=True)


def validate_client_input(fields: List[FormField], data: Dict[str, Any],
                          file_handles: bool = False) -> Dict[str, List[str]]:
    """
    Validate `data` (field id -> raw input). Returns messages per field id;
    an empty dict means the input is acceptable.
    """
    schema = generate_client_schema(fields, file_handles)
    types_by_id = {f.id: f.field_type for f in fields}
    try:
        schema.model_validate(data)
    except ValidationError as exc:
        errors: Dict[str, List[str]] = {}
        for err in exc.errors():
            field_id = str(err["loc"][0]) if err["loc"] else ""
            if err["type"] in ("missing", "required"):
                message = REQUIRED_MESSAGE
            else:
                message = TYPE_MESSAGES.get(types_by_id.get(field_id), err["msg"])
            messages = errors.setdefault(field_id, [])
            if message not in messages:
                messages.append(message)
        return errors
    return {}
