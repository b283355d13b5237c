"""
Form Template model.

A template is an ordered list of fields plus presentation metadata.
Field order is meaningful: it is both the rendering order and the
export column order.

Templates are edited by replacing the whole field list, so validation
always runs over the complete definition (see validate_template).
"""

import re
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple

from bson import ObjectId
from pydantic import AliasChoices, ConfigDict, Field
from pydantic.alias_generators import to_camel

from placement_forms.core.autofill_keys import AUTOFILL_KEYS
from placement_forms.models.base import CamelModel


HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")


class FieldType(str, Enum):
    text = "text"
    email = "email"
    number = "number"
    date = "date"
    file = "file"
    select = "select"


class FieldOption(CamelModel):
    label: str
    value: str


class ColorScheme(CamelModel):
    primary_color: str = "#007bff"
    background_color: str = "#ffffff"
    text_color: str = "#333333"


def new_object_id() -> str:
    return str(ObjectId())


class FormField(CamelModel):
    model_config = ConfigDict(use_enum_values=True)

    id: str = Field(default_factory=new_object_id, validation_alias=AliasChoices("id", "_id"))
    label: str
    field_type: FieldType
    placeholder: Optional[str] = None
    required: bool = False
    options: List[FieldOption] = []
    auto_fill_key: Optional[str] = None


class FormTemplate(CamelModel):
    id: Optional[str] = None
    admin_id: str
    name: str
    description: Optional[str] = None
    fields: List[FormField]
    color_scheme: ColorScheme = ColorScheme()
    unique_features: Optional[str] = None
    published: bool = False
    shared_with: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_visible_to(self, student_id: Optional[str]) -> bool:
        """Published, and either shared with everyone or with this student."""
        if not self.published:
            return False
        if not self.shared_with:
            return True
        return student_id is not None and student_id in self.shared_with


# ============================================================
# AUTHORING-TIME VALIDATION
# ============================================================

def _error(path: str, message: str, label: Optional[str] = None) -> dict:
    err = {"path": path, "message": message}
    if label:
        err["fieldLabel"] = label
    return err


def validate_fields(raw_fields: Iterable[Any], allowed_keys: Optional[Iterable[str]] = None) -> Tuple[List[FormField], List[dict]]:
    """
    Build FormField objects from raw field input, collecting every problem.

    Returns (fields, errors). Fields are only meaningful when errors is empty.
    """
    allowed = set(AUTOFILL_KEYS if allowed_keys is None else allowed_keys)
    fields: List[FormField] = []
    errors: List[dict] = []
    seen_ids = set()

    for index, raw in enumerate(raw_fields):
        path = f"fields.{index}"
        label = (raw.label or "").strip()
        field_errors = []

        if not label:
            field_errors.append(_error(f"{path}.label", "Field label is required."))

        if not raw.field_type:
            field_errors.append(_error(f"{path}.fieldType", "Field type is required.", label))
        elif raw.field_type not in FieldType.__members__:
            allowed_types = ", ".join(t.value for t in FieldType)
            field_errors.append(_error(
                f"{path}.fieldType",
                f"Unknown field type '{raw.field_type}'. Allowed: {allowed_types}.",
                label,
            ))

        options = []
        if raw.field_type == FieldType.select:
            options = [opt for opt in (raw.options or [])]
            if not options:
                field_errors.append(_error(f"{path}.options", "Select fields need at least one option.", label))
            for opt_index, opt in enumerate(options):
                if not (opt.value or "").strip():
                    field_errors.append(_error(f"{path}.options.{opt_index}.value", "Option value cannot be empty.", label))

        if raw.auto_fill_key and raw.auto_fill_key not in allowed:
            field_errors.append(_error(
                f"{path}.autoFillKey",
                f"'{raw.auto_fill_key}' is not an auto-fillable profile field.",
                label,
            ))

        if raw.id:
            if raw.id in seen_ids:
                field_errors.append(_error(f"{path}.id", f"Duplicate field id '{raw.id}'.", label))
            seen_ids.add(raw.id)

        if field_errors:
            errors.extend(field_errors)
            continue

        data = {
            "label": label,
            "field_type": raw.field_type,
            "placeholder": raw.placeholder,
            "required": raw.required,
            # options only survive on select fields
            "options": [FieldOption(label=o.label or o.value, value=o.value) for o in options],
            "auto_fill_key": raw.auto_fill_key or None,
        }
        if raw.id:
            data["id"] = raw.id
        fields.append(FormField(**data))

    return fields, errors


def validate_template(name: Optional[str], raw_fields: Optional[List[Any]], color_scheme: Optional[Any] = None,
                      allowed_keys: Optional[Iterable[str]] = None) -> Tuple[List[FormField], ColorScheme, List[dict]]:
    """Validate a full template definition: name, fields and color scheme."""
    errors: List[dict] = []

    if not (name or "").strip():
        errors.append(_error("name", "Form name is required."))

    if not raw_fields:
        errors.append(_error("fields", "A form needs at least one field."))
        fields: List[FormField] = []
    else:
        fields, field_errors = validate_fields(raw_fields, allowed_keys)
        errors.extend(field_errors)

    scheme = ColorScheme()
    if color_scheme is not None:
        values = {}
        for attr in ("primary_color", "background_color", "text_color"):
            value = getattr(color_scheme, attr, None)
            if value is None:
                continue
            if not HEX_COLOR.match(value):
                errors.append(_error(f"colorScheme.{to_camel(attr)}", f"'{value}' is not a hex color."))
            else:
                values[attr] = value
        scheme = ColorScheme(**values)

    return fields, scheme, errors
