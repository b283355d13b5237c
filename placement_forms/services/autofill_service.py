"""
Auto-fill Resolver

Pre-fills form fields from the respondent's profile. Resolution goes
through the AUTOFILL_KEYS accessor table; an unknown key, a missing
profile or a missing nested object all resolve to None ("no auto-fill
value"), never an error.

The same resolution is re-run at submission time for the tamper check,
so normalization here must match on both sides.
"""

import logging
import re
from datetime import date, datetime, timezone
from typing import Any, List, Optional

from placement_forms.core.autofill_keys import AUTOFILL_KEYS
from placement_forms.models.form_template import FieldType, FormField
from placement_forms.models.profile import StudentProfile
from placement_forms.models.response import format_number

logger = logging.getLogger(__name__)

ISO_DATE_PREFIX = re.compile(r"^(\d{4}-\d{2}-\d{2})(?:$|[T ])")


def normalize_date(value: Any) -> Any:
    """datetime/date -> 'YYYY-MM-DD' (UTC for aware datetimes); anything else unchanged."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


def resolve_autofill(key: Optional[str], profile: Optional[StudentProfile]) -> Any:
    """Value for `key` on `profile`, with dates already normalized; None when unavailable."""
    if not key or profile is None:
        return None
    entry = AUTOFILL_KEYS.get(key)
    if entry is None:
        return None
    return normalize_date(entry.accessor(profile))


def comparable(value: Any, field_type: str) -> Optional[str]:
    """String form used when comparing an auto-filled value with a submitted one."""
    value = normalize_date(value)
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    text = str(value).strip()
    if field_type == FieldType.date:
        match = ISO_DATE_PREFIX.match(text)
        if match:
            return match.group(1)
    return text


def values_match(expected: Any, submitted: Any, field_type: str) -> bool:
    """True when the submitted value equals the server-resolved auto-fill value."""
    if comparable(expected, field_type) == comparable(submitted, field_type):
        return True
    # "8.50" and 8.5 are the same number
    if isinstance(expected, (int, float)) and not isinstance(expected, bool):
        try:
            return float(str(submitted).strip()) == float(expected)
        except ValueError:
            return False
    return False


def apply_autofill(fields: List[FormField], profile: Optional[StudentProfile]) -> List[dict]:
    """
    Client-facing field list. A field whose key resolves gets both `value`
    and `isReadOnly: true`; every other field is left untouched.
    """
    prepared = []
    for field in fields:
        data = field.model_dump(by_alias=True)
        value = resolve_autofill(field.auto_fill_key, profile)
        if value is not None:
            data["value"] = value
            data["isReadOnly"] = True
        prepared.append(data)
    return prepared
