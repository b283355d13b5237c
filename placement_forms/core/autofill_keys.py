"""
Auto-fill key catalog.

The closed set of profile paths a form field may bind to. Each key maps
to a typed accessor over StudentProfile; a missing parent object yields
None, which callers treat as "no auto-fill value".

This table is also the allow-list checked when a template is saved.
"""

from typing import TYPE_CHECKING, Any, Callable, Dict, List, NamedTuple, Optional

if TYPE_CHECKING:
    from placement_forms.models.profile import StudentProfile


class AutoFillKey(NamedTuple):
    key: str
    label: str
    accessor: Callable[["StudentProfile"], Any]


def _education(attr: str) -> Callable[["StudentProfile"], Any]:
    def read(profile: "StudentProfile") -> Optional[Any]:
        if profile.education is None:
            return None
        return getattr(profile.education, attr)
    return read


def _placement(attr: str) -> Callable[["StudentProfile"], Any]:
    def read(profile: "StudentProfile") -> Optional[Any]:
        if profile.placement is None:
            return None
        return getattr(profile.placement, attr)
    return read


_CATALOG: List[AutoFillKey] = [
    AutoFillKey("name", "Full Name", lambda p: p.name),
    AutoFillKey("email", "Email Address", lambda p: p.email),
    AutoFillKey("rollNumber", "Roll Number", lambda p: p.roll_number),
    AutoFillKey("branch", "Branch", lambda p: p.branch),
    AutoFillKey("phoneNumber", "Phone Number", lambda p: p.phone_number),
    AutoFillKey("cgpa", "CGPA", lambda p: p.cgpa),
    AutoFillKey("activeBacklogs", "Active Backlogs", lambda p: p.active_backlogs),
    AutoFillKey("gender", "Gender", lambda p: p.gender),
    AutoFillKey("hometown", "Hometown", lambda p: p.hometown),
    AutoFillKey("dob", "Date of Birth (YYYY-MM-DD)", lambda p: p.dob),
    AutoFillKey("education.tenthMarks", "10th Marks (%)", _education("tenth_marks")),
    AutoFillKey("education.twelfthMarks", "12th Marks (%)", _education("twelfth_marks")),
    AutoFillKey("placement.placed", "Placement - Placed", _placement("placed")),
    AutoFillKey("placement.company", "Placement - Company", _placement("company")),
    AutoFillKey("placement.package", "Placement - Package (LPA)", _placement("package")),
    AutoFillKey("placement.type", "Placement - Type (FTE/Intern)", _placement("type")),
    AutoFillKey("placement.offerDate", "Placement - Offer Date", _placement("offer_date")),
]

AUTOFILL_KEYS: Dict[str, AutoFillKey] = {entry.key: entry for entry in _CATALOG}


def list_autofill_keys() -> List[dict]:
    """Catalog for the form builder dropdown, in display order."""
    return [{"value": entry.key, "label": entry.label} for entry in _CATALOG]
