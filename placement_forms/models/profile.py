"""
Student profile record.

Profiles are owned by the account system; the form engine only reads
them, so unknown keys (password hashes, social links, photos) are ignored
and every attribute is optional.
"""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, ConfigDict, Field

from placement_forms.models.base import CamelModel


class Education(CamelModel):
    tenth_marks: Optional[float] = None
    twelfth_marks: Optional[float] = None


class Placement(CamelModel):
    placed: bool = False
    package: Optional[float] = None
    type: Optional[str] = None  # intern | fte | both
    company: Optional[str] = None
    offer_date: Optional[datetime] = None


class StudentProfile(CamelModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = Field(None, validation_alias=AliasChoices("id", "_id"))
    name: Optional[str] = None
    email: Optional[str] = None
    roll_number: Optional[str] = None
    branch: Optional[str] = None
    phone_number: Optional[str] = None
    cgpa: Optional[float] = None
    active_backlogs: Optional[int] = None
    gender: Optional[str] = None
    hometown: Optional[str] = None
    dob: Optional[datetime] = None
    education: Optional[Education] = None
    placement: Optional[Placement] = None
