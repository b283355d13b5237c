"""Shared fixtures for placement form engine tests."""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from placement_forms.api.dependencies import get_services
from placement_forms.core.auth import create_access_token
from placement_forms.core.config import Settings
from placement_forms.core.exceptions import ExternalServiceError
from placement_forms.main import app
from placement_forms.models.form_template import FormField, FormTemplate, new_object_id
from placement_forms.models.profile import Education, Placement, StudentProfile
from placement_forms.models.response import FormResponse
from placement_forms.services.container import ServiceContainer


ADMIN_ID = "admin-1"
OTHER_ADMIN_ID = "admin-2"
STUDENT_ID = "665f1c2ab1e4a3d2c8f0a001"
OTHER_STUDENT_ID = "665f1c2ab1e4a3d2c8f0a002"


# ---------------------------------------------------------------------------
# In-memory repositories (same method surface as services.mongo_service)
# ---------------------------------------------------------------------------

class FakeTemplateRepository:

    def __init__(self):
        self.items: Dict[str, FormTemplate] = {}
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def insert(self, template: FormTemplate) -> FormTemplate:
        now = self._tick()
        saved = template.model_copy(update={"id": new_object_id(), "created_at": now, "updated_at": now})
        self.items[saved.id] = saved
        return saved

    def get(self, form_id: str) -> Optional[FormTemplate]:
        return self.items.get(form_id)

    def list_by_admin(self, admin_id: str) -> List[FormTemplate]:
        own = [t for t in self.items.values() if t.admin_id == admin_id]
        return sorted(own, key=lambda t: t.updated_at, reverse=True)

    def list_published(self) -> List[FormTemplate]:
        published = [t for t in self.items.values() if t.published]
        return sorted(published, key=lambda t: t.created_at, reverse=True)

    def update(self, form_id: str, template: FormTemplate) -> Optional[FormTemplate]:
        current = self.items.get(form_id)
        if current is None:
            return None
        saved = template.model_copy(update={
            "id": form_id,
            "admin_id": current.admin_id,
            "created_at": current.created_at,
            "updated_at": self._tick(),
        })
        self.items[form_id] = saved
        return saved

    def delete(self, form_id: str) -> bool:
        return self.items.pop(form_id, None) is not None


class FakeResponseRepository:

    def __init__(self):
        self.items: List[FormResponse] = []

    def insert(self, response: FormResponse) -> str:
        response_id = new_object_id()
        self.items.append(response.model_copy(update={"id": response_id}))
        return response_id

    def list_for_form(self, form_id: str) -> List[FormResponse]:
        matching = [r for r in self.items if r.form_id == form_id]
        return sorted(matching, key=lambda r: r.submitted_at, reverse=True)

    def find_latest(self, form_id: str, student_id: str) -> Optional[FormResponse]:
        for response in self.list_for_form(form_id):
            if response.student_id == student_id:
                return response
        return None

    def submitted_form_ids(self, student_id, form_ids):
        wanted = set(form_ids)
        return {r.form_id for r in self.items if r.student_id == student_id and r.form_id in wanted}

    def delete_for_form(self, form_id: str) -> int:
        before = len(self.items)
        self.items = [r for r in self.items if r.form_id != form_id]
        return before - len(self.items)


class FakeProfileRepository:

    def __init__(self, profiles=None):
        self.profiles: Dict[str, StudentProfile] = {p.id: p for p in (profiles or [])}
        self.fail = False

    def get(self, student_id: str) -> Optional[StudentProfile]:
        if self.fail:
            raise ExternalServiceError("Profile lookup failed: store unavailable")
        return self.profiles.get(student_id)

    def get_many(self, student_ids) -> Dict[str, StudentProfile]:
        if self.fail:
            raise ExternalServiceError("Profile lookup failed: store unavailable")
        return {i: self.profiles[i] for i in set(student_ids) if i in self.profiles}


class FakeStorage:

    def __init__(self):
        self.uploads = {}

    def upload(self, content: bytes, key: str, content_type: str = "application/octet-stream") -> str:
        self.uploads[key] = (content, content_type)
        return f"https://files.example.com/form-uploads/{key}"


# ---------------------------------------------------------------------------
# Model factory helpers
# ---------------------------------------------------------------------------

def make_field(**overrides) -> FormField:
    """Create a FormField with sensible defaults."""
    defaults = {
        "label": "Full Name",
        "field_type": "text",
        "required": False,
    }
    defaults.update(overrides)
    return FormField(**defaults)


def make_template(**overrides) -> FormTemplate:
    """Create a published FormTemplate with one text field."""
    defaults = {
        "id": new_object_id(),
        "admin_id": ADMIN_ID,
        "name": "Placement Drive 2024",
        "description": "Register for the campus drive",
        "fields": [make_field(id="f_name")],
        "published": True,
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "updated_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }
    defaults.update(overrides)
    return FormTemplate(**defaults)


def make_profile(**overrides) -> StudentProfile:
    """Create a StudentProfile with every auto-fillable attribute set."""
    defaults = {
        "id": STUDENT_ID,
        "name": "Asha Rao",
        "email": "asha@college.edu",
        "roll_number": "CS21B042",
        "branch": "CSE",
        "phone_number": "9876543210",
        "cgpa": 8.5,
        "active_backlogs": 0,
        "gender": "female",
        "hometown": "Pune",
        "dob": datetime(2003, 5, 17, 0, 0, tzinfo=timezone.utc),
        "education": Education(tenth_marks=92.4, twelfth_marks=88.0),
        "placement": Placement(placed=False),
    }
    defaults.update(overrides)
    return StudentProfile(**defaults)


def make_response(**overrides) -> FormResponse:
    defaults = {
        "id": new_object_id(),
        "form_id": "form-1",
        "student_id": STUDENT_ID,
        "responses": [],
        "submitted_at": datetime(2024, 2, 1, 10, 30, tzinfo=timezone.utc),
    }
    defaults.update(overrides)
    return FormResponse(**defaults)


def auth_headers(user_id: str, role: str) -> dict:
    token = create_access_token({"sub": user_id, "role": role, "email": f"{user_id}@college.edu"})
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def template_repo():
    return FakeTemplateRepository()


@pytest.fixture
def response_repo():
    return FakeResponseRepository()


@pytest.fixture
def profile_repo():
    return FakeProfileRepository([make_profile()])


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def services(template_repo, response_repo, profile_repo, storage, settings):
    return ServiceContainer(template_repo, response_repo, profile_repo, storage, settings)


@pytest.fixture
def client(services):
    """TestClient wired to the in-memory services (startup hooks do not run)."""
    app.dependency_overrides[get_services] = lambda: services
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return auth_headers(ADMIN_ID, "admin")


@pytest.fixture
def student_headers():
    return auth_headers(STUDENT_ID, "student")
