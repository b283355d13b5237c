"""
MongoDB Service - repositories for the form engine collections.

Collections in this database:
1. form_templates - Admin-authored templates with embedded fields
2. user_responses - One document per student submission
3. students       - Student profiles (read-only here)

Each repository wraps one collection and converts between documents and
the pydantic models in placement_forms.models. Repositories are built
once at startup (see services.container) and shared by all requests.
"""

from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Set

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from placement_forms.core.exceptions import ExternalServiceError
from placement_forms.db.mongodb import get_collection
from placement_forms.models.form_template import FormTemplate
from placement_forms.models.profile import StudentProfile
from placement_forms.models.response import FormResponse


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def serialize_doc(doc: dict) -> Optional[dict]:
    """Convert MongoDB document to a model-ready dict (`_id` -> `id` string)."""
    if doc is None:
        return None
    doc = dict(doc)
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    return doc


def serialize_docs(docs: Iterable[dict]) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def to_object_id(value: str) -> Optional[ObjectId]:
    """ObjectId for a hex string, or None when the string is not a valid id."""
    if isinstance(value, ObjectId):
        return value
    if value and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================
# FORM TEMPLATES COLLECTION
# ============================================================

class FormTemplateRepository:
    """
    Handles form template storage.
    Fields are embedded, so every write replaces the whole field list.
    """

    def __init__(self, db: Database):
        self.collection: Collection = get_collection(db, "form_templates")

    def insert(self, template: FormTemplate) -> FormTemplate:
        """Insert a new template; returns it with id and timestamps set."""
        now = utcnow()
        doc = template.model_dump(exclude={"id"})
        doc["created_at"] = now
        doc["updated_at"] = now
        result = self.collection.insert_one(doc)
        return template.model_copy(update={
            "id": str(result.inserted_id), "created_at": now, "updated_at": now
        })

    def get(self, form_id: str) -> Optional[FormTemplate]:
        """Fetch template by id; None for unknown or malformed ids."""
        oid = to_object_id(form_id)
        if oid is None:
            return None
        doc = self.collection.find_one({"_id": oid})
        return FormTemplate.model_validate(serialize_doc(doc)) if doc else None

    def list_by_admin(self, admin_id: str) -> List[FormTemplate]:
        """Templates authored by one admin, most recently edited first."""
        cursor = self.collection.find({"admin_id": admin_id}).sort("updated_at", DESCENDING)
        return [FormTemplate.model_validate(d) for d in serialize_docs(cursor)]

    def list_published(self) -> List[FormTemplate]:
        """All published templates, newest first."""
        cursor = self.collection.find({"published": True}).sort("created_at", DESCENDING)
        return [FormTemplate.model_validate(d) for d in serialize_docs(cursor)]

    def update(self, form_id: str, template: FormTemplate) -> Optional[FormTemplate]:
        """Replace the mutable parts of a template (field list included)."""
        oid = to_object_id(form_id)
        if oid is None:
            return None
        changes = template.model_dump(exclude={"id", "admin_id", "created_at", "updated_at"})
        changes["updated_at"] = utcnow()
        doc = self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        return FormTemplate.model_validate(serialize_doc(doc)) if doc else None

    def delete(self, form_id: str) -> bool:
        oid = to_object_id(form_id)
        if oid is None:
            return False
        result = self.collection.delete_one({"_id": oid})
        return result.deleted_count > 0


# ============================================================
# USER RESPONSES COLLECTION
# ============================================================

class ResponseRepository:
    """
    Handles submitted responses.
    Responses are written once and never updated.
    """

    def __init__(self, db: Database):
        self.collection: Collection = get_collection(db, "responses")

    def insert(self, response: FormResponse) -> str:
        """Single-document insert; returns the new id."""
        doc = response.model_dump(exclude={"id"})
        result = self.collection.insert_one(doc)
        return str(result.inserted_id)

    def list_for_form(self, form_id: str) -> List[FormResponse]:
        """All responses to a form, newest submission first."""
        cursor = self.collection.find({"form_id": form_id}).sort("submitted_at", DESCENDING)
        return [FormResponse.model_validate(d) for d in serialize_docs(cursor)]

    def find_latest(self, form_id: str, student_id: str) -> Optional[FormResponse]:
        """The student's most recent response to a form, if any."""
        doc = self.collection.find_one(
            {"form_id": form_id, "student_id": student_id},
            sort=[("submitted_at", DESCENDING)],
        )
        return FormResponse.model_validate(serialize_doc(doc)) if doc else None

    def submitted_form_ids(self, student_id: str, form_ids: Iterable[str]) -> Set[str]:
        """Which of `form_ids` the student has answered at least once."""
        cursor = self.collection.find(
            {"student_id": student_id, "form_id": {"$in": list(form_ids)}},
            {"form_id": 1},
        )
        return {doc["form_id"] for doc in cursor}

    def delete_for_form(self, form_id: str) -> int:
        result = self.collection.delete_many({"form_id": form_id})
        return result.deleted_count


# ============================================================
# STUDENTS COLLECTION (profile lookup for auto-fill)
# ============================================================

class StudentProfileRepository:
    """
    Read-only access to student profiles.
    Database failures surface as ExternalServiceError so callers can decide
    whether a missing profile is fatal (submission) or not (export).
    """

    def __init__(self, db: Database):
        self.collection: Collection = get_collection(db, "students")

    @staticmethod
    def _id_query(student_id: str):
        oid = to_object_id(student_id)
        return oid if oid is not None else student_id

    def get(self, student_id: str) -> Optional[StudentProfile]:
        try:
            doc = self.collection.find_one({"_id": self._id_query(student_id)}, {"password": 0})
        except PyMongoError as e:
            raise ExternalServiceError(f"Profile lookup failed: {e}")
        return StudentProfile.model_validate(serialize_doc(doc)) if doc else None

    def get_many(self, student_ids: Iterable[str]) -> Dict[str, StudentProfile]:
        ids = list(set(student_ids))
        try:
            cursor = self.collection.find(
                {"_id": {"$in": [self._id_query(i) for i in ids]}},
                {"password": 0},
            )
            profiles = [StudentProfile.model_validate(d) for d in serialize_docs(cursor)]
        except PyMongoError as e:
            raise ExternalServiceError(f"Profile lookup failed: {e}")
        return {p.id: p for p in profiles}


# ============================================================
# CONVENIENCE FUNCTION: Get all repositories
# ============================================================

def get_mongo_services(db: Database) -> dict:
    """
    Get all MongoDB repository instances.

    Usage:
        repos = get_mongo_services(db)
        repos['templates'].get(form_id)
    """
    return {
        "templates": FormTemplateRepository(db),
        "responses": ResponseRepository(db),
        "profiles": StudentProfileRepository(db),
    }
