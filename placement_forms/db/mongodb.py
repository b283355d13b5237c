"""
MongoDB Connection Utility

MongoDB stores:
- Form templates (fields embedded in the template document)
- Student responses to those templates
- Student profiles (read-only here, written by the account service)

WHY MongoDB for these?
- Schema-flexible: every template has its own field list
- Document-oriented: a template owns its fields, a response owns its answers
- No joins needed: responses snapshot the labels they were written under
"""
import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from placement_forms.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


# Collection name constants (avoid typos)
COLLECTIONS = {
    "form_templates": "form_templates",
    "responses": "user_responses",
    "students": "students",
}


def create_mongo_client(settings: Settings = None) -> MongoClient:
    """New client; pymongo pools connections internally, so build one per process."""
    settings = settings or get_settings()
    return MongoClient(settings.mongodb_uri)


def get_mongo_db(client: MongoClient, settings: Settings = None) -> Database:
    """Get the form engine database"""
    settings = settings or get_settings()
    return client[settings.mongodb_db]


def get_collection(db: Database, name: str) -> Collection:
    """
    Get a specific collection by its COLLECTIONS key.
    - form_templates: Admin-authored form definitions
    - responses: One document per submission
    - students: Student profiles used for auto-fill
    """
    return db[COLLECTIONS[name]]


def test_mongo_connection(client: MongoClient) -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        # ping command checks connection
        client.admin.command('ping')
        return True
    except PyMongoError as e:
        logger.warning(f"MongoDB connection failed: {e}")
        return False


def init_mongo_indexes(db: Database):
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    templates = get_collection(db, "form_templates")
    responses = get_collection(db, "responses")

    # Admin form list, newest edit first
    templates.create_index([("admin_id", ASCENDING), ("updated_at", DESCENDING)])
    # Student form list
    templates.create_index([("published", ASCENDING), ("created_at", DESCENDING)])

    # "Has this student submitted?" lookups
    responses.create_index([("form_id", ASCENDING), ("student_id", ASCENDING)])
    # Export and admin views, newest submission first
    responses.create_index([("form_id", ASCENDING), ("submitted_at", DESCENDING)])

    logger.info("MongoDB indexes created successfully")
