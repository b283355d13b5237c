"""
Database module - MongoDB connection helpers.
"""
from placement_forms.db.mongodb import (
    create_mongo_client, get_mongo_db, init_mongo_indexes, test_mongo_connection
)

__all__ = [
    "create_mongo_client",
    "get_mongo_db",
    "init_mongo_indexes",
    "test_mongo_connection",
]
