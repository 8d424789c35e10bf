"""
Database module - MongoDB connection.
"""
from profilehub.db.mongodb import get_profiles_collection, test_mongo_connection

__all__ = [
    "get_profiles_collection",
    "test_mongo_connection"
]
